"""
页面 API Schemas
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from sitebuilder.domain.component_tree import ComponentInstance


class PageSEO(BaseModel):
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None
    og_image: Optional[str] = None


class PageCreate(BaseModel):
    """创建页面；组件树由 PageCatalog 校验"""
    site_id: Optional[str] = Field(None, description="所属站点")
    name: Optional[str] = Field(None, max_length=200)
    path: Optional[str] = Field(None, max_length=500)
    page_type: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("type", "page_type"),
        description="页面类型，如 home / product-listing",
    )
    title: Optional[str] = Field(None, max_length=300)
    description: Optional[str] = None
    seo: Optional[PageSEO] = None
    components: Optional[list[Any]] = None
    is_default: bool = False
    is_published: bool = Field(False, validation_alias=AliasChoices("is_published", "published"))


class PageUpdate(BaseModel):
    """更新页面（site_id 不可修改，默认页通过 /default 切换）"""
    name: Optional[str] = Field(None, max_length=200)
    path: Optional[str] = Field(None, max_length=500)
    page_type: Optional[str] = Field(None, validation_alias=AliasChoices("type", "page_type"))
    title: Optional[str] = Field(None, max_length=300)
    description: Optional[str] = None
    seo: Optional[PageSEO] = None
    components: Optional[list[Any]] = None
    is_published: Optional[bool] = Field(None, validation_alias=AliasChoices("is_published", "published"))


class PageClone(BaseModel):
    name: Optional[str] = Field(None, max_length=200, description="新页面名称")
    path: Optional[str] = Field(None, max_length=500, description="新页面路径")


class PageSummary(BaseModel):
    """页面列表项"""
    id: str
    site_id: str
    name: str
    path: str
    page_type: str = Field(serialization_alias="type")
    title: Optional[str]
    is_default: bool
    is_published: bool
    published_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PageResponse(PageSummary):
    """页面详情"""
    description: Optional[str]
    seo: dict[str, Any]
    components: list[ComponentInstance]


class PageListResponse(BaseModel):
    pages: list[PageResponse]
    total: int
