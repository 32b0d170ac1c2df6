"""
站点 API Schemas

请求体字段均为可选，必填校验由 SiteRegistry 统一完成
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from sitebuilder.api.v1.schemas.page import PageSummary
from sitebuilder.api.v1.schemas.theme import ThemeResponse


class SiteCreate(BaseModel):
    """创建站点"""
    name: Optional[str] = Field(None, max_length=200, description="站点名称")
    domain: Optional[str] = Field(None, max_length=255, description="域名（全局唯一）")
    description: Optional[str] = Field(None, description="描述")
    logo_url: Optional[str] = Field(None, max_length=500, description="Logo URL")


class SiteUpdate(BaseModel):
    """更新站点（owner 不可修改）"""
    name: Optional[str] = Field(None, max_length=200)
    domain: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    theme_id: Optional[str] = Field(None, description="当前主题，必须属于本站点")
    navigation: Optional[dict[str, Any]] = None
    settings: Optional[dict[str, Any]] = None
    status: Optional[str] = Field(None, description="draft/published/archived")


class MenuUpdate(BaseModel):
    """替换头部菜单"""
    menu_items: Any = Field(None, description="[{label, url, is_external, children}]")


class StatusUpdate(BaseModel):
    """更新站点状态"""
    status: Optional[str] = Field(None, description="draft/published/archived")


class SiteResponse(BaseModel):
    """站点响应"""
    id: str
    owner_id: str
    name: str
    domain: Optional[str]
    description: Optional[str]
    theme_id: Optional[str]
    navigation: dict[str, Any]
    settings: dict[str, Any]
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SiteDetailResponse(SiteResponse):
    """站点详情（含主题与页面）"""
    theme: Optional[ThemeResponse] = None
    pages: list[PageSummary] = Field(default_factory=list)
