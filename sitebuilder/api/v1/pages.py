"""
页面 API

页面的 CRUD、复制、发布切换与默认页切换
"""

from typing import Optional

from fastapi import APIRouter, Query, status

from sitebuilder.api.deps import DB, CurrentUser, Services, ensure_owner
from sitebuilder.api.v1.schemas.auth import MessageResponse
from sitebuilder.api.v1.schemas.page import (
    PageClone,
    PageCreate,
    PageListResponse,
    PageResponse,
    PageUpdate,
)
from sitebuilder.core.exceptions import ValidationError
from sitebuilder.database.models import Page
from sitebuilder.services.container import SiteBuilderServices

router = APIRouter()


async def _owned_page(db, services: SiteBuilderServices, page_id: str, user) -> Page:
    page = await services.pages.get(db, page_id)
    ensure_owner(await services.registry.get(db, page.site_id), user)
    return page


@router.get("/sites/{site_id}/pages", response_model=PageListResponse)
async def list_pages(
    site_id: str,
    db: DB,
    services: Services,
    current_user: CurrentUser,
    published: Optional[bool] = Query(None, description="按发布状态筛选"),
    search: Optional[str] = Query(None, description="按名称/标题/描述/路径搜索"),
    limit: Optional[int] = Query(None, ge=1, le=500),
    offset: int = Query(0, ge=0),
):
    """获取站点页面列表（按创建时间倒序）"""
    ensure_owner(await services.registry.get(db, site_id), current_user)
    pages, total = await services.pages.list_by_site(
        db,
        site_id,
        published=published,
        search=search,
        limit=limit,
        offset=offset,
    )
    return PageListResponse(pages=pages, total=total)


@router.get("/sites/{site_id}/pages/by-path", response_model=PageResponse)
async def get_page_by_path(
    site_id: str,
    db: DB,
    services: Services,
    path: str = Query(..., description="页面路径，如 /about"),
):
    """按路径获取已发布页面（公开接口）"""
    return await services.pages.get_by_path(db, site_id, path)


@router.post("/pages", response_model=PageResponse, status_code=status.HTTP_201_CREATED)
async def create_page(data: PageCreate, db: DB, services: Services, current_user: CurrentUser):
    """创建页面"""
    if not data.site_id:
        raise ValidationError("Missing required fields (site)")

    ensure_owner(await services.registry.get(db, data.site_id), current_user)
    return await services.pages.create(
        db,
        data.site_id,
        data.name,
        data.path,
        data.page_type,
        components=data.components,
        is_default=data.is_default,
        is_published=data.is_published,
        title=data.title,
        description=data.description,
        seo=data.seo.model_dump() if data.seo else None,
    )


@router.get("/pages/{page_id}", response_model=PageResponse)
async def get_page(page_id: str, db: DB, services: Services, current_user: CurrentUser):
    """获取页面"""
    return await _owned_page(db, services, page_id, current_user)


@router.patch("/pages/{page_id}", response_model=PageResponse)
async def update_page(
    page_id: str,
    data: PageUpdate,
    db: DB,
    services: Services,
    current_user: CurrentUser,
):
    """更新页面"""
    await _owned_page(db, services, page_id, current_user)
    return await services.pages.update(db, page_id, data.model_dump(exclude_unset=True))


@router.delete("/pages/{page_id}", response_model=MessageResponse)
async def delete_page(page_id: str, db: DB, services: Services, current_user: CurrentUser):
    """删除页面（默认页不可删除）"""
    await _owned_page(db, services, page_id, current_user)
    await services.pages.delete(db, page_id)
    return MessageResponse(message="Page deleted successfully")


@router.post("/pages/{page_id}/clone", response_model=PageResponse, status_code=status.HTTP_201_CREATED)
async def clone_page(
    page_id: str,
    data: PageClone,
    db: DB,
    services: Services,
    current_user: CurrentUser,
):
    """复制页面（含完整组件树）"""
    await _owned_page(db, services, page_id, current_user)
    return await services.orchestrator.clone_page(db, page_id, data.name, data.path)


@router.post("/pages/{page_id}/toggle-published", response_model=PageResponse)
async def toggle_published(page_id: str, db: DB, services: Services, current_user: CurrentUser):
    """切换发布状态"""
    await _owned_page(db, services, page_id, current_user)
    return await services.pages.toggle_published(db, page_id)


@router.post("/pages/{page_id}/publish", response_model=PageResponse)
async def publish_page(page_id: str, db: DB, services: Services, current_user: CurrentUser):
    """发布页面"""
    await _owned_page(db, services, page_id, current_user)
    return await services.orchestrator.publish_page(db, page_id)


@router.post("/pages/{page_id}/unpublish", response_model=PageResponse)
async def unpublish_page(page_id: str, db: DB, services: Services, current_user: CurrentUser):
    """取消发布"""
    await _owned_page(db, services, page_id, current_user)
    return await services.orchestrator.unpublish_page(db, page_id)


@router.post("/pages/{page_id}/default", response_model=PageResponse)
async def set_default_page(page_id: str, db: DB, services: Services, current_user: CurrentUser):
    """设为站点默认页"""
    await _owned_page(db, services, page_id, current_user)
    return await services.pages.set_default(db, page_id)
