"""
站点 API

站点创建（含默认主题与页面）、查询、更新、菜单、状态与级联删除
"""

from typing import List

from fastapi import APIRouter, status

from sitebuilder.api.deps import DB, CurrentUser, Services, ensure_owner
from sitebuilder.api.v1.schemas.page import PageSummary
from sitebuilder.api.v1.schemas.theme import ThemeResponse
from sitebuilder.api.v1.schemas.site import (
    MenuUpdate,
    SiteCreate,
    SiteDetailResponse,
    SiteResponse,
    SiteUpdate,
    StatusUpdate,
)
from sitebuilder.database.models import SiteStatus
from sitebuilder.services.site_registry import ResolvedSite

router = APIRouter()


def _detail(resolved: ResolvedSite) -> SiteDetailResponse:
    """读取时拼装的站点 -> 响应"""
    return SiteDetailResponse(
        **SiteResponse.model_validate(resolved.site).model_dump(),
        theme=ThemeResponse.model_validate(resolved.theme) if resolved.theme else None,
        pages=[PageSummary.model_validate(page) for page in resolved.pages],
    )


@router.get("", response_model=List[SiteResponse])
async def list_my_sites(db: DB, services: Services, current_user: CurrentUser):
    """获取当前用户的站点列表"""
    return await services.registry.list_by_owner(db, current_user.id)


@router.post("", response_model=SiteDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_site(data: SiteCreate, db: DB, services: Services, current_user: CurrentUser):
    """创建站点，同时创建默认主题与四个默认页面"""
    resolved = await services.orchestrator.create_site_with_defaults(
        db,
        owner_id=current_user.id,
        name=data.name,
        domain=data.domain,
        description=data.description,
        logo_url=data.logo_url,
    )
    return _detail(resolved)


@router.get("/domain/{domain}", response_model=SiteDetailResponse)
async def get_site_by_domain(domain: str, db: DB, services: Services):
    """按域名获取站点（公开接口）"""
    return _detail(await services.registry.get_by_domain(db, domain))


@router.get("/{site_id}", response_model=SiteDetailResponse)
async def get_site(site_id: str, db: DB, services: Services, current_user: CurrentUser):
    """获取站点详情"""
    resolved = await services.registry.get_by_id(db, site_id)
    ensure_owner(resolved.site, current_user)
    return _detail(resolved)


@router.patch("/{site_id}", response_model=SiteResponse)
async def update_site(
    site_id: str,
    data: SiteUpdate,
    db: DB,
    services: Services,
    current_user: CurrentUser,
):
    """更新站点"""
    ensure_owner(await services.registry.get(db, site_id), current_user)
    return await services.registry.update(db, site_id, data.model_dump(exclude_unset=True))


@router.put("/{site_id}/menu", response_model=SiteResponse)
async def update_menu(
    site_id: str,
    data: MenuUpdate,
    db: DB,
    services: Services,
    current_user: CurrentUser,
):
    """替换头部菜单"""
    ensure_owner(await services.registry.get(db, site_id), current_user)
    return await services.registry.update_menu(db, site_id, data.menu_items)


@router.put("/{site_id}/status", response_model=SiteResponse)
async def update_status(
    site_id: str,
    data: StatusUpdate,
    db: DB,
    services: Services,
    current_user: CurrentUser,
):
    """更新站点状态"""
    ensure_owner(await services.registry.get(db, site_id), current_user)
    return await services.registry.update_status(db, site_id, data.status)


@router.delete("/{site_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_site(site_id: str, db: DB, services: Services, current_user: CurrentUser) -> None:
    """删除站点及其全部主题与页面"""
    ensure_owner(await services.registry.get(db, site_id), current_user)
    await services.orchestrator.delete_site_cascade(db, site_id)


@router.post("/{site_id}/publish", response_model=SiteResponse)
async def publish_site(site_id: str, db: DB, services: Services, current_user: CurrentUser):
    """发布站点（update_status 的快捷方式）"""
    ensure_owner(await services.registry.get(db, site_id), current_user)
    return await services.registry.update_status(db, site_id, SiteStatus.PUBLISHED.value)


@router.post("/{site_id}/archive", response_model=SiteResponse)
async def archive_site(site_id: str, db: DB, services: Services, current_user: CurrentUser):
    """归档站点"""
    ensure_owner(await services.registry.get(db, site_id), current_user)
    return await services.registry.update_status(db, site_id, SiteStatus.ARCHIVED.value)
