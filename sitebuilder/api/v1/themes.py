"""
主题 API

主题的 CRUD、复制与默认主题切换
"""

from typing import List

from fastapi import APIRouter, status

from sitebuilder.api.deps import DB, CurrentUser, Services, ensure_owner
from sitebuilder.api.v1.schemas.auth import MessageResponse
from sitebuilder.api.v1.schemas.theme import (
    ThemeClone,
    ThemeCreate,
    ThemeResponse,
    ThemeSummary,
    ThemeUpdate,
)
from sitebuilder.core.exceptions import ValidationError
from sitebuilder.database.models import Theme
from sitebuilder.services.container import SiteBuilderServices

router = APIRouter()


async def _owned_theme(db, services: SiteBuilderServices, theme_id: str, user) -> Theme:
    theme = await services.themes.get(db, theme_id)
    ensure_owner(await services.registry.get(db, theme.site_id), user)
    return theme


@router.get("/sites/{site_id}/themes", response_model=List[ThemeSummary])
async def list_themes(site_id: str, db: DB, services: Services, current_user: CurrentUser):
    """获取站点的全部主题"""
    ensure_owner(await services.registry.get(db, site_id), current_user)
    return await services.themes.list_by_site(db, site_id)


@router.get("/sites/{site_id}/themes/default", response_model=ThemeResponse)
async def get_default_theme(site_id: str, db: DB, services: Services):
    """获取站点默认主题（公开接口，供站点渲染使用）"""
    return await services.themes.get_default(db, site_id)


@router.post("/themes", response_model=ThemeResponse, status_code=status.HTTP_201_CREATED)
async def create_theme(data: ThemeCreate, db: DB, services: Services, current_user: CurrentUser):
    """创建主题"""
    if not data.site_id or not data.name:
        raise ValidationError("Missing required fields (name, site)")

    ensure_owner(await services.registry.get(db, data.site_id), current_user)
    styles = data.model_dump(exclude_unset=True, exclude={"site_id", "name", "is_default"})
    return await services.themes.create(
        db,
        data.site_id,
        data.name,
        is_default=data.is_default,
        **styles,
    )


@router.get("/themes/{theme_id}", response_model=ThemeResponse)
async def get_theme(theme_id: str, db: DB, services: Services, current_user: CurrentUser):
    """获取主题"""
    return await _owned_theme(db, services, theme_id, current_user)


@router.patch("/themes/{theme_id}", response_model=ThemeResponse)
async def update_theme(
    theme_id: str,
    data: ThemeUpdate,
    db: DB,
    services: Services,
    current_user: CurrentUser,
):
    """更新主题"""
    await _owned_theme(db, services, theme_id, current_user)
    return await services.themes.update(db, theme_id, data.model_dump(exclude_unset=True))


@router.delete("/themes/{theme_id}", response_model=MessageResponse)
async def delete_theme(theme_id: str, db: DB, services: Services, current_user: CurrentUser):
    """删除主题（默认主题不可删除）"""
    await _owned_theme(db, services, theme_id, current_user)
    await services.themes.delete(db, theme_id)
    return MessageResponse(message="Theme deleted successfully")


@router.post("/themes/{theme_id}/clone", response_model=ThemeResponse, status_code=status.HTTP_201_CREATED)
async def clone_theme(
    theme_id: str,
    data: ThemeClone,
    db: DB,
    services: Services,
    current_user: CurrentUser,
):
    """复制主题"""
    await _owned_theme(db, services, theme_id, current_user)
    return await services.orchestrator.clone_theme(db, theme_id, data.name)


@router.post("/themes/{theme_id}/default", response_model=ThemeResponse)
async def set_default_theme(theme_id: str, db: DB, services: Services, current_user: CurrentUser):
    """设为站点默认主题"""
    await _owned_theme(db, services, theme_id, current_user)
    return await services.orchestrator.set_default_theme(db, theme_id)
