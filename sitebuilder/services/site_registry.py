"""
站点注册服务 (Site Registry)

负责 Site 实体：身份、域名唯一、导航与设置、状态，以及对主题和页面的引用。
读取时以查询方式拼装主题与页面（Page.site_id 为页面归属的唯一事实来源）。
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sitebuilder.core.exceptions import DuplicateDomain, NotFound, ValidationError
from sitebuilder.core.logging import get_logger
from sitebuilder.database.base import is_unique_violation
from sitebuilder.database.models import Page, Site, SiteStatus, Theme
from sitebuilder.domain.site_config import (
    MenuItem,
    Navigation,
    SiteSettings,
    starter_navigation,
    starter_settings,
)

logger = get_logger(__name__)

# update() 中不可修改的字段
PROTECTED_FIELDS = frozenset({"id", "owner", "owner_id", "created_at", "updated_at", "pages"})

UPDATABLE_FIELDS = frozenset({
    "name",
    "domain",
    "description",
    "theme_id",
    "navigation",
    "settings",
    "status",
})

VALID_STATUSES = tuple(s.value for s in SiteStatus)


@dataclass
class ResolvedSite:
    """读取时拼装的站点视图"""

    site: Site
    theme: Optional[Theme] = None
    pages: list[Page] = field(default_factory=list)


def _pydantic_message(e: PydanticValidationError) -> str:
    err = e.errors()[0]
    location = ".".join(str(part) for part in err["loc"])
    return f"{location}: {err['msg']}" if location else err["msg"]


class SiteRegistry:
    """站点注册表"""

    # ============================================================
    # 查询
    # ============================================================

    async def get(self, db: AsyncSession, site_id: str) -> Site:
        """获取站点实体（不拼装关联）"""
        site = await db.get(Site, site_id)
        if site is None:
            raise NotFound("Site", site_id)
        return site

    async def get_by_id(self, db: AsyncSession, site_id: str) -> ResolvedSite:
        """获取站点并拼装主题与页面"""
        return await self._resolve(db, await self.get(db, site_id))

    async def get_by_domain(self, db: AsyncSession, domain: str) -> ResolvedSite:
        """按域名获取站点并拼装主题与页面"""
        site = await db.scalar(select(Site).where(Site.domain == domain))
        if site is None:
            raise NotFound("Site", domain)
        return await self._resolve(db, site)

    async def list_by_owner(self, db: AsyncSession, owner_id: str) -> list[Site]:
        """列出用户的站点"""
        result = await db.execute(
            select(Site).where(Site.owner_id == owner_id).order_by(Site.created_at.desc())
        )
        return list(result.scalars().all())

    async def _resolve(self, db: AsyncSession, site: Site) -> ResolvedSite:
        theme = None
        if site.theme_id:
            theme = await db.get(Theme, site.theme_id)

        result = await db.execute(
            select(Page).where(Page.site_id == site.id).order_by(Page.created_at, Page.id)
        )
        return ResolvedSite(site=site, theme=theme, pages=list(result.scalars().all()))

    async def _domain_taken(
        self,
        db: AsyncSession,
        domain: str,
        exclude_id: Optional[str] = None,
    ) -> bool:
        query = select(Site.id).where(Site.domain == domain)
        if exclude_id is not None:
            query = query.where(Site.id != exclude_id)
        return await db.scalar(query.limit(1)) is not None

    async def _commit(self, db: AsyncSession, domain: Optional[str]) -> None:
        """提交；并发写入撞上域名唯一约束时转换为 DuplicateDomain"""
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            if not is_unique_violation(e):
                raise
            raise DuplicateDomain(domain or "")

    # ============================================================
    # 写入
    # ============================================================

    async def create(
        self,
        db: AsyncSession,
        owner_id: str,
        name: str,
        domain: str,
        description: Optional[str] = None,
        logo_url: Optional[str] = None,
    ) -> Site:
        """
        创建站点（不含主题与页面）

        状态为 draft，带初始导航骨架与默认设置
        """
        missing = [
            label
            for label, value in (("name", name), ("domain", domain), ("owner", owner_id))
            if not value or not str(value).strip()
        ]
        if missing:
            raise ValidationError(f"Missing required fields ({', '.join(missing)})", fields=missing)

        domain = domain.strip().lower()
        if await self._domain_taken(db, domain):
            raise DuplicateDomain(domain)

        site = Site(
            owner_id=owner_id,
            name=name.strip(),
            domain=domain,
            description=description,
            status=SiteStatus.DRAFT.value,
            navigation=starter_navigation(),
            settings=starter_settings(logo_url),
        )
        db.add(site)
        await self._commit(db, domain)

        logger.info("site_created", site_id=site.id, owner_id=owner_id, domain=domain)
        return site

    async def update(self, db: AsyncSession, site_id: str, patch: dict[str, Any]) -> Site:
        """
        更新站点

        - owner / id / 时间戳字段被剔除
        - domain 变化时重新检查唯一
        - theme_id 必须指向本站点的主题
        - navigation / settings 按结构校验后整体替换
        """
        site = await self.get(db, site_id)

        changes = {
            key: value
            for key, value in patch.items()
            if key not in PROTECTED_FIELDS and key in UPDATABLE_FIELDS
        }
        if "theme" in patch and "theme_id" not in changes:
            changes["theme_id"] = patch["theme"]

        if "name" in changes and (not changes["name"] or not changes["name"].strip()):
            raise ValidationError("Site name cannot be empty")

        if "domain" in changes:
            domain = changes["domain"]
            if domain is not None:
                domain = domain.strip().lower() or None
            if domain and domain != site.domain and await self._domain_taken(db, domain, exclude_id=site.id):
                raise DuplicateDomain(domain)
            changes["domain"] = domain

        if changes.get("theme_id") is not None:
            theme = await db.get(Theme, changes["theme_id"])
            if theme is None:
                raise NotFound("Theme", changes["theme_id"])
            if theme.site_id != site.id:
                raise ValidationError("Theme does not belong to this site")

        if "status" in changes:
            changes["status"] = self._check_status(changes["status"])

        try:
            if "navigation" in changes:
                changes["navigation"] = Navigation.model_validate(changes["navigation"] or {}).model_dump()
            if "settings" in changes:
                changes["settings"] = SiteSettings.model_validate(changes["settings"] or {}).model_dump()
        except PydanticValidationError as e:
            raise ValidationError(_pydantic_message(e))

        for key, value in changes.items():
            setattr(site, key, value)

        site.touch()
        await self._commit(db, site.domain)

        logger.info("site_updated", site_id=site.id, fields=sorted(changes))
        return site

    async def attach_theme(self, db: AsyncSession, site_id: str, theme_id: str) -> Site:
        """更新站点当前主题"""
        return await self.update(db, site_id, {"theme_id": theme_id})

    async def update_menu(self, db: AsyncSession, site_id: str, menu_items: Any) -> Site:
        """替换头部菜单；每一项都必须有非空 label 和 url"""
        if not isinstance(menu_items, list):
            raise ValidationError("Menu items must be an array")

        for item in menu_items:
            if not isinstance(item, dict) or not item.get("label") or not item.get("url"):
                raise ValidationError("Each menu item must have a label and url")

        try:
            items = [MenuItem.model_validate(item).model_dump() for item in menu_items]
        except PydanticValidationError as e:
            raise ValidationError(_pydantic_message(e))

        site = await self.get(db, site_id)
        navigation = dict(site.navigation or {})
        navigation["header_menu_items"] = items
        navigation.setdefault("footer_sections", [])
        site.navigation = navigation
        site.touch()
        await db.commit()

        logger.info("site_menu_updated", site_id=site.id, items=len(items))
        return site

    def _check_status(self, status: Any) -> str:
        if status not in VALID_STATUSES:
            raise ValidationError(
                f"Valid status is required ({', '.join(VALID_STATUSES)})",
                status=status,
            )
        return SiteStatus(status).value

    async def update_status(self, db: AsyncSession, site_id: str, status: Any) -> Site:
        """更新站点状态: draft | published | archived"""
        status = self._check_status(status)

        site = await self.get(db, site_id)
        site.status = status
        site.touch()
        await db.commit()

        logger.info("site_status_updated", site_id=site.id, status=status)
        return site

    async def delete(self, db: AsyncSession, site_id: str) -> None:
        """删除站点实体（仅供级联删除使用，调用前须先删除主题与页面）"""
        site = await self.get(db, site_id)
        await db.delete(site)
        await db.commit()
