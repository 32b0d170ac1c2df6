"""
站点编排服务 (Site Orchestrator)

唯一允许在一次逻辑操作中调用多个目录的组件：
- 创建站点并初始化默认主题与页面
- 级联删除站点
- 切换默认主题并同步站点引用
- 发布/取消发布、复制页面与主题

各步骤顺序执行、逐步提交，不保证对同一站点的并发操作原子化。
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from sitebuilder.core.logging import get_logger
from sitebuilder.database.models import Page, Theme
from sitebuilder.domain.site_config import DEFAULT_PAGES, DEFAULT_THEME
from sitebuilder.services.page_catalog import PageCatalog
from sitebuilder.services.site_registry import ResolvedSite, SiteRegistry
from sitebuilder.services.theme_catalog import ThemeCatalog

logger = get_logger(__name__)


class SiteOrchestrator:
    """站点编排"""

    def __init__(self, registry: SiteRegistry, themes: ThemeCatalog, pages: PageCatalog):
        self.registry = registry
        self.themes = themes
        self.pages = pages

    # ============================================================
    # 站点生命周期
    # ============================================================

    async def create_site_with_defaults(
        self,
        db: AsyncSession,
        owner_id: str,
        name: str,
        domain: str,
        description: Optional[str] = None,
        logo_url: Optional[str] = None,
    ) -> ResolvedSite:
        """
        创建站点并初始化默认主题与页面

        步骤：
        1. 创建站点（校验失败或域名重复时直接返回错误）
        2. 创建默认主题（is_default=True，此时站点下没有其他主题）
        3. 站点引用该主题
        4. 批量创建 Home / Products / About / Contact 四个页面
        5. 重新读取站点并拼装主题与页面

        步骤 2-4 任一失败时，删除本次已创建的页面、主题和站点，再抛出原始错误。
        """
        site = await self.registry.create(
            db,
            owner_id=owner_id,
            name=name,
            domain=domain,
            description=description,
            logo_url=logo_url,
        )
        site_id = site.id
        log = logger.bind(site_id=site_id, owner_id=owner_id)

        try:
            theme = await self.themes.create(db, site_id, is_default=True, **DEFAULT_THEME)
            await self.registry.attach_theme(db, site_id, theme.id)
            await self.pages.bulk_create(db, site_id, DEFAULT_PAGES)
        except Exception as e:
            log.warning("site_bootstrap_failed", error=str(e))
            await self._compensate_bootstrap(db, site_id)
            raise

        log.info("site_bootstrapped", theme_id=theme.id, pages=len(DEFAULT_PAGES))
        return await self.registry.get_by_id(db, site_id)

    async def _compensate_bootstrap(self, db: AsyncSession, site_id: str) -> None:
        """回收初始化失败的站点"""
        await db.rollback()
        try:
            await self._delete_dependents(db, site_id)
            await self.registry.delete(db, site_id)
        except Exception:
            logger.exception("site_bootstrap_compensation_failed", site_id=site_id)
            return
        logger.warning("site_bootstrap_compensated", site_id=site_id)

    async def _delete_dependents(self, db: AsyncSession, site_id: str) -> tuple[int, int]:
        pages = await self.pages.delete_by_site(db, site_id)
        themes = await self.themes.delete_by_site(db, site_id)
        return pages, themes

    async def delete_site_cascade(self, db: AsyncSession, site_id: str) -> None:
        """
        级联删除站点

        先删页面，再删主题（跳过默认主题保护），最后删除站点本身
        """
        await self.registry.get(db, site_id)

        pages, themes = await self._delete_dependents(db, site_id)
        await self.registry.delete(db, site_id)

        logger.info("site_deleted", site_id=site_id, pages=pages, themes=themes)

    # ============================================================
    # 主题
    # ============================================================

    async def set_default_theme(self, db: AsyncSession, theme_id: str) -> Theme:
        """设为默认主题，并让站点引用新的默认主题"""
        theme = await self.themes.set_default(db, theme_id)
        await self.registry.attach_theme(db, theme.site_id, theme.id)
        return theme

    async def clone_theme(self, db: AsyncSession, theme_id: str, new_name: str) -> Theme:
        return await self.themes.clone(db, theme_id, new_name)

    # ============================================================
    # 页面
    # ============================================================

    async def publish_page(self, db: AsyncSession, page_id: str) -> Page:
        """发布页面（已发布时不做任何修改）"""
        page = await self.pages.get(db, page_id)
        if page.is_published:
            return page
        return await self.pages.toggle_published(db, page_id)

    async def unpublish_page(self, db: AsyncSession, page_id: str) -> Page:
        """取消发布（未发布时不做任何修改）"""
        page = await self.pages.get(db, page_id)
        if not page.is_published:
            return page
        return await self.pages.toggle_published(db, page_id)

    async def clone_page(self, db: AsyncSession, page_id: str, new_name: str, new_path: str) -> Page:
        return await self.pages.clone(db, page_id, new_name, new_path)
