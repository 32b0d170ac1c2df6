"""
页面目录服务 (Page Catalog)

负责 Page 实体：
- 站点内 path 唯一
- 默认页不可删除
- 发布状态切换，published_at 仅在首次发布时写入
"""

from typing import Any, Iterable, Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sitebuilder.core.exceptions import DefaultPageProtected, DuplicatePath, NotFound, ValidationError
from sitebuilder.core.logging import get_logger
from sitebuilder.database.base import is_unique_violation, utcnow
from sitebuilder.database.models import Page
from sitebuilder.domain.component_tree import clone_tree, count_nodes, validate_components

logger = get_logger(__name__)

# update() 可修改的字段；site_id / is_default 不在其中
UPDATABLE_FIELDS = (
    "name",
    "path",
    "page_type",
    "title",
    "description",
    "seo",
    "components",
    "is_published",
)


def _require(**fields: Any) -> None:
    missing = [name for name, value in fields.items() if value is None or (isinstance(value, str) and not value.strip())]
    if missing:
        raise ValidationError(f"Missing required fields ({', '.join(missing)})", fields=missing)


class PageCatalog:
    """页面目录"""

    # ============================================================
    # 查询
    # ============================================================

    async def get(self, db: AsyncSession, page_id: str) -> Page:
        """获取页面，不存在抛出 NotFound"""
        page = await db.get(Page, page_id)
        if page is None:
            raise NotFound("Page", page_id)
        return page

    async def get_by_path(
        self,
        db: AsyncSession,
        site_id: str,
        path: str,
        published_only: bool = True,
    ) -> Page:
        """按站点 + path 获取页面（默认只返回已发布页面）"""
        query = select(Page).where(Page.site_id == site_id, Page.path == path)
        if published_only:
            query = query.where(Page.is_published.is_(True))

        page = await db.scalar(query)
        if page is None:
            raise NotFound("Page", f"{site_id}:{path}")
        return page

    async def list_by_site(
        self,
        db: AsyncSession,
        site_id: str,
        published: Optional[bool] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> tuple[list[Page], int]:
        """
        列出站点下的页面

        按 created_at 倒序；本层不强制分页，limit 为空时返回全部

        Returns:
            (pages, total)
        """
        query = select(Page).where(Page.site_id == site_id)

        if published is not None:
            query = query.where(Page.is_published.is_(published))

        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    Page.name.ilike(pattern),
                    Page.title.ilike(pattern),
                    Page.description.ilike(pattern),
                    Page.path.ilike(pattern),
                )
            )

        # 总数
        count_query = select(func.count()).select_from(query.subquery())
        total = await db.scalar(count_query) or 0

        query = query.order_by(Page.created_at.desc(), Page.id.desc())
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        result = await db.execute(query)
        return list(result.scalars().all()), total

    async def _path_taken(
        self,
        db: AsyncSession,
        site_id: str,
        path: str,
        exclude_id: Optional[str] = None,
    ) -> bool:
        query = select(Page.id).where(Page.site_id == site_id, Page.path == path)
        if exclude_id is not None:
            query = query.where(Page.id != exclude_id)
        return await db.scalar(query.limit(1)) is not None

    async def _commit(self, db: AsyncSession, site_id: str, path: Optional[str]) -> None:
        """提交；并发写入撞上 (site_id, path) 唯一约束时转换为 DuplicatePath"""
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            if not is_unique_violation(e):
                raise
            raise DuplicatePath(site_id, path)

    # ============================================================
    # 写入
    # ============================================================

    def _build(
        self,
        site_id: str,
        name: str,
        path: str,
        page_type: str,
        components: Optional[list[Any]] = None,
        is_default: bool = False,
        is_published: bool = False,
        title: Optional[str] = None,
        description: Optional[str] = None,
        seo: Optional[dict[str, Any]] = None,
    ) -> Page:
        _require(name=name, path=path, type=page_type, site=site_id)

        page = Page(
            site_id=site_id,
            name=name.strip(),
            path=path.strip(),
            page_type=page_type.strip(),
            title=title,
            description=description,
            seo=dict(seo or {}),
            components=validate_components(components),
            is_default=bool(is_default),
            is_published=bool(is_published),
        )
        if page.is_published:
            page.published_at = utcnow()
        return page

    async def create(
        self,
        db: AsyncSession,
        site_id: str,
        name: str,
        path: str,
        page_type: str,
        components: Optional[list[Any]] = None,
        is_default: bool = False,
        is_published: bool = False,
        title: Optional[str] = None,
        description: Optional[str] = None,
        seo: Optional[dict[str, Any]] = None,
    ) -> Page:
        """创建页面"""
        page = self._build(
            site_id, name, path, page_type,
            components=components,
            is_default=is_default,
            is_published=is_published,
            title=title,
            description=description,
            seo=seo,
        )

        if await self._path_taken(db, page.site_id, page.path):
            raise DuplicatePath(page.site_id, page.path)

        db.add(page)
        await self._commit(db, page.site_id, page.path)

        logger.info("page_created", page_id=page.id, site_id=page.site_id, path=page.path)
        return page

    async def bulk_create(
        self,
        db: AsyncSession,
        site_id: str,
        specs: Iterable[dict[str, Any]],
    ) -> list[Page]:
        """批量创建页面（站点初始化使用），单次提交"""
        pages: list[Page] = []
        seen: set[str] = set()

        for spec in specs:
            page = self._build(site_id, **spec)
            if page.path in seen or await self._path_taken(db, site_id, page.path):
                raise DuplicatePath(site_id, page.path)
            seen.add(page.path)
            pages.append(page)

        db.add_all(pages)
        await self._commit(db, site_id, None)

        logger.info("pages_bulk_created", site_id=site_id, count=len(pages))
        return pages

    async def update(self, db: AsyncSession, page_id: str, patch: dict[str, Any]) -> Page:
        """
        更新页面

        - site_id / id 忽略（归属不可变）
        - is_default 忽略，切换默认页使用 set_default
        - path 变化时重新检查站点内唯一
        - components / seo 为 null 时置空；is_published 必须是布尔值
        - 首次发布时写入 published_at
        """
        page = await self.get(db, page_id)

        changes = {key: value for key, value in patch.items() if key in UPDATABLE_FIELDS}
        if "type" in patch and "page_type" not in changes:
            changes["page_type"] = patch["type"]

        for field in ("name", "path", "page_type"):
            if field in changes:
                _require(**{field: changes[field]})
                changes[field] = changes[field].strip()

        if "path" in changes and changes["path"] != page.path:
            if await self._path_taken(db, page.site_id, changes["path"], exclude_id=page.id):
                raise DuplicatePath(page.site_id, changes["path"])

        if "components" in changes:
            changes["components"] = validate_components(changes["components"])

        if "seo" in changes:
            seo = changes["seo"]
            if seo is not None and not isinstance(seo, dict):
                raise ValidationError("SEO must be an object", fields=["seo"])
            changes["seo"] = dict(seo or {})

        if "is_published" in changes:
            if not isinstance(changes["is_published"], bool):
                raise ValidationError("is_published must be a boolean", fields=["is_published"])

        for field, value in changes.items():
            setattr(page, field, value)

        if page.is_published and page.published_at is None:
            page.published_at = utcnow()

        page.touch()
        await self._commit(db, page.site_id, page.path)

        logger.info("page_updated", page_id=page.id, fields=sorted(changes))
        return page

    async def delete(self, db: AsyncSession, page_id: str) -> None:
        """删除页面；默认页不可删除"""
        page = await self.get(db, page_id)
        if page.is_default:
            raise DefaultPageProtected(page.id)

        site_id = page.site_id
        await db.delete(page)
        await db.commit()

        logger.info("page_deleted", page_id=page_id, site_id=site_id)

    async def clone(self, db: AsyncSession, page_id: str, new_name: str, new_path: str) -> Page:
        """
        复制页面

        复制 type 和完整组件树；新页面不是默认页，也不发布
        """
        if not new_name or not new_path or not new_name.strip() or not new_path.strip():
            raise ValidationError("New page name and path are required")

        source = await self.get(db, page_id)
        new_path = new_path.strip()

        if await self._path_taken(db, source.site_id, new_path):
            raise DuplicatePath(source.site_id, new_path)

        page = Page(
            site_id=source.site_id,
            name=new_name.strip(),
            path=new_path,
            page_type=source.page_type,
            title=source.title,
            description=source.description,
            seo=dict(source.seo or {}),
            components=clone_tree(source.components),
            is_default=False,
            is_published=False,
        )
        db.add(page)
        await self._commit(db, page.site_id, page.path)

        logger.info(
            "page_cloned",
            source_id=source.id,
            page_id=page.id,
            path=page.path,
            nodes=count_nodes(page.components),
        )
        return page

    async def toggle_published(self, db: AsyncSession, page_id: str) -> Page:
        """
        切换发布状态

        unpublished -> published -> unpublished ...
        published_at 只在第一次发布时写入，取消发布不清除
        """
        page = await self.get(db, page_id)

        page.is_published = not page.is_published
        if page.is_published and page.published_at is None:
            page.published_at = utcnow()

        page.touch()
        await db.commit()

        logger.info("page_publish_toggled", page_id=page.id, is_published=page.is_published)
        return page

    async def set_default(self, db: AsyncSession, page_id: str) -> Page:
        """将页面设为站点默认页，同站点其他页面取消默认"""
        page = await self.get(db, page_id)
        if page.is_default:
            return page

        result = await db.execute(
            select(Page).where(
                Page.site_id == page.site_id,
                Page.is_default.is_(True),
                Page.id != page.id,
            )
        )
        for other in result.scalars().all():
            other.is_default = False
            other.touch()

        page.is_default = True
        page.touch()
        await db.commit()

        logger.info("page_default_set", page_id=page.id, site_id=page.site_id)
        return page

    async def delete_by_site(self, db: AsyncSession, site_id: str) -> int:
        """删除站点下全部页面（仅供站点级联删除使用，跳过默认页保护）"""
        result = await db.execute(delete(Page).where(Page.site_id == site_id))
        await db.commit()
        return result.rowcount or 0
