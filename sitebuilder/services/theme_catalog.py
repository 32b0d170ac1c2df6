"""
主题目录服务 (Theme Catalog)

负责 Theme 实体：
- 同一站点最多一个默认主题，只在 set_default 中主动维护
- 默认主题与站点当前引用的主题不可删除
- 复制主题
"""

from typing import Any, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from sitebuilder.core.exceptions import DefaultThemeProtected, NotFound, ValidationError
from sitebuilder.core.logging import get_logger
from sitebuilder.database.base import utcnow
from sitebuilder.database.models import Site, Theme
from sitebuilder.database.models.theme import EXTRA_STYLE_FIELDS, STYLE_DEFAULTS

logger = get_logger(__name__)

STYLE_FIELDS = frozenset(STYLE_DEFAULTS) | frozenset(EXTRA_STYLE_FIELDS)


def _style_values(values: dict[str, Any]) -> dict[str, Any]:
    """过滤出样式字段；值为 None 的字段交给模型默认值"""
    unknown = set(values) - STYLE_FIELDS
    if unknown:
        raise ValidationError(f"Unknown theme fields: {', '.join(sorted(unknown))}")
    return {key: value for key, value in values.items() if value is not None}


class ThemeCatalog:
    """主题目录"""

    async def get(self, db: AsyncSession, theme_id: str) -> Theme:
        theme = await db.get(Theme, theme_id)
        if theme is None:
            raise NotFound("Theme", theme_id)
        return theme

    async def get_default(self, db: AsyncSession, site_id: str) -> Theme:
        """获取站点默认主题"""
        theme = await db.scalar(
            select(Theme).where(Theme.site_id == site_id, Theme.is_default.is_(True))
        )
        if theme is None:
            raise NotFound("Default theme", site_id)
        return theme

    async def list_by_site(self, db: AsyncSession, site_id: str) -> list[Theme]:
        result = await db.execute(
            select(Theme).where(Theme.site_id == site_id).order_by(Theme.created_at, Theme.id)
        )
        return list(result.scalars().all())

    async def create(
        self,
        db: AsyncSession,
        site_id: str,
        name: str,
        is_default: bool = False,
        **style: Any,
    ) -> Theme:
        """
        创建主题

        不检查默认主题唯一性：is_default=True 仅用于站点初始化
        （此时站点下没有其他主题），其余场景请使用 set_default
        """
        if not name or not site_id or not name.strip():
            raise ValidationError("Missing required fields (name, site)")

        theme = Theme(
            site_id=site_id,
            name=name.strip(),
            is_default=bool(is_default),
            **_style_values(style),
        )
        db.add(theme)
        await db.commit()

        logger.info("theme_created", theme_id=theme.id, site_id=site_id, is_default=theme.is_default)
        return theme

    async def update(self, db: AsyncSession, theme_id: str, patch: dict[str, Any]) -> Theme:
        """更新主题；site_id 与 is_default 忽略"""
        theme = await self.get(db, theme_id)

        patch = {k: v for k, v in patch.items() if k not in ("id", "site", "site_id", "is_default")}
        name = patch.pop("name", None)
        if name is not None:
            if not name.strip():
                raise ValidationError("Theme name cannot be empty")
            theme.name = name.strip()

        for field, value in _style_values(patch).items():
            setattr(theme, field, value)

        theme.touch()
        await db.commit()

        logger.info("theme_updated", theme_id=theme.id)
        return theme

    async def set_default(self, db: AsyncSession, theme_id: str) -> Theme:
        """
        设为默认主题

        已是默认时直接返回；否则在同一事务中先取消同站点其他默认主题，
        再将当前主题设为默认
        """
        theme = await self.get(db, theme_id)
        if theme.is_default:
            return theme

        await db.execute(
            update(Theme)
            .where(
                Theme.site_id == theme.site_id,
                Theme.is_default.is_(True),
                Theme.id != theme.id,
            )
            .values(is_default=False, updated_at=utcnow())
        )
        theme.is_default = True
        theme.touch()
        await db.commit()

        logger.info("theme_default_set", theme_id=theme.id, site_id=theme.site_id)
        return theme

    async def delete(self, db: AsyncSession, theme_id: str) -> None:
        """删除主题；默认主题与站点当前引用的主题不可删除"""
        theme = await self.get(db, theme_id)
        if theme.is_default:
            raise DefaultThemeProtected(theme.id)

        in_use = await db.scalar(select(Site.id).where(Site.theme_id == theme.id).limit(1))
        if in_use is not None:
            raise DefaultThemeProtected(
                theme.id,
                "Cannot delete a theme the site is using. Please switch the site to another theme first.",
            )

        site_id = theme.site_id
        await db.delete(theme)
        await db.commit()

        logger.info("theme_deleted", theme_id=theme_id, site_id=site_id)

    async def clone(self, db: AsyncSession, theme_id: str, new_name: Optional[str]) -> Theme:
        """复制主题：复制全部样式字段，新主题不是默认主题"""
        if not new_name or not new_name.strip():
            raise ValidationError("New theme name is required")

        source = await self.get(db, theme_id)
        styles = source.style_fields()
        # JSON 字段需要独立副本
        styles["button_styles"] = {k: dict(v or {}) for k, v in (styles["button_styles"] or {}).items()}
        styles["fonts"] = [dict(font) for font in styles["fonts"] or []]

        theme = Theme(
            site_id=source.site_id,
            name=new_name.strip(),
            is_default=False,
            **styles,
        )
        db.add(theme)
        await db.commit()

        logger.info("theme_cloned", source_id=source.id, theme_id=theme.id)
        return theme

    async def delete_by_site(self, db: AsyncSession, site_id: str) -> int:
        """删除站点下全部主题（仅供站点级联删除使用，跳过默认主题保护）"""
        result = await db.execute(delete(Theme).where(Theme.site_id == site_id))
        await db.commit()
        return result.rowcount or 0
