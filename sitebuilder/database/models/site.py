"""
站点模型

Site 是多租户站点构建器的核心实体：一个用户可以拥有多个站点，
每个站点有一个当前主题、一组页面、导航结构与站点设置
"""

from enum import Enum
from typing import Any, Optional

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sitebuilder.database.base import Base, JSONType, TimestampMixin, generate_prefixed_id


class SiteStatus(str, Enum):
    """站点状态"""
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class Site(Base, TimestampMixin):
    """
    站点实体

    - pages 不落库，以 Page.site_id 为唯一事实来源，读取时按查询拼装
    - theme_id 仅保存主题 ID，归属关系由 SiteRegistry 校验
    """

    __tablename__ = "sites"

    id: Mapped[str] = mapped_column(
        String(50),
        primary_key=True,
        default=lambda: generate_prefixed_id("site"),
    )

    owner_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    # 基本信息
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    domain: Mapped[Optional[str]] = mapped_column(String(255), unique=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text)

    # 当前主题
    theme_id: Mapped[Optional[str]] = mapped_column(String(50), index=True)

    # 导航: {"header_menu_items": [...], "footer_sections": [...]}
    navigation: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict, nullable=False)

    # 设置: logo/favicon、搜索与购物车开关、社交链接、订阅、统计、货币
    settings: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict, nullable=False)

    # 状态: draft | published | archived
    status: Mapped[str] = mapped_column(
        String(20),
        default=SiteStatus.DRAFT.value,
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Site(id={self.id}, domain={self.domain}, name={self.name})>"
