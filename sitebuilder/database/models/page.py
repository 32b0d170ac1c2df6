"""
页面模型

页面归属于一个站点，path 在站点内唯一；组件树以 JSON 内嵌存储，
没有独立的组件表
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from sitebuilder.database.base import Base, JSONType, TimestampMixin, generate_prefixed_id


class Page(Base, TimestampMixin):
    """页面实体"""

    __tablename__ = "pages"
    __table_args__ = (
        UniqueConstraint("site_id", "path", name="uq_pages_site_id_path"),
        Index("ix_pages_site_id_is_published", "site_id", "is_published"),
    )

    id: Mapped[str] = mapped_column(
        String(50),
        primary_key=True,
        default=lambda: generate_prefixed_id("pg"),
    )

    # 所属站点，创建后不可变
    site_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("sites.id"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    path: Mapped[str] = mapped_column(String(500), nullable=False)
    # 页面类型，如 home / product-listing / about
    page_type: Mapped[str] = mapped_column("type", String(50), nullable=False)

    title: Mapped[Optional[str]] = mapped_column(String(300))
    description: Mapped[Optional[str]] = mapped_column(Text)
    # {"meta_title", "meta_description", "meta_keywords", "og_image"}
    seo: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict, nullable=False)

    # 组件树（ComponentInstance 的序列化形式）
    components: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, default=list, nullable=False)

    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # 首次发布时写入，之后不再修改
    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<Page(id={self.id}, site_id={self.site_id}, path={self.path})>"
