"""
SQLAlchemy 基础模型与混入类

提供：
- Base: 声明式基类
- TimestampMixin: 时间戳字段
- JSONType: PostgreSQL 上使用 JSONB，其余方言使用通用 JSON
- generate_prefixed_id: 带前缀的字符串主键
- is_unique_violation: 判断 IntegrityError 是否来自唯一约束
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_prefixed_id(prefix: str) -> str:
    """
    生成带前缀的 ID

    Args:
        prefix: 前缀，如 "site", "thm", "pg"

    Returns:
        格式: {prefix}-{uuid hex}，如 "site-550e8400e29b41d4a716446655440000"
    """
    return f"{prefix}-{uuid.uuid4().hex}"


def is_unique_violation(exc: IntegrityError) -> bool:
    """SQLite 报 UNIQUE constraint failed，PostgreSQL 报 violates unique constraint"""
    return "unique" in str(exc.orig).lower()


class Base(DeclarativeBase):
    """
    声明式基类

    所有模型都应继承此类
    """

    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }


class TimestampMixin:
    """
    时间戳混入类

    created_at 创建后不再变化，updated_at 每次写入时刷新。
    在 Python 侧取值，保证同一秒内创建的记录也能稳定排序。
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    def touch(self) -> None:
        self.updated_at = utcnow()
