"""
数据库模块

提供 SQLAlchemy 2.0 异步数据库支持
"""

from sitebuilder.database.engine import (
    engine,
    async_session_maker,
    build_engine,
    build_session_maker,
    get_db,
    init_db,
    close_db,
)
from sitebuilder.database.base import (
    Base,
    JSONType,
    TimestampMixin,
    generate_prefixed_id,
    utcnow,
)

__all__ = [
    # Engine
    "engine",
    "async_session_maker",
    "build_engine",
    "build_session_maker",
    "get_db",
    "init_db",
    "close_db",
    # Base
    "Base",
    "JSONType",
    "TimestampMixin",
    "generate_prefixed_id",
    "utcnow",
]
