"""
数据库引擎与会话管理

使用 SQLAlchemy 2.0 异步引擎：生产环境 asyncpg，本地与测试环境 aiosqlite

连接池配置说明：
- pool_size: 连接池中保持的连接数（默认 5）
- max_overflow: 超出 pool_size 后允许的额外连接数（默认 10）
- pool_timeout: 获取连接的超时时间（秒）
- pool_recycle: 连接回收时间（秒），防止数据库断开空闲连接
- pool_pre_ping: 每次获取连接前检测连接是否有效
"""

from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool

from sitebuilder.core.config import settings


def _get_pool_config() -> dict:
    """
    获取连接池配置

    - test: 使用 NullPool（无连接池），每次请求创建新连接
    - SQLite: 使用方言默认连接池
    - 其他: 使用配置中的连接池参数
    """
    if settings.ENV == "test":
        return {"poolclass": NullPool}

    if settings.is_sqlite:
        return {}

    return {
        "poolclass": AsyncAdaptedQueuePool,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
    }


def build_engine(url: str | None = None, **kwargs) -> AsyncEngine:
    """创建异步引擎"""
    options = {"echo": settings.DEBUG and not settings.is_sqlite, "pool_pre_ping": True}
    if url is None:
        url = settings.DATABASE_URL
        options.update(_get_pool_config())
    options.update(kwargs)
    return create_async_engine(url, **options)


def build_session_maker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """创建异步会话工厂"""
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# 创建异步引擎（带连接池）
engine: AsyncEngine = build_engine()

# 创建异步会话工厂
async_session_maker = build_session_maker(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    获取数据库会话依赖

    用于 FastAPI 路由的依赖注入
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """
    检测数据库连接

    在应用启动时调用
    """
    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))


async def close_db() -> None:
    """
    关闭数据库连接

    在应用关闭时调用
    """
    await engine.dispose()
