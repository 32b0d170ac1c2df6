"""
数据库健康检查

在请求会话上执行一次 SELECT 1，记录耗时与错误
"""

import time
from dataclasses import asdict, dataclass, field
from typing import Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sitebuilder.database.base import utcnow


@dataclass
class DBHealthStatus:
    healthy: bool
    latency_ms: float
    dialect: str
    error: Optional[str] = None
    checked_at: str = field(default_factory=lambda: utcnow().isoformat())

    def to_dict(self) -> dict:
        return asdict(self)


async def check_db_health(session: AsyncSession) -> DBHealthStatus:
    started = time.perf_counter()
    dialect = session.bind.dialect.name if session.bind is not None else "unknown"
    error = None

    try:
        await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        error = str(e)

    return DBHealthStatus(
        healthy=error is None,
        latency_ms=round((time.perf_counter() - started) * 1000, 2),
        dialect=dialect,
        error=error,
    )
