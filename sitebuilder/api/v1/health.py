"""
健康检查 API

- GET /health        服务与数据库状态
- GET /health/ready  数据库不可用时返回 503
- GET /health/live   进程存活
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from sitebuilder import __version__
from sitebuilder.api.deps import DB
from sitebuilder.database.health import check_db_health

router = APIRouter()


@router.get("")
async def health_check(db: DB):
    db_status = await check_db_health(db)
    return {
        "status": "healthy" if db_status.healthy else "unhealthy",
        "service": "sitebuilder",
        "version": __version__,
        "database": db_status.to_dict(),
    }


@router.get("/ready")
async def readiness_check(db: DB):
    db_status = await check_db_health(db)
    if not db_status.healthy:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"ready": False, "reason": "database_unavailable"},
        )
    return {"ready": True}


@router.get("/live")
async def liveness_check():
    return {"alive": True}
