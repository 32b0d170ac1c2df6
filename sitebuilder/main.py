"""
Site Builder - Core Backend 主入口

职责:
- 用户注册、登录与找回密码
- 站点创建（默认主题 + 默认页面）、查询与级联删除
- 主题与页面管理
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sitebuilder import __version__
from sitebuilder.api import router as api_router
from sitebuilder.core.config import settings
from sitebuilder.core.exceptions import SiteBuilderError
from sitebuilder.core.logging import get_logger, setup_logging
from sitebuilder.database.engine import close_db, init_db
from sitebuilder.services.container import SiteBuilderServices, build_services

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理"""
    setup_logging()
    await init_db()
    logger.info("app_started", env=settings.ENV)
    yield
    await close_db()


def create_app(services: SiteBuilderServices | None = None) -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="Site Builder - Core Backend",
        description="多租户建站后端：站点、主题、页面与组件树",
        version=__version__,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    # 目录服务无状态，进程内构建一次
    app.state.services = services or build_services()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(SiteBuilderError)
    async def site_builder_error_handler(request: Request, exc: SiteBuilderError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("request_failed", path=request.url.path, code=exc.code, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    async def health_check() -> dict:
        """健康检查端点"""
        return {"status": "healthy", "service": "sitebuilder", "version": __version__}

    return app


app = create_app()
