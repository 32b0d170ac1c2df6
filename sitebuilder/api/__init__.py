"""
API 路由模块

统一注册所有 API 路由
"""

from fastapi import APIRouter

from sitebuilder.api.v1 import auth, health, pages, sites, themes

router = APIRouter()

# 健康检查
router.include_router(health.router, prefix="/health", tags=["健康检查"])

# 认证
router.include_router(auth.router, prefix="/v1/auth", tags=["认证"])

# 站点
router.include_router(sites.router, prefix="/v1/sites", tags=["站点"])

# 主题与页面（路径中自带 /sites/{site_id} 或 /themes、/pages 前缀）
router.include_router(themes.router, prefix="/v1", tags=["主题"])
router.include_router(pages.router, prefix="/v1", tags=["页面"])
