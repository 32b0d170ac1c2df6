"""
API 依赖注入

提供数据库会话、服务容器、当前用户等依赖
"""

from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from sitebuilder.core.exceptions import Forbidden, Unauthenticated
from sitebuilder.core.security import decode_access_token
from sitebuilder.database.engine import get_db
from sitebuilder.database.models import Site, User
from sitebuilder.services.container import SiteBuilderServices

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


def get_services(request: Request) -> SiteBuilderServices:
    """获取进程级服务容器"""
    return request.app.state.services


DB = Annotated[AsyncSession, Depends(get_db)]
Services = Annotated[SiteBuilderServices, Depends(get_services)]


async def get_current_user(
    token: Annotated[Optional[str], Depends(oauth2_scheme)],
    db: DB,
) -> User:
    """
    解析 Bearer 令牌，返回当前登录用户

    令牌缺失、无效、用户不存在或已停用时抛出 Unauthenticated
    """
    if not token:
        raise Unauthenticated("Not authenticated")

    claims = decode_access_token(token)
    if claims is None:
        raise Unauthenticated("Invalid token")

    user = await db.get(User, claims.user_id)
    if user is None or not user.is_active:
        raise Unauthenticated("User not found or inactive")

    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


def ensure_owner(site: Site, user: User) -> None:
    """只有站点所有者可以修改站点及其主题、页面"""
    if site.owner_id != user.id:
        raise Forbidden("No permission to access this site")
