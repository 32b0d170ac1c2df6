"""
认证 API

注册、登录、当前用户、找回密码与重置密码
"""

from fastapi import APIRouter, status

from sitebuilder.api.deps import DB, CurrentUser, Services
from sitebuilder.api.v1.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
    UserInfo,
)
from sitebuilder.core.security import create_access_token

router = APIRouter()


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(data: RegisterRequest, db: DB, services: Services):
    """注册新用户"""
    user, token = await services.accounts.register(
        db,
        email=data.email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
    )
    return TokenResponse(access_token=token, user=UserInfo.model_validate(user))


@router.post("/login", response_model=TokenResponse)
async def login(data: LoginRequest, db: DB, services: Services):
    """
    用户登录

    返回 Bearer 访问令牌与用户信息
    """
    user, token = await services.accounts.authenticate(db, data.email, data.password)
    return TokenResponse(access_token=token, user=UserInfo.model_validate(user))


@router.get("/me", response_model=UserInfo)
async def get_me(current_user: CurrentUser):
    """获取当前登录用户"""
    return current_user


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(data: ForgotPasswordRequest, db: DB, services: Services):
    """发送重置密码邮件"""
    await services.accounts.forgot_password(db, data.email)
    return MessageResponse(message="Email sent")


@router.post("/reset-password/{token}", response_model=TokenResponse)
async def reset_password(token: str, data: ResetPasswordRequest, db: DB, services: Services):
    """使用邮件中的 token 重置密码，成功后直接登录"""
    user = await services.accounts.reset_password(db, token, data.password)
    return TokenResponse(access_token=create_access_token(user.id), user=UserInfo.model_validate(user))
