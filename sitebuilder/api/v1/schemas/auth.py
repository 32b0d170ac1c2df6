"""
认证 API Schemas
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    """注册请求"""
    email: Optional[str] = None
    password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class LoginRequest(BaseModel):
    """登录请求"""
    email: Optional[str] = None
    password: Optional[str] = None


class ForgotPasswordRequest(BaseModel):
    email: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    password: Optional[str] = None


class UserInfo(BaseModel):
    """用户信息"""
    id: str
    email: str
    first_name: str
    last_name: str
    role: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    """令牌响应"""
    access_token: str
    token_type: str = "bearer"
    user: UserInfo


class MessageResponse(BaseModel):
    success: bool = True
    message: str
