"""
账户服务

注册、登录签发令牌、找回密码与重置密码。

找回密码时先落库 reset token 再发送邮件；邮件发送失败会清除刚写入的
token 与过期时间，不保留悬空状态。
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sitebuilder.core.config import settings
from sitebuilder.core.exceptions import (
    NotFound,
    SiteBuilderError,
    Unauthenticated,
    ValidationError,
)
from sitebuilder.core.logging import get_logger
from sitebuilder.core.security import (
    create_access_token,
    generate_reset_token,
    get_password_hash,
    hash_token,
    verify_password,
)
from sitebuilder.database.base import utcnow
from sitebuilder.database.models import User
from sitebuilder.services.notifier import Notifier

logger = get_logger(__name__)


class NotificationFailed(SiteBuilderError):
    """通知发送失败"""

    code = "notification_failed"
    status_code = 502


def _as_utc(value: datetime) -> datetime:
    # SQLite 读回的时间不带时区
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AccountService:
    """账户服务"""

    def __init__(self, notifier: Notifier):
        self.notifier = notifier

    async def get_user(self, db: AsyncSession, user_id: str) -> User:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFound("User", user_id)
        return user

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        return await db.scalar(select(User).where(User.email == email.strip().lower()))

    async def register(
        self,
        db: AsyncSession,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
    ) -> tuple[User, str]:
        """注册用户并签发访问令牌"""
        if not all([email, password, first_name, last_name]):
            raise ValidationError("Please provide all required fields")

        if await self.get_by_email(db, email):
            raise ValidationError("User with this email already exists")

        user = User(
            email=email.strip().lower(),
            hashed_password=get_password_hash(password),
            first_name=first_name,
            last_name=last_name,
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ValidationError("User with this email already exists")

        logger.info("user_registered", user_id=user.id)
        return user, create_access_token(user.id)

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> tuple[User, str]:
        """校验邮箱密码并签发访问令牌"""
        if not email or not password:
            raise ValidationError("Please provide email and password")

        user = await self.get_by_email(db, email)
        if user is None or not verify_password(password, user.hashed_password):
            logger.info("login_failed", email=email)
            raise Unauthenticated("Invalid credentials")

        if not user.is_active:
            raise Unauthenticated("Your account has been deactivated. Please contact support.")

        logger.info("login_succeeded", user_id=user.id)
        return user, create_access_token(user.id)

    async def forgot_password(self, db: AsyncSession, email: str) -> None:
        """
        找回密码

        1. 生成 token，摘要与过期时间落库
        2. 发送重置邮件
        3. 发送失败则清除 token 与过期时间，抛出 NotificationFailed
        """
        if not email:
            raise ValidationError("Please provide your email address")

        user = await self.get_by_email(db, email)
        if user is None:
            raise NotFound("User", email)

        token = generate_reset_token()
        user.reset_password_token = hash_token(token)
        user.reset_password_expires = utcnow() + timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES)
        await db.commit()

        reset_url = f"{settings.FRONTEND_URL}/reset-password/{token}"
        body = (
            "You are receiving this email because you (or someone else) has requested "
            f"a password reset. Please click the link: {reset_url}"
        )
        result = await self.notifier.send(user.email, "Password Reset Request", body)

        if not result.success:
            user.reset_password_token = None
            user.reset_password_expires = None
            await db.commit()
            logger.warning("password_reset_token_cleared", user_id=user.id, error=result.error)
            raise NotificationFailed("Error sending email", error=result.error)

        logger.info("password_reset_requested", user_id=user.id)

    async def reset_password(self, db: AsyncSession, token: str, password: str) -> User:
        """使用有效 token 重置密码"""
        if not password:
            raise ValidationError("Please provide a new password")

        user = await db.scalar(select(User).where(User.reset_password_token == hash_token(token)))
        if (
            user is None
            or user.reset_password_expires is None
            or _as_utc(user.reset_password_expires) <= utcnow()
        ):
            raise ValidationError("Password reset token is invalid or has expired")

        user.hashed_password = get_password_hash(password)
        user.reset_password_token = None
        user.reset_password_expires = None
        await db.commit()

        logger.info("password_reset", user_id=user.id)
        return user
