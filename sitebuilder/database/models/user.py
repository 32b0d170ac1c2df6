"""
用户模型

站点所有者，使用邮箱 + 密码登录
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from sitebuilder.database.base import Base, TimestampMixin, generate_prefixed_id


class UserRole:
    """用户角色常量"""
    ADMIN = "admin"
    USER = "user"


class User(Base, TimestampMixin):
    """用户实体"""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(50),
        primary_key=True,
        default=lambda: generate_prefixed_id("usr"),
    )

    # 登录凭据
    email: Mapped[str] = mapped_column(String(200), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(200), nullable=False)

    # 用户信息
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(String(20), default=UserRole.USER, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # 找回密码（只存令牌摘要）
    reset_password_token: Mapped[Optional[str]] = mapped_column(String(100), index=True)
    reset_password_expires: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
