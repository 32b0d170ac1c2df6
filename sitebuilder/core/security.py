"""
安全模块

- 密码哈希（bcrypt）
- 访问令牌签发与校验（JWT，HS256）
- 找回密码令牌：明文只出现在邮件链接里，库中只存 SHA-256 摘要
"""

import hashlib
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from sitebuilder.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


@dataclass
class AccessClaims:
    """访问令牌载荷"""

    user_id: str
    expires_at: datetime


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """为用户签发访问令牌"""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES))

    claims = {
        "sub": user_id,
        "iat": now,
        "exp": expire,
        "type": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[AccessClaims]:
    """
    校验访问令牌

    签名错误、已过期、类型不是 access 或缺少 sub 时返回 None
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None

    if payload.get("type") != ACCESS_TOKEN_TYPE or not payload.get("sub"):
        return None

    return AccessClaims(
        user_id=payload["sub"],
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )


def generate_reset_token() -> str:
    """生成找回密码令牌（20 字节 = 40 字符 hex）"""
    return secrets.token_hex(20)


def hash_token(token: str) -> str:
    """对 token 进行 SHA-256 哈希"""
    return hashlib.sha256(token.encode()).hexdigest()
