"""
认证工具

密码哈希（bcrypt）与访问令牌（JWT）。令牌声明：
- sub: 用户ID
- username / role: 签发时的用户名与角色，仅供展示，权限判断以数据库为准
- typ: 固定为 "access"
- iat / exp: 签发与过期时间
"""

from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from passlib.context import CryptContext

from threadline.config.settings import settings
from threadline.utils.exceptions import ValidationError

# 密码加密上下文
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# bcrypt 只使用密码的前 72 字节
BCRYPT_MAX_BYTES = 72

ACCESS_TOKEN_TYPE = "access"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    验证密码

    Args:
        plain_password: 明文密码
        hashed_password: 哈希后的密码

    Returns:
        是否匹配；超长密码一律不匹配
    """
    if len(plain_password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    密码哈希

    Raises:
        ValidationError: 密码超过 bcrypt 的 72 字节上限
    """
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValidationError(
            f"Password must be at most {BCRYPT_MAX_BYTES} bytes",
            code="PASSWORD_TOO_LONG"
        )
    return pwd_context.hash(password)


def create_access_token(
    user_id: str,
    username: str,
    role: str = "user",
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    为用户签发访问令牌

    Args:
        user_id: 用户ID（写入 sub）
        username: 用户名
        role: 用户角色
        expires_delta: 有效期，默认 jwt.expire_minutes

    Returns:
        JWT token 字符串
    """
    issued_at = datetime.utcnow()
    expire = issued_at + (expires_delta or timedelta(minutes=settings.JWT_EXPIRE_MINUTES))

    claims = {
        "sub": user_id,
        "username": username,
        "role": role,
        "typ": ACCESS_TOKEN_TYPE,
        "iat": issued_at,
        "exp": expire,
    }
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    解码访问令牌

    签名错误、已过期、缺少 sub / exp / iat 或类型不是 access 时返回 None
    """
    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require_sub": True, "require_exp": True, "require_iat": True},
        )
    except JWTError:
        return None

    if claims.get("typ") != ACCESS_TOKEN_TYPE:
        return None
    return claims
