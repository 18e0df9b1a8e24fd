"""
API 依赖注入 - 认证、数据库连接等
"""

from typing import Optional, AsyncIterator
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.config import settings
from threadline.db.base import get_db
from threadline.db.dao import UserDAO
from threadline.utils.auth import decode_access_token
from threadline.utils.exceptions import AuthenticationError, ServiceUnavailableError

# JWT 认证（缺少凭证时由依赖自行决定是否报错）
security = HTTPBearer(auto_error=False)


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """
    获取数据库会话（依赖注入用）

    Yields:
        AsyncSession: 数据库会话
    """
    if not settings.DATABASE_ENABLED:
        raise ServiceUnavailableError("Database is not enabled", code="DATABASE_DISABLED")

    async for session in get_db():
        yield session


async def _resolve_user(
    credentials: Optional[HTTPAuthorizationCredentials],
    session: AsyncSession
) -> Optional[dict]:
    if not credentials:
        return None

    payload = decode_access_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        return None

    # 已注销用户的 token 一律视为无效
    user = await UserDAO.get_by_id(session, payload["sub"])
    if not user:
        return None

    return {"user_id": user.id, "username": user.username}


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: AsyncSession = Depends(get_db_session)
) -> dict:
    """
    从 JWT Token 中解析当前用户

    Returns:
        用户信息字典 {"user_id": "...", "username": "..."}
    """
    current_user = await _resolve_user(credentials, session)
    if current_user is None:
        raise AuthenticationError("Invalid authentication credentials", code="NOT_AUTHENTICATED")
    return current_user


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: AsyncSession = Depends(get_db_session)
) -> Optional[dict]:
    """
    可选的用户认证（未登录或 token 无效时返回 None）
    """
    return await _resolve_user(credentials, session)
