"""
信息流路由
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.models import ApiResponse
from threadline.api.deps import get_current_user, get_current_user_optional, get_db_session
from threadline.services.feed_service import feed_service

router = APIRouter()


@router.get("/feed", response_model=ApiResponse)
async def get_feed(
    offset: int = Query(0, description="偏移量"),
    limit: Optional[int] = Query(None, description="每页数量，超出上限时自动收敛"),
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """
    首页信息流

    - 需要登录
    - 自己和关注的人发布的帖子与转发，按时间倒序
    """
    page = await feed_service.get_feed(session, current_user["user_id"], offset, limit)
    return ApiResponse(data=page)


@router.get("/user/{username}/timeline", response_model=ApiResponse)
async def get_user_timeline(
    username: str,
    offset: int = Query(0),
    limit: Optional[int] = Query(None),
    current_user: Optional[dict] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_db_session)
):
    """
    用户时间线

    - 游客可查看
    - 该用户的帖子与转发
    """
    viewer_id = current_user["user_id"] if current_user else None
    page = await feed_service.get_user_timeline(session, username, viewer_id, offset, limit)
    return ApiResponse(data=page)
