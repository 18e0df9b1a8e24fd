"""
关注模块路由
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.models import ApiResponse
from threadline.api.deps import get_current_user, get_current_user_optional, get_db_session
from threadline.services.follow_service import follow_service

router = APIRouter()


@router.post("/user/{user_id}/follow", response_model=ApiResponse)
async def toggle_follow(
    user_id: str,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """
    关注 / 取消关注用户

    - 需要登录
    - 不能关注自己
    """
    result = await follow_service.toggle_follow(session, current_user["user_id"], user_id)
    return ApiResponse(data=result, message=f"User {result.action}")


@router.get("/user/{username}/following", response_model=ApiResponse)
async def get_following_list(
    username: str,
    limit: Optional[int] = Query(None),
    offset: int = Query(0),
    current_user: Optional[dict] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_db_session)
):
    """
    获取用户的关注列表

    - 游客可查看
    - 支持分页
    """
    viewer_id = current_user["user_id"] if current_user else None
    users = await follow_service.get_following_list(session, username, viewer_id, limit, offset)
    return ApiResponse(data=users)


@router.get("/user/{username}/followers", response_model=ApiResponse)
async def get_follower_list(
    username: str,
    limit: Optional[int] = Query(None),
    offset: int = Query(0),
    current_user: Optional[dict] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_db_session)
):
    """获取用户的粉丝列表"""
    viewer_id = current_user["user_id"] if current_user else None
    users = await follow_service.get_follower_list(session, username, viewer_id, limit, offset)
    return ApiResponse(data=users)
