"""
点赞模块路由
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.models import ApiResponse
from threadline.api.deps import get_current_user, get_current_user_optional, get_db_session
from threadline.services.like_service import like_service

router = APIRouter()


@router.post("/like/{target_type}/{target_id}", response_model=ApiResponse)
async def toggle_like(
    target_type: str,
    target_id: str,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """
    点赞 / 取消点赞

    - target_type: post / comment / reply
    - 已点赞则取消，未点赞则点赞
    """
    result = await like_service.toggle_like(session, current_user["user_id"], target_type, target_id)
    return ApiResponse(data=result, message="Liked" if result.is_liked else "Unliked")


@router.get("/posts/{post_id}/likes", response_model=ApiResponse)
async def get_post_likers(
    post_id: str,
    limit: Optional[int] = Query(None),
    offset: int = Query(0),
    session: AsyncSession = Depends(get_db_session)
):
    """获取点赞了帖子的用户"""
    users = await like_service.get_post_likers(session, post_id, limit, offset)
    return ApiResponse(data=users)


@router.get("/user/{username}/likes", response_model=ApiResponse)
async def get_user_likes(
    username: str,
    target_type: Optional[str] = Query(None, description="post / comment / reply"),
    limit: Optional[int] = Query(None),
    offset: int = Query(0),
    current_user: Optional[dict] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_db_session)
):
    """获取用户点赞过的内容"""
    viewer_id = current_user["user_id"] if current_user else None
    items = await like_service.get_user_likes(session, username, viewer_id, target_type, limit, offset)
    return ApiResponse(data=items)
