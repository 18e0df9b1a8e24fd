"""
转发模块路由
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.models import ApiResponse, RepostCreate
from threadline.api.deps import get_current_user, get_current_user_optional, get_db_session
from threadline.services.repost_service import repost_service

router = APIRouter()


@router.post("/posts/{post_id}/repost", response_model=ApiResponse)
async def create_repost(
    post_id: str,
    data: Optional[RepostCreate] = None,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """
    转发帖子

    - 可附带最多 256 字符的附言
    - 可以多次转发同一帖子
    """
    comment = data.comment if data else None
    repost = await repost_service.create_repost(session, current_user["user_id"], post_id, comment)
    return ApiResponse(data=repost, message="Reposted")


@router.get("/posts/{post_id}/reposts", response_model=ApiResponse)
async def get_post_reposts(
    post_id: str,
    limit: Optional[int] = Query(None),
    offset: int = Query(0),
    session: AsyncSession = Depends(get_db_session)
):
    """获取帖子的转发记录"""
    reposts = await repost_service.get_post_reposts(session, post_id, limit, offset)
    return ApiResponse(data=reposts)


@router.get("/user/{username}/reposts", response_model=ApiResponse)
async def get_user_reposts(
    username: str,
    limit: Optional[int] = Query(None),
    offset: int = Query(0),
    current_user: Optional[dict] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_db_session)
):
    """获取用户的转发（含原帖互动数据）"""
    viewer_id = current_user["user_id"] if current_user else None
    items = await repost_service.get_user_reposts(session, username, viewer_id, limit, offset)
    return ApiResponse(data=items)


@router.get("/reposts", response_model=ApiResponse)
async def list_reposts(
    limit: Optional[int] = Query(None),
    offset: int = Query(0),
    current_user: Optional[dict] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_db_session)
):
    """全站最新转发"""
    viewer_id = current_user["user_id"] if current_user else None
    items = await repost_service.list_reposts(session, viewer_id, limit, offset)
    return ApiResponse(data=items)
