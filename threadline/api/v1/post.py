"""
帖子模块路由
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.models import ApiResponse, PostCreate, PostUpdate
from threadline.api.deps import get_current_user, get_current_user_optional, get_db_session
from threadline.services.post_service import post_service

router = APIRouter()


@router.post("/posts", response_model=ApiResponse)
async def create_post(
    data: PostCreate,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """
    发帖

    - 正文、图片、视频至少一项
    - 正文最多 280 字符
    """
    post = await post_service.create_post(session, current_user["user_id"], data)
    return ApiResponse(data=post, message="Post created")


@router.get("/posts/{post_id}", response_model=ApiResponse)
async def get_post(
    post_id: str,
    current_user: Optional[dict] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_db_session)
):
    """获取帖子（含互动统计）"""
    viewer_id = current_user["user_id"] if current_user else None
    post = await post_service.get_post(session, post_id, viewer_id)
    return ApiResponse(data=post)


@router.put("/posts/{post_id}", response_model=ApiResponse)
async def update_post(
    post_id: str,
    data: PostUpdate,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """编辑自己的帖子"""
    post = await post_service.update_post(session, current_user["user_id"], post_id, data)
    return ApiResponse(data=post, message="Post updated")


@router.delete("/posts/{post_id}", response_model=ApiResponse)
async def delete_post(
    post_id: str,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """删除自己的帖子"""
    await post_service.delete_post(session, current_user["user_id"], post_id)
    return ApiResponse(message="Post deleted")


@router.post("/posts/{post_id}/nested", response_model=ApiResponse)
async def create_nested_post(
    post_id: str,
    data: PostCreate,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """在帖子下发嵌套帖子"""
    post = await post_service.create_post(session, current_user["user_id"], data, parent_id=post_id)
    return ApiResponse(data=post, message="Nested post created")


@router.get("/posts/{post_id}/nested", response_model=ApiResponse)
async def get_nested_posts(
    post_id: str,
    current_user: Optional[dict] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_db_session)
):
    """获取帖子下的嵌套帖子"""
    viewer_id = current_user["user_id"] if current_user else None
    posts = await post_service.get_nested_posts(session, post_id, viewer_id)
    return ApiResponse(data=posts)


@router.get("/posts", response_model=ApiResponse)
async def list_posts(
    limit: Optional[int] = Query(None),
    offset: int = Query(0),
    current_user: Optional[dict] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_db_session)
):
    """全站最新帖子（探索页）"""
    viewer_id = current_user["user_id"] if current_user else None
    posts = await post_service.list_posts(session, viewer_id, limit, offset)
    return ApiResponse(data=posts)
