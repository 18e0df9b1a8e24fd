"""
评论模块路由
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.models import ApiResponse, CommentCreate, CommentUpdate
from threadline.api.deps import get_current_user, get_current_user_optional, get_db_session
from threadline.services.comment_service import comment_service

router = APIRouter()


@router.post("/posts/{post_id}/comments", response_model=ApiResponse)
async def create_comment(
    post_id: str,
    data: CommentCreate,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """
    发表评论

    - 需要登录
    - 传 parent_id 即回复某条评论
    """
    comment = await comment_service.create_comment(session, current_user["user_id"], post_id, data)
    return ApiResponse(data=comment, message="Comment created")


@router.get("/posts/{post_id}/comments", response_model=ApiResponse)
async def get_post_comments(
    post_id: str,
    limit: Optional[int] = Query(None),
    offset: int = Query(0),
    current_user: Optional[dict] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_db_session)
):
    """
    获取帖子评论

    - 游客可查看
    - 只返回顶级评论，附带回复数
    """
    viewer_id = current_user["user_id"] if current_user else None
    comments = await comment_service.get_post_comments(session, post_id, viewer_id, limit, offset)
    return ApiResponse(data=comments)


@router.get("/comments/{comment_id}/replies", response_model=ApiResponse)
async def get_replies(
    comment_id: str,
    limit: Optional[int] = Query(None),
    offset: int = Query(0),
    current_user: Optional[dict] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_db_session)
):
    """获取评论的回复"""
    viewer_id = current_user["user_id"] if current_user else None
    replies = await comment_service.get_replies(session, comment_id, viewer_id, limit, offset)
    return ApiResponse(data=replies)


@router.put("/comments/{comment_id}", response_model=ApiResponse)
async def update_comment(
    comment_id: str,
    data: CommentUpdate,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """编辑自己的评论"""
    comment = await comment_service.update_comment(session, current_user["user_id"], comment_id, data)
    return ApiResponse(data=comment, message="Comment updated")


@router.get("/user/{username}/comments", response_model=ApiResponse)
async def get_user_comments(
    username: str,
    limit: Optional[int] = Query(None),
    offset: int = Query(0),
    current_user: Optional[dict] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_db_session)
):
    """获取用户的评论历史"""
    viewer_id = current_user["user_id"] if current_user else None
    comments = await comment_service.get_user_comments(session, username, viewer_id, limit, offset)
    return ApiResponse(data=comments)


@router.get("/comments", response_model=ApiResponse)
async def list_comments(
    limit: Optional[int] = Query(None),
    offset: int = Query(0),
    current_user: Optional[dict] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_db_session)
):
    """全站最新评论"""
    viewer_id = current_user["user_id"] if current_user else None
    comments = await comment_service.list_comments(session, viewer_id, limit, offset)
    return ApiResponse(data=comments)


@router.get("/comments/{comment_id}", response_model=ApiResponse)
async def get_comment(
    comment_id: str,
    current_user: Optional[dict] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_db_session)
):
    """获取单条评论（含点赞数与回复数）"""
    viewer_id = current_user["user_id"] if current_user else None
    comment = await comment_service.get_comment(session, comment_id, viewer_id)
    return ApiResponse(data=comment)
