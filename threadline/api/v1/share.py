"""
分享模块路由
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.models import ApiResponse, ShareCreate
from threadline.api.deps import get_current_user, get_db_session
from threadline.services.share_service import share_service

router = APIRouter()


@router.post("/share/{target_type}/{target_id}", response_model=ApiResponse)
async def share(
    target_type: str,
    target_id: str,
    data: Optional[ShareCreate] = None,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """记录一次分享（target_type: post / comment / reply）"""
    message = data.message if data else None
    result = await share_service.share(session, current_user["user_id"], target_type, target_id, message)
    return ApiResponse(data=result, message="Shared")


@router.get("/share/{target_type}/{target_id}", response_model=ApiResponse)
async def get_shares(
    target_type: str,
    target_id: str,
    limit: Optional[int] = Query(None),
    offset: int = Query(0),
    session: AsyncSession = Depends(get_db_session)
):
    """获取某个目标的分享记录"""
    shares = await share_service.get_shares(session, target_type, target_id, limit, offset)
    return ApiResponse(data=shares)
