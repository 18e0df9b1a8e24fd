"""
评论相关数据模型
"""

from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime

from .target import TargetKind
from .user import UserSummary


class CommentCreate(BaseModel):
    """创建评论 / 回复请求"""
    text: str = Field(..., min_length=1, description="评论内容")
    parent_id: Optional[str] = Field(None, description="父评论ID（回复）")
    image_url: Optional[str] = Field(None, max_length=512)
    video_url: Optional[str] = Field(None, max_length=512)


class CommentUpdate(BaseModel):
    """编辑评论请求"""
    text: str = Field(..., min_length=1)


class EnrichedComment(BaseModel):
    """带互动统计的评论"""
    comment_id: str
    kind: TargetKind = TargetKind.COMMENT
    post_id: str
    parent_id: Optional[str] = None
    user: Optional[UserSummary] = None
    text: str
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    like_count: int = 0
    is_liked: bool = False
    reply_count: int = 0
    created_at: datetime
    updated_at: datetime
