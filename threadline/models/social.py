"""
点赞、关注、转发、分享相关数据模型
"""

from typing import Optional, Literal
from pydantic import BaseModel, Field
from datetime import datetime

from .target import TargetKind
from .user import UserSummary
from .post import EnrichedPost
from .comment import EnrichedComment


class FollowToggleResult(BaseModel):
    """关注 / 取消关注结果"""
    action: Literal["followed", "unfollowed"]
    follower_count: int = Field(..., description="被关注者的粉丝数")
    following_count: int = Field(..., description="当前用户的关注数")


class LikeToggleResult(BaseModel):
    """点赞 / 取消点赞结果"""
    target_type: TargetKind
    target_id: str
    is_liked: bool
    like_count: int


class RepostCreate(BaseModel):
    """转发请求"""
    comment: Optional[str] = Field(None, description="转发附言")


class RepostResponse(BaseModel):
    """转发记录"""
    repost_id: str
    user: Optional[UserSummary] = None
    original_post_id: str
    comment: Optional[str] = None
    created_at: datetime


class ShareCreate(BaseModel):
    """分享请求"""
    message: Optional[str] = Field(None, description="分享附言")


class ShareResponse(BaseModel):
    """分享记录"""
    share_id: str
    user_id: str
    target_type: TargetKind
    target_id: str
    message: Optional[str] = None
    created_at: datetime


class LikedItem(BaseModel):
    """用户点赞过的内容（post 与 comment 二选一）"""
    target_type: TargetKind
    target_id: str
    liked_at: datetime
    post: Optional[EnrichedPost] = None
    comment: Optional[EnrichedComment] = None
