"""
帖子与信息流数据模型
"""

from typing import Optional, List, Literal, Union
from pydantic import BaseModel, Field
from datetime import datetime

from .user import UserSummary


class PostCreate(BaseModel):
    """发帖 / 发嵌套帖子请求（正文、图片、视频至少一项）"""
    text: Optional[str] = Field(None, description="正文")
    image_url: Optional[str] = Field(None, max_length=512, description="图片URL")
    video_url: Optional[str] = Field(None, max_length=512, description="视频URL")


class PostUpdate(BaseModel):
    """编辑帖子请求"""
    text: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=512)
    video_url: Optional[str] = Field(None, max_length=512)


class EnrichedPost(BaseModel):
    """带互动统计的帖子"""
    post_id: str
    author: Optional[UserSummary] = None
    parent_id: Optional[str] = Field(None, description="父帖子ID（嵌套帖子）")
    text: Optional[str] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    like_count: int = 0
    is_liked: bool = False
    nested_count: int = 0
    is_nested: bool = False
    repost_count: int = 0
    is_reposted: bool = False
    created_at: datetime
    updated_at: datetime


class PostFeedItem(EnrichedPost):
    """信息流中的原创帖子"""
    kind: Literal["post"] = "post"


class RepostFeedItem(BaseModel):
    """信息流中的转发"""
    kind: Literal["repost"] = "repost"
    repost_id: str
    reposted_by: Optional[UserSummary] = None
    reposted_at: datetime
    comment: Optional[str] = None
    original_post: EnrichedPost


FeedItem = Union[PostFeedItem, RepostFeedItem]


class FeedPage(BaseModel):
    """信息流分页结果"""
    items: List[FeedItem] = Field(default_factory=list)
    offset: int = 0
    limit: int = 50
    total: int = 0
