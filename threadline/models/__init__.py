"""
数据模型模块

导出所有 Pydantic 数据模型，用于 API 请求/响应验证
"""

# 通用响应
from .response import ApiResponse, ErrorResponse, PaginationMeta

# 互动目标
from .target import TargetKind, ContentTarget

# 用户模块
from .user import (
    UserStatus, UserRole, UserCreate, UserLogin, UserUpdate,
    UserSummary, UserProfile, UserListItem, UserCard, UserRoleUpdate, TokenResponse
)

# 帖子与信息流
from .post import (
    PostCreate, PostUpdate, EnrichedPost,
    PostFeedItem, RepostFeedItem, FeedItem, FeedPage
)

# 评论模块
from .comment import CommentCreate, CommentUpdate, EnrichedComment

# 社交关系
from .social import (
    FollowToggleResult, LikeToggleResult,
    RepostCreate, RepostResponse, ShareCreate, ShareResponse, LikedItem
)

__all__ = [
    # Response
    "ApiResponse",
    "ErrorResponse",
    "PaginationMeta",

    # Target
    "TargetKind",
    "ContentTarget",

    # User
    "UserStatus",
    "UserRole",
    "UserCreate",
    "UserLogin",
    "UserUpdate",
    "UserSummary",
    "UserProfile",
    "UserListItem",
    "UserCard",
    "UserRoleUpdate",
    "TokenResponse",

    # Post / Feed
    "PostCreate",
    "PostUpdate",
    "EnrichedPost",
    "PostFeedItem",
    "RepostFeedItem",
    "FeedItem",
    "FeedPage",

    # Comment
    "CommentCreate",
    "CommentUpdate",
    "EnrichedComment",

    # Social
    "FollowToggleResult",
    "LikeToggleResult",
    "RepostCreate",
    "RepostResponse",
    "ShareCreate",
    "ShareResponse",
    "LikedItem",
]
