"""
业务服务层
"""

from .engagement_service import engagement_service, EngagementService
from .feed_service import feed_service, FeedService
from .user_service import user_service, UserService
from .post_service import post_service, PostService
from .comment_service import comment_service, CommentService
from .follow_service import follow_service, FollowService
from .like_service import like_service, LikeService
from .repost_service import repost_service, RepostService
from .share_service import share_service, ShareService

__all__ = [
    # 聚合与信息流
    "EngagementService",
    "FeedService",
    # 内容服务
    "UserService",
    "PostService",
    "CommentService",
    # 社交服务
    "FollowService",
    "LikeService",
    "RepostService",
    "ShareService",
    # 全局服务实例
    "engagement_service",
    "feed_service",
    "user_service",
    "post_service",
    "comment_service",
    "follow_service",
    "like_service",
    "repost_service",
    "share_service",
]
