"""
数据库 ORM 模型

导出所有 SQLAlchemy 模型类
"""

from threadline.db.base import Base

# 导入所有模型（确保 Base 知道所有表）
from .user import User
from .post import Post
from .comment import Comment
from .like import Like
from .follow import UserFollow
from .repost import Repost
from .share import Share

__all__ = [
    # Base
    "Base",

    # Models
    "User",
    "Post",
    "Comment",
    "Like",
    "UserFollow",
    "Repost",
    "Share",
]
