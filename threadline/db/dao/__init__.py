"""
数据访问对象（DAO）层

封装数据库操作，提供给服务层使用
"""

from .user_dao import UserDAO
from .post_dao import PostDAO
from .comment_dao import CommentDAO
from .like_dao import LikeDAO
from .follow_dao import FollowDAO
from .repost_dao import RepostDAO
from .share_dao import ShareDAO

__all__ = [
    "UserDAO",
    "PostDAO",
    "CommentDAO",
    "LikeDAO",
    "FollowDAO",
    "RepostDAO",
    "ShareDAO",
]
