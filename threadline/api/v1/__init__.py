"""
API v1 路由汇总
"""

from fastapi import APIRouter

from .user import router as user_router
from .feed import router as feed_router
from .post import router as post_router
from .comment import router as comment_router
from .like import router as like_router
from .follow import router as follow_router
from .repost import router as repost_router
from .share import router as share_router

# 创建 v1 API 路由
api_router = APIRouter()

# 信息流路由
api_router.include_router(feed_router, tags=["Feed"])

# 内容与社交路由
api_router.include_router(post_router, tags=["Post"])
api_router.include_router(comment_router, tags=["Comment"])
api_router.include_router(like_router, tags=["Like"])
api_router.include_router(follow_router, tags=["Follow"])
api_router.include_router(repost_router, tags=["Repost"])
api_router.include_router(share_router, tags=["Share"])

# 用户路由
api_router.include_router(user_router, prefix="/user", tags=["User"])
