"""
转发服务

同一用户可以多次转发同一帖子，每次都生成新的转发记录。
"""

from typing import Optional, List, Dict

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.config.settings import settings
from threadline.db.dao import RepostDAO, PostDAO, UserDAO
from threadline.db.models.repost import Repost
from threadline.db.models.user import User
from threadline.models import RepostResponse, RepostFeedItem
from threadline.services.engagement_service import EngagementService, to_user_summary
from threadline.utils.exceptions import ValidationError, NotFoundError
from threadline.utils.logger_config import operation_logger
from threadline.utils.pagination import normalize_page


def _to_response(repost: Repost, user: Optional[User]) -> RepostResponse:
    return RepostResponse(
        repost_id=repost.id,
        user=to_user_summary(user),
        original_post_id=repost.original_post_id,
        comment=repost.comment,
        created_at=repost.created_at,
    )


class RepostService:
    """转发服务"""

    @staticmethod
    @operation_logger("social", "create_repost")
    async def create_repost(
        session: AsyncSession,
        user_id: str,
        post_id: str,
        comment: Optional[str] = None
    ) -> RepostResponse:
        """
        转发帖子

        Args:
            session: 数据库会话
            user_id: 当前用户ID
            post_id: 原帖子ID
            comment: 转发附言（可选）

        Returns:
            RepostResponse

        Raises:
            ValidationError: 附言超长
            NotFoundError: 帖子不存在或已删除
        """
        if comment is not None:
            comment = comment.strip() or None
        if comment and len(comment) > settings.MAX_REPOST_COMMENT_LENGTH:
            raise ValidationError(
                f"Repost comment must be at most {settings.MAX_REPOST_COMMENT_LENGTH} characters",
                code="COMMENT_TOO_LONG"
            )

        post = await PostDAO.get_by_id(session, post_id)
        if not post:
            raise NotFoundError("Post not found", code="POST_NOT_FOUND")

        repost = await RepostDAO.create(session, user_id, post_id, comment)
        user = await UserDAO.get_by_id(session, user_id)

        logger.info(f"🔁 {user_id} reposted {post_id} as {repost.id}")
        return _to_response(repost, user)

    @staticmethod
    async def get_post_reposts(
        session: AsyncSession,
        post_id: str,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[RepostResponse]:
        """获取帖子的转发记录"""
        offset, limit = normalize_page(offset, limit)

        if not await PostDAO.get_by_id(session, post_id):
            raise NotFoundError("Post not found", code="POST_NOT_FOUND")

        reposts = await RepostDAO.get_by_post(session, post_id, limit, offset)
        users = await UserDAO.get_by_ids(session, [repost.user_id for repost in reposts])
        return [_to_response(repost, users.get(repost.user_id)) for repost in reposts]

    @staticmethod
    async def _to_feed_items(
        session: AsyncSession,
        reposts: List[Repost],
        reposters: Dict[str, User],
        viewer_id: Optional[str]
    ) -> List[RepostFeedItem]:
        """转发 + 原帖互动数据；原帖已删除的转发被跳过"""
        originals = await PostDAO.get_by_ids(session, [repost.original_post_id for repost in reposts])
        enriched = {
            item.post_id: item
            for item in await EngagementService.annotate_posts(session, list(originals.values()), viewer_id)
        }

        return [
            RepostFeedItem(
                repost_id=repost.id,
                reposted_by=to_user_summary(reposters.get(repost.user_id)),
                reposted_at=repost.created_at,
                comment=repost.comment,
                original_post=enriched[repost.original_post_id],
            )
            for repost in reposts
            if repost.original_post_id in enriched
        ]

    @staticmethod
    async def get_user_reposts(
        session: AsyncSession,
        username: str,
        viewer_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[RepostFeedItem]:
        """获取用户的转发（附带原帖互动数据）"""
        offset, limit = normalize_page(offset, limit)

        user = await UserDAO.get_by_username(session, username)
        if not user:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")

        reposts = await RepostDAO.get_by_user_ids(session, [user.id], limit, offset)
        return await RepostService._to_feed_items(session, reposts, {user.id: user}, viewer_id)

    @staticmethod
    async def list_reposts(
        session: AsyncSession,
        viewer_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[RepostFeedItem]:
        """全站最新转发"""
        offset, limit = normalize_page(offset, limit)

        reposts = await RepostDAO.list_recent(session, limit, offset)
        reposters = await UserDAO.get_by_ids(session, [repost.user_id for repost in reposts])
        return await RepostService._to_feed_items(session, reposts, reposters, viewer_id)


# 全局服务实例
repost_service = RepostService()
