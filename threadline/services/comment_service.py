"""
评论服务

处理评论与回复；回复即 parent_id 非空的评论，且必须与父评论属于同一帖子。
"""

from typing import Optional, List

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.config.settings import settings
from threadline.db.dao import CommentDAO, PostDAO, UserDAO
from threadline.models import CommentCreate, CommentUpdate, EnrichedComment
from threadline.services.engagement_service import EngagementService
from threadline.utils.exceptions import ValidationError, NotFoundError, AuthorizationError
from threadline.utils.logger_config import operation_logger
from threadline.utils.pagination import normalize_page


def _validate_text(text: str):
    if not text or not text.strip():
        raise ValidationError("Comment text is required", code="EMPTY_COMMENT")
    if len(text) > settings.MAX_COMMENT_LENGTH:
        raise ValidationError(
            f"Comment must be at most {settings.MAX_COMMENT_LENGTH} characters",
            code="TEXT_TOO_LONG"
        )


class CommentService:
    """评论服务"""

    @staticmethod
    @operation_logger("content", "create_comment")
    async def create_comment(
        session: AsyncSession,
        user_id: str,
        post_id: str,
        data: CommentCreate
    ) -> EnrichedComment:
        """
        发表评论或回复

        Args:
            session: 数据库会话
            user_id: 用户ID
            post_id: 帖子ID
            data: 评论内容（parent_id 非空时为回复）

        Returns:
            EnrichedComment
        """
        _validate_text(data.text)

        if not await PostDAO.get_by_id(session, post_id):
            raise NotFoundError("Post not found", code="POST_NOT_FOUND")

        if data.parent_id:
            parent = await CommentDAO.get_by_id(session, data.parent_id)
            if not parent:
                raise NotFoundError("Parent comment not found", code="COMMENT_NOT_FOUND")
            if parent.post_id != post_id:
                raise ValidationError("Parent comment belongs to another post", code="INVALID_PARENT")

        comment = await CommentDAO.create(
            session,
            post_id=post_id,
            user_id=user_id,
            text=data.text,
            parent_id=data.parent_id,
            image_url=data.image_url,
            video_url=data.video_url,
        )

        logger.info(f"💬 Comment created: {comment.id} on {post_id}")
        enriched = await EngagementService.annotate_comments(session, [comment], user_id)
        return enriched[0]

    @staticmethod
    async def get_post_comments(
        session: AsyncSession,
        post_id: str,
        viewer_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[EnrichedComment]:
        """获取帖子的顶级评论（带回复数）"""
        offset, limit = normalize_page(offset, limit)

        if not await PostDAO.get_by_id(session, post_id):
            raise NotFoundError("Post not found", code="POST_NOT_FOUND")

        comments = await CommentDAO.get_post_comments(session, post_id, limit, offset)
        return await EngagementService.annotate_comments(session, comments, viewer_id)

    @staticmethod
    async def get_comment(
        session: AsyncSession,
        comment_id: str,
        viewer_id: Optional[str] = None
    ) -> EnrichedComment:
        """
        获取单条评论或回复

        Raises:
            NotFoundError: 评论不存在，或所属帖子已删除
        """
        comment = await CommentDAO.get_by_id(session, comment_id)
        if not comment or not await PostDAO.get_by_id(session, comment.post_id):
            raise NotFoundError("Comment not found", code="COMMENT_NOT_FOUND")

        enriched = await EngagementService.annotate_comments(session, [comment], viewer_id)
        return enriched[0]

    @staticmethod
    async def list_comments(
        session: AsyncSession,
        viewer_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[EnrichedComment]:
        """全站最新评论（评论与回复混排，按时间倒序）"""
        offset, limit = normalize_page(offset, limit)

        comments = await CommentDAO.list_recent(session, limit, offset)
        return await EngagementService.annotate_comments(session, comments, viewer_id)

    @staticmethod
    async def get_replies(
        session: AsyncSession,
        comment_id: str,
        viewer_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[EnrichedComment]:
        """获取评论的回复"""
        offset, limit = normalize_page(offset, limit)

        if not await CommentDAO.get_by_id(session, comment_id):
            raise NotFoundError("Comment not found", code="COMMENT_NOT_FOUND")

        replies = await CommentDAO.get_replies(session, comment_id, limit, offset)
        return await EngagementService.annotate_comments(session, replies, viewer_id)

    @staticmethod
    @operation_logger("content", "update_comment")
    async def update_comment(
        session: AsyncSession,
        user_id: str,
        comment_id: str,
        data: CommentUpdate
    ) -> EnrichedComment:
        """编辑自己的评论"""
        _validate_text(data.text)

        comment = await CommentDAO.get_by_id(session, comment_id)
        if not comment:
            raise NotFoundError("Comment not found", code="COMMENT_NOT_FOUND")
        if comment.user_id != user_id:
            raise AuthorizationError("You can only modify your own comments")

        comment = await CommentDAO.update(session, comment, data.text)
        enriched = await EngagementService.annotate_comments(session, [comment], user_id)
        return enriched[0]

    @staticmethod
    async def get_user_comments(
        session: AsyncSession,
        username: str,
        viewer_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[EnrichedComment]:
        """获取用户的评论历史"""
        offset, limit = normalize_page(offset, limit)

        user = await UserDAO.get_by_username(session, username)
        if not user:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")

        comments = await CommentDAO.get_user_comments(session, user.id, limit, offset)
        return await EngagementService.annotate_comments(session, comments, viewer_id)


# 全局服务实例
comment_service = CommentService()
