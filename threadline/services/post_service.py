"""
帖子服务

发帖、嵌套帖子、编辑与删除（墓碑）。
"""

from typing import Optional, List

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.config.settings import settings
from threadline.db.dao import PostDAO
from threadline.db.models.post import Post
from threadline.models import PostCreate, PostUpdate, EnrichedPost
from threadline.services.engagement_service import EngagementService
from threadline.utils.exceptions import ValidationError, NotFoundError, AuthorizationError
from threadline.utils.logger_config import operation_logger
from threadline.utils.pagination import normalize_page


def _validate_content(text: Optional[str], image_url: Optional[str], video_url: Optional[str]):
    """正文、图片、视频至少一项；正文不超过上限"""
    if not (text and text.strip()) and not image_url and not video_url:
        raise ValidationError("Post must have text, an image or a video", code="EMPTY_POST")
    if text and len(text) > settings.MAX_POST_LENGTH:
        raise ValidationError(
            f"Post text must be at most {settings.MAX_POST_LENGTH} characters",
            code="TEXT_TOO_LONG"
        )


class PostService:
    """帖子服务"""

    @staticmethod
    async def _get_owned(session: AsyncSession, user_id: str, post_id: str) -> Post:
        post = await PostDAO.get_by_id(session, post_id)
        if not post:
            raise NotFoundError("Post not found", code="POST_NOT_FOUND")
        if post.user_id != user_id:
            raise AuthorizationError("You can only modify your own posts")
        return post

    @staticmethod
    @operation_logger("content", "create_post")
    async def create_post(
        session: AsyncSession,
        user_id: str,
        data: PostCreate,
        parent_id: Optional[str] = None
    ) -> EnrichedPost:
        """
        发帖

        Args:
            session: 数据库会话
            user_id: 作者ID
            data: 帖子内容
            parent_id: 父帖子ID（发嵌套帖子时），父帖子必须存在

        Returns:
            EnrichedPost
        """
        _validate_content(data.text, data.image_url, data.video_url)

        if parent_id is not None and not await PostDAO.get_by_id(session, parent_id):
            raise NotFoundError("Parent post not found", code="POST_NOT_FOUND")

        post = await PostDAO.create(
            session,
            user_id=user_id,
            text=data.text,
            image_url=data.image_url,
            video_url=data.video_url,
            parent_id=parent_id,
        )

        logger.info(f"📝 Post created: {post.id} by {user_id}" + (f" under {parent_id}" if parent_id else ""))
        return await EngagementService.annotate_post(session, post, user_id)

    @staticmethod
    async def get_post(
        session: AsyncSession,
        post_id: str,
        viewer_id: Optional[str] = None
    ) -> EnrichedPost:
        """获取单个帖子"""
        post = await PostDAO.get_by_id(session, post_id)
        if not post:
            raise NotFoundError("Post not found", code="POST_NOT_FOUND")
        return await EngagementService.annotate_post(session, post, viewer_id)

    @staticmethod
    async def list_posts(
        session: AsyncSession,
        viewer_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[EnrichedPost]:
        """全站最新帖子（含嵌套帖子，按时间倒序）"""
        offset, limit = normalize_page(offset, limit)

        posts = await PostDAO.list_recent(session, limit, offset)
        return await EngagementService.annotate_posts(session, posts, viewer_id)

    @staticmethod
    async def get_nested_posts(
        session: AsyncSession,
        post_id: str,
        viewer_id: Optional[str] = None
    ) -> List[EnrichedPost]:
        """获取帖子下的嵌套帖子（按时间倒序）"""
        if not await PostDAO.get_by_id(session, post_id):
            raise NotFoundError("Post not found", code="POST_NOT_FOUND")

        children = await PostDAO.get_by_parent(session, post_id)
        return await EngagementService.annotate_posts(session, children, viewer_id)

    @staticmethod
    @operation_logger("content", "update_post")
    async def update_post(
        session: AsyncSession,
        user_id: str,
        post_id: str,
        data: PostUpdate
    ) -> EnrichedPost:
        """
        编辑自己的帖子

        Raises:
            NotFoundError: 帖子不存在
            AuthorizationError: 不是作者
            ValidationError: 编辑后内容为空或超长
        """
        post = await PostService._get_owned(session, user_id, post_id)

        changes = data.model_dump(exclude_unset=True)
        _validate_content(
            changes.get("text", post.text),
            changes.get("image_url", post.image_url),
            changes.get("video_url", post.video_url),
        )

        post = await PostDAO.update(session, post, changes)
        return await EngagementService.annotate_post(session, post, user_id)

    @staticmethod
    @operation_logger("content", "delete_post")
    async def delete_post(session: AsyncSession, user_id: str, post_id: str):
        """删除自己的帖子（墓碑，嵌套帖子与互动记录保留）"""
        post = await PostService._get_owned(session, user_id, post_id)
        await PostDAO.soft_delete(session, post)
        logger.info(f"🗑️  Post tombstoned: {post_id}")


# 全局服务实例
post_service = PostService()
