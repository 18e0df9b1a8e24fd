"""
点赞服务

点赞不在目标上维护计数，点赞数总是读取时统计。
"""

from typing import Optional, List

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.db.dao import LikeDAO, PostDAO, CommentDAO, UserDAO
from threadline.models import LikeToggleResult, LikedItem, UserSummary, TargetKind
from threadline.services.engagement_service import EngagementService, to_user_summary
from threadline.services.targets import resolve_target, parse_target_kind
from threadline.utils.exceptions import NotFoundError
from threadline.utils.logger_config import operation_logger
from threadline.utils.pagination import normalize_page


class LikeService:
    """点赞服务"""

    @staticmethod
    @operation_logger("social", "toggle_like")
    async def toggle_like(
        session: AsyncSession,
        user_id: str,
        target_type,
        target_id: str
    ) -> LikeToggleResult:
        """
        点赞 / 取消点赞

        Args:
            session: 数据库会话
            user_id: 当前用户ID
            target_type: 目标类型（post / comment / reply）
            target_id: 目标ID

        Returns:
            LikeToggleResult

        Raises:
            ValidationError: 未知的目标类型
            NotFoundError: 目标不存在
        """
        target = await resolve_target(session, target_type, target_id)
        kind = target.kind.value

        existing = await LikeDAO.find(session, user_id, kind, target_id)
        if existing:
            await LikeDAO.delete(session, user_id, kind, target_id)
            is_liked = False
        else:
            try:
                async with session.begin_nested():
                    await LikeDAO.create(session, user_id, kind, target_id)
            except IntegrityError:
                logger.info(f"🔁 Like {user_id} -> {kind}:{target_id} already exists")
            is_liked = True

        counts = await LikeDAO.count_by_targets(session, kind, [target_id])

        logger.info(f"❤️  {user_id} {'liked' if is_liked else 'unliked'} {kind}:{target_id}")
        return LikeToggleResult(
            target_type=target.kind,
            target_id=target_id,
            is_liked=is_liked,
            like_count=counts.get(target_id, 0),
        )

    @staticmethod
    async def get_post_likers(
        session: AsyncSession,
        post_id: str,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[UserSummary]:
        """获取点赞了帖子的用户"""
        offset, limit = normalize_page(offset, limit)

        if not await PostDAO.get_by_id(session, post_id):
            raise NotFoundError("Post not found", code="POST_NOT_FOUND")

        users = await LikeDAO.get_likers(session, TargetKind.POST.value, post_id, limit, offset)
        return [to_user_summary(user) for user in users]

    @staticmethod
    async def get_user_likes(
        session: AsyncSession,
        username: str,
        viewer_id: Optional[str] = None,
        target_type: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[LikedItem]:
        """
        获取用户点赞过的内容（附带查看者视角的互动数据）

        已删除的目标不会出现在结果中。

        Args:
            session: 数据库会话
            username: 用户名
            viewer_id: 查看者ID
            target_type: 只看某一类目标
            limit: 每页数量
            offset: 偏移量

        Returns:
            LikedItem 列表（按点赞时间倒序）
        """
        offset, limit = normalize_page(offset, limit)
        kind = parse_target_kind(target_type).value if target_type else None

        user = await UserDAO.get_by_username(session, username)
        if not user:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")

        likes = await LikeDAO.get_by_user(session, user.id, kind, limit, offset)

        post_ids = [like.target_id for like in likes if like.target_type == TargetKind.POST.value]
        comment_ids = [like.target_id for like in likes if like.target_type != TargetKind.POST.value]

        posts = await PostDAO.get_by_ids(session, post_ids)
        comments = await CommentDAO.get_by_ids(session, comment_ids)

        enriched_posts = {
            item.post_id: item
            for item in await EngagementService.annotate_posts(session, list(posts.values()), viewer_id)
        }
        enriched_comments = {
            item.comment_id: item
            for item in await EngagementService.annotate_comments(session, list(comments.values()), viewer_id)
        }

        items = []
        for like in likes:
            if like.target_type == TargetKind.POST.value:
                post = enriched_posts.get(like.target_id)
                if post:
                    items.append(LikedItem(
                        target_type=TargetKind.POST, target_id=like.target_id,
                        liked_at=like.created_at, post=post
                    ))
            else:
                comment = enriched_comments.get(like.target_id)
                if comment and comment.kind.value == like.target_type:
                    items.append(LikedItem(
                        target_type=comment.kind, target_id=like.target_id,
                        liked_at=like.created_at, comment=comment
                    ))

        return items


# 全局服务实例
like_service = LikeService()
