"""
互动聚合服务

为一批帖子 / 评论计算点赞数、转发数、嵌套帖子数以及
与当前查看者相关的 is_liked / is_reposted 标记。

每一类统计只发一条查询，然后在内存中拼装；单个统计查询失败时
该字段降级为 0 / False，不影响整批结果。
"""

from typing import Optional, List, Dict, Iterable, Awaitable, Callable, TypeVar

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.db.dao import UserDAO, PostDAO, CommentDAO, LikeDAO, RepostDAO
from threadline.db.models.post import Post
from threadline.db.models.comment import Comment
from threadline.db.models.user import User
from threadline.models import EnrichedPost, EnrichedComment, UserSummary, TargetKind

T = TypeVar("T")


def to_user_summary(user: Optional[User]) -> Optional[UserSummary]:
    """ORM 用户 -> 用户摘要"""
    if user is None:
        return None
    return UserSummary(
        user_id=user.id,
        name=user.name,
        username=user.username,
        avatar_url=user.avatar_url,
    )


def comment_kind(comment: Comment) -> TargetKind:
    """顶级评论为 comment，有父评论的为 reply"""
    return TargetKind.REPLY if comment.parent_id else TargetKind.COMMENT


async def _degradable(
    session: AsyncSession,
    name: str,
    query: Callable[[], Awaitable[T]],
    default: T
) -> T:
    """在 SAVEPOINT 中执行一次统计查询，失败时记录日志并返回默认值"""
    try:
        async with session.begin_nested():
            return await query()
    except SQLAlchemyError as e:
        logger.warning(f"⚠️  Engagement lookup '{name}' failed, degrading: {type(e).__name__}: {e}")
        return default


class EngagementService:
    """互动聚合服务"""

    @staticmethod
    async def annotate_posts(
        session: AsyncSession,
        posts: List[Post],
        viewer_id: Optional[str],
        repost_scope: Optional[Iterable[str]] = None
    ) -> List[EnrichedPost]:
        """
        批量计算帖子的互动数据

        Args:
            session: 数据库会话
            posts: 帖子列表（结果保持相同顺序）
            viewer_id: 查看者ID，None 表示游客
            repost_scope: 转发范围，其中任一用户转发过即 is_reposted=True；
                默认只包含查看者本人

        Returns:
            EnrichedPost 列表
        """
        if not posts:
            return []

        post_ids = [post.id for post in posts]

        # 作者信息是主数据，查询失败直接中止
        authors = await UserDAO.get_by_ids(session, [post.user_id for post in posts])

        like_counts: Dict[str, int] = await _degradable(
            session, "post_like_counts",
            lambda: LikeDAO.count_by_targets(session, TargetKind.POST.value, post_ids), {}
        )
        nested_counts: Dict[str, int] = await _degradable(
            session, "nested_counts",
            lambda: PostDAO.count_children(session, post_ids), {}
        )
        repost_counts: Dict[str, int] = await _degradable(
            session, "repost_counts",
            lambda: RepostDAO.count_by_posts(session, post_ids), {}
        )

        liked_ids = set()
        reposted_ids = set()
        if viewer_id is not None:
            scope = list(repost_scope) if repost_scope is not None else [viewer_id]
            liked_ids = await _degradable(
                session, "viewer_post_likes",
                lambda: LikeDAO.get_liked_target_ids(session, viewer_id, TargetKind.POST.value, post_ids),
                set()
            )
            reposted_ids = await _degradable(
                session, "viewer_reposts",
                lambda: RepostDAO.get_reposted_post_ids(session, scope, post_ids),
                set()
            )

        enriched = []
        for post in posts:
            nested_count = nested_counts.get(post.id, 0)
            enriched.append(EnrichedPost(
                post_id=post.id,
                author=to_user_summary(authors.get(post.user_id)),
                parent_id=post.parent_id,
                text=post.text,
                image_url=post.image_url,
                video_url=post.video_url,
                like_count=like_counts.get(post.id, 0),
                is_liked=post.id in liked_ids,
                nested_count=nested_count,
                is_nested=nested_count > 0,
                repost_count=repost_counts.get(post.id, 0),
                is_reposted=post.id in reposted_ids,
                created_at=post.created_at,
                updated_at=post.updated_at,
            ))

        return enriched

    @staticmethod
    async def annotate_post(
        session: AsyncSession,
        post: Post,
        viewer_id: Optional[str]
    ) -> EnrichedPost:
        """单个帖子的互动数据"""
        enriched = await EngagementService.annotate_posts(session, [post], viewer_id)
        return enriched[0]

    @staticmethod
    async def annotate_comments(
        session: AsyncSession,
        comments: List[Comment],
        viewer_id: Optional[str]
    ) -> List[EnrichedComment]:
        """
        批量计算评论 / 回复的互动数据

        评论和回复按目标类型分组，每组一条点赞统计和一条查看者点赞查询，
        回复数统计一条查询。

        Args:
            session: 数据库会话
            comments: 评论列表（结果保持相同顺序）
            viewer_id: 查看者ID，None 表示游客

        Returns:
            EnrichedComment 列表
        """
        if not comments:
            return []

        users = await UserDAO.get_by_ids(session, [comment.user_id for comment in comments])

        ids_by_kind: Dict[TargetKind, List[str]] = {}
        for comment in comments:
            ids_by_kind.setdefault(comment_kind(comment), []).append(comment.id)

        like_counts: Dict[str, int] = {}
        liked_ids = set()
        for kind, ids in ids_by_kind.items():
            like_counts.update(await _degradable(
                session, f"{kind.value}_like_counts",
                lambda: LikeDAO.count_by_targets(session, kind.value, ids), {}
            ))
            if viewer_id is not None:
                liked_ids |= await _degradable(
                    session, f"viewer_{kind.value}_likes",
                    lambda: LikeDAO.get_liked_target_ids(session, viewer_id, kind.value, ids),
                    set()
                )

        reply_counts: Dict[str, int] = await _degradable(
            session, "reply_counts",
            lambda: CommentDAO.count_replies_by_parents(session, [comment.id for comment in comments]),
            {}
        )

        return [
            EnrichedComment(
                comment_id=comment.id,
                kind=comment_kind(comment),
                post_id=comment.post_id,
                parent_id=comment.parent_id,
                user=to_user_summary(users.get(comment.user_id)),
                text=comment.text,
                image_url=comment.image_url,
                video_url=comment.video_url,
                like_count=like_counts.get(comment.id, 0),
                is_liked=comment.id in liked_ids,
                reply_count=reply_counts.get(comment.id, 0),
                created_at=comment.created_at,
                updated_at=comment.updated_at,
            )
            for comment in comments
        ]


# 全局服务实例
engagement_service = EngagementService()
