"""
信息流服务

把受众集合（自己 + 关注的人）发布的帖子与转发合并为一条
按有效时间倒序的信息流：帖子用自身创建时间，转发用转发时间。

读取不是快照读：关注列表、帖子、转发分多次查询，
并发写入可能使结果混合前后两种状态。
"""

from datetime import datetime
from typing import Optional, List, Iterable, Tuple, Union

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.config.settings import settings
from threadline.db.dao import UserDAO, PostDAO, RepostDAO, FollowDAO
from threadline.db.models.post import Post
from threadline.db.models.repost import Repost
from threadline.models import FeedPage, PostFeedItem, RepostFeedItem
from threadline.services.engagement_service import EngagementService, to_user_summary
from threadline.utils.exceptions import NotFoundError
from threadline.utils.id_generator import ulid_part
from threadline.utils.logger_config import operation_logger
from threadline.utils.pagination import normalize_page

# (有效时间, ID, 记录)；同一时间按 ULID 倒序，即后插入的在前
_Entry = Tuple[datetime, str, Union[Post, Repost]]


class FeedService:
    """信息流服务"""

    @staticmethod
    async def _assemble(
        session: AsyncSession,
        author_ids: List[str],
        viewer_id: Optional[str],
        repost_scope: Optional[Iterable[str]],
        offset: int,
        limit: int
    ) -> FeedPage:
        """
        合并、排序、分页，然后只为当前页计算互动数据

        Args:
            session: 数据库会话
            author_ids: 帖子作者 / 转发者范围
            viewer_id: 查看者ID
            repost_scope: 传给互动聚合的转发范围
            offset: 偏移量（已校验）
            limit: 每页数量（已收敛）

        Returns:
            FeedPage
        """
        posts = await PostDAO.get_by_author_ids(session, author_ids)
        reposts = await RepostDAO.get_by_user_ids(session, author_ids)

        # 转发的原帖（已删除或不存在的原帖对应的转发直接丢弃）
        originals = await PostDAO.get_by_ids(session, [repost.original_post_id for repost in reposts])
        reposters = await UserDAO.get_by_ids(session, [repost.user_id for repost in reposts])
        reposts = [
            repost for repost in reposts
            if repost.original_post_id in originals
            and repost.user_id in reposters
            and reposters[repost.user_id].deleted_at is None
        ]

        entries: List[_Entry] = [(post.created_at, post.id, post) for post in posts]
        entries.extend((repost.created_at, repost.id, repost) for repost in reposts)
        entries.sort(key=lambda entry: (entry[0], ulid_part(entry[1])), reverse=True)

        total = len(entries)
        window = entries[offset:offset + limit]

        # 当前页涉及的帖子去重后一次性聚合
        page_posts = {}
        for _, _, record in window:
            post = originals[record.original_post_id] if isinstance(record, Repost) else record
            page_posts[post.id] = post

        enriched = await EngagementService.annotate_posts(
            session, list(page_posts.values()), viewer_id, repost_scope
        )
        enriched_by_id = {item.post_id: item for item in enriched}

        items = []
        for _, _, record in window:
            if isinstance(record, Repost):
                items.append(RepostFeedItem(
                    repost_id=record.id,
                    reposted_by=to_user_summary(reposters.get(record.user_id)),
                    reposted_at=record.created_at,
                    comment=record.comment,
                    original_post=enriched_by_id[record.original_post_id],
                ))
            else:
                items.append(PostFeedItem(**enriched_by_id[record.id].model_dump()))

        return FeedPage(items=items, offset=offset, limit=limit, total=total)

    @staticmethod
    @operation_logger("feed", "get_feed")
    async def get_feed(
        session: AsyncSession,
        viewer_id: str,
        offset: int = 0,
        limit: Optional[int] = None
    ) -> FeedPage:
        """
        获取查看者的首页信息流

        Args:
            session: 数据库会话
            viewer_id: 查看者ID
            offset: 偏移量
            limit: 每页数量（默认 50，上限 feed.max_limit）

        Returns:
            FeedPage，没有任何内容时 items 为空列表
        """
        offset, limit = normalize_page(
            offset, limit, settings.FEED_DEFAULT_LIMIT, settings.FEED_MAX_LIMIT
        )

        following_ids = await FollowDAO.get_following_ids(session, viewer_id)
        audience = [viewer_id] + [user_id for user_id in following_ids if user_id != viewer_id]

        page = await FeedService._assemble(session, audience, viewer_id, audience, offset, limit)
        logger.debug(f"📰 Feed for {viewer_id}: audience={len(audience)}, total={page.total}")
        return page

    @staticmethod
    @operation_logger("feed", "get_user_timeline")
    async def get_user_timeline(
        session: AsyncSession,
        username: str,
        viewer_id: Optional[str] = None,
        offset: int = 0,
        limit: Optional[int] = None
    ) -> FeedPage:
        """
        获取某个用户的时间线（本人的帖子 + 转发，不扩展受众）

        Raises:
            NotFoundError: 用户不存在
        """
        offset, limit = normalize_page(
            offset, limit, settings.FEED_DEFAULT_LIMIT, settings.FEED_MAX_LIMIT
        )

        user = await UserDAO.get_by_username(session, username)
        if not user:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")

        return await FeedService._assemble(session, [user.id], viewer_id, None, offset, limit)


# 全局服务实例
feed_service = FeedService()
