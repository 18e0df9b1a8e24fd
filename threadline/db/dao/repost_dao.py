"""
转发数据访问对象
"""

from typing import Optional, List, Dict, Set, Iterable
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.db.models.post import Post
from threadline.db.models.repost import Repost
from threadline.db.models.user import User
from threadline.utils.id_generator import generate_repost_id


class RepostDAO:
    """转发 DAO"""

    @staticmethod
    async def create(
        session: AsyncSession,
        user_id: str,
        original_post_id: str,
        comment: Optional[str] = None
    ) -> Repost:
        """
        创建转发

        Args:
            session: 数据库会话
            user_id: 转发用户ID
            original_post_id: 原帖子ID
            comment: 转发附言

        Returns:
            Repost: 新创建的转发记录
        """
        repost = Repost(
            id=generate_repost_id(),
            user_id=user_id,
            original_post_id=original_post_id,
            comment=comment,
        )

        session.add(repost)
        await session.flush()

        return repost

    @staticmethod
    async def get_by_post(
        session: AsyncSession,
        post_id: str,
        limit: int = 20,
        offset: int = 0
    ) -> List[Repost]:
        """获取某个帖子的转发记录"""
        result = await session.execute(
            select(Repost)
            .where(Repost.original_post_id == post_id)
            .order_by(Repost.created_at.desc(), Repost.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_by_user_ids(
        session: AsyncSession,
        user_ids: Iterable[str],
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[Repost]:
        """
        获取一组用户的转发记录（按时间倒序）

        只返回原帖仍然有效的转发，分页在过滤之后进行
        """
        ids = list(set(user_ids))
        if not ids:
            return []

        query = (
            select(Repost)
            .join(Post, Post.id == Repost.original_post_id)
            .where(Repost.user_id.in_(ids), Post.deleted_at.is_(None))
            .order_by(Repost.created_at.desc(), Repost.id.desc())
            .offset(offset)
        )
        if limit is not None:
            query = query.limit(limit)

        result = await session.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def list_recent(session: AsyncSession, limit: int = 20, offset: int = 0) -> List[Repost]:
        """全站最新转发（跳过原帖已删除或转发者已注销的）"""
        result = await session.execute(
            select(Repost)
            .join(Post, Post.id == Repost.original_post_id)
            .join(User, User.id == Repost.user_id)
            .where(Post.deleted_at.is_(None), User.deleted_at.is_(None))
            .order_by(Repost.created_at.desc(), Repost.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    @staticmethod
    async def count_by_posts(session: AsyncSession, post_ids: Iterable[str]) -> Dict[str, int]:
        """批量统计转发数（所有用户），返回 {post_id: count}"""
        ids = list(set(post_ids))
        if not ids:
            return {}

        result = await session.execute(
            select(Repost.original_post_id, func.count(Repost.id))
            .where(Repost.original_post_id.in_(ids))
            .group_by(Repost.original_post_id)
        )
        return {post_id: count for post_id, count in result.all()}

    @staticmethod
    async def get_reposted_post_ids(
        session: AsyncSession,
        user_ids: Iterable[str],
        post_ids: Iterable[str]
    ) -> Set[str]:
        """给定用户集合中任意一人转发过的帖子ID集合"""
        users = list(set(user_ids))
        posts = list(set(post_ids))
        if not users or not posts:
            return set()

        result = await session.execute(
            select(Repost.original_post_id)
            .where(Repost.user_id.in_(users), Repost.original_post_id.in_(posts))
            .distinct()
        )
        return set(result.scalars().all())
