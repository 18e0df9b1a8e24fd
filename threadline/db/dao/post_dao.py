"""
帖子数据访问对象
"""

from datetime import datetime
from typing import Optional, List, Dict, Iterable
from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.db.models.post import Post
from threadline.utils.id_generator import generate_post_id


class PostDAO:
    """帖子 DAO（查询默认排除已删除的帖子）"""

    @staticmethod
    async def create(
        session: AsyncSession,
        user_id: str,
        text: Optional[str] = None,
        image_url: Optional[str] = None,
        video_url: Optional[str] = None,
        parent_id: Optional[str] = None
    ) -> Post:
        """
        创建帖子

        Args:
            session: 数据库会话
            user_id: 作者ID
            text: 正文
            image_url: 图片URL
            video_url: 视频URL
            parent_id: 父帖子ID（嵌套帖子，必须已存在）

        Returns:
            Post: 新创建的帖子
        """
        post = Post(
            id=generate_post_id(),
            user_id=user_id,
            parent_id=parent_id,
            text=text,
            image_url=image_url,
            video_url=video_url,
        )

        session.add(post)
        await session.flush()

        return post

    @staticmethod
    async def get_by_id(session: AsyncSession, post_id: str) -> Optional[Post]:
        """根据ID获取帖子"""
        result = await session.execute(
            select(Post).where(Post.id == post_id, Post.deleted_at.is_(None))
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_ids(session: AsyncSession, post_ids: Iterable[str]) -> Dict[str, Post]:
        """批量获取帖子，返回 {post_id: Post}"""
        ids = list(set(post_ids))
        if not ids:
            return {}

        result = await session.execute(
            select(Post).where(Post.id.in_(ids), Post.deleted_at.is_(None))
        )
        return {post.id: post for post in result.scalars().all()}

    @staticmethod
    async def get_by_author_ids(session: AsyncSession, user_ids: Iterable[str]) -> List[Post]:
        """获取一组作者的全部帖子（含嵌套帖子），按时间倒序"""
        ids = list(set(user_ids))
        if not ids:
            return []

        result = await session.execute(
            select(Post)
            .where(Post.user_id.in_(ids), Post.deleted_at.is_(None))
            .order_by(Post.created_at.desc(), Post.id.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def list_recent(session: AsyncSession, limit: int = 20, offset: int = 0) -> List[Post]:
        """全站最新帖子（按时间倒序）"""
        result = await session.execute(
            select(Post)
            .where(Post.deleted_at.is_(None))
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_by_parent(session: AsyncSession, parent_id: str) -> List[Post]:
        """获取某个帖子下的嵌套帖子，按时间倒序"""
        result = await session.execute(
            select(Post)
            .where(Post.parent_id == parent_id, Post.deleted_at.is_(None))
            .order_by(Post.created_at.desc(), Post.id.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def count_children(session: AsyncSession, post_ids: Iterable[str]) -> Dict[str, int]:
        """批量统计嵌套帖子数，返回 {parent_id: count}（无嵌套的不出现）"""
        ids = list(set(post_ids))
        if not ids:
            return {}

        result = await session.execute(
            select(Post.parent_id, func.count(Post.id))
            .where(Post.parent_id.in_(ids), Post.deleted_at.is_(None))
            .group_by(Post.parent_id)
        )
        return {parent_id: count for parent_id, count in result.all()}

    @staticmethod
    async def update(session: AsyncSession, post: Post, changes: dict) -> Post:
        """更新帖子内容字段"""
        for field in ("text", "image_url", "video_url"):
            if field in changes:
                setattr(post, field, changes[field])

        await session.flush()
        return post

    @staticmethod
    async def soft_delete(session: AsyncSession, post: Post) -> Post:
        """删除帖子（墓碑，保留嵌套帖子、点赞与转发记录）"""
        post.deleted_at = datetime.utcnow()
        await session.flush()
        return post

    @staticmethod
    async def soft_delete_by_author(session: AsyncSession, user_id: str) -> int:
        """删除某个作者的全部帖子（注销账号时使用），返回影响行数"""
        result = await session.execute(
            update(Post)
            .where(Post.user_id == user_id, Post.deleted_at.is_(None))
            .values(deleted_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
