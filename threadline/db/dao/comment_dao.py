"""
评论数据访问对象
"""

from typing import Optional, List, Dict, Iterable
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.db.models.comment import Comment
from threadline.db.models.post import Post
from threadline.utils.id_generator import generate_comment_id


class CommentDAO:
    """评论 DAO"""

    @staticmethod
    async def create(
        session: AsyncSession,
        post_id: str,
        user_id: str,
        text: str,
        parent_id: Optional[str] = None,
        image_url: Optional[str] = None,
        video_url: Optional[str] = None
    ) -> Comment:
        """
        创建评论

        Args:
            session: 数据库会话
            post_id: 帖子ID
            user_id: 用户ID
            text: 评论内容
            parent_id: 父评论ID（回复）

        Returns:
            Comment: 新创建的评论对象
        """
        comment = Comment(
            id=generate_comment_id(),
            post_id=post_id,
            user_id=user_id,
            parent_id=parent_id,
            text=text,
            image_url=image_url,
            video_url=video_url,
        )

        session.add(comment)
        await session.flush()

        return comment

    @staticmethod
    async def get_by_id(session: AsyncSession, comment_id: str) -> Optional[Comment]:
        """根据ID获取评论"""
        result = await session.execute(
            select(Comment).where(Comment.id == comment_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_ids(session: AsyncSession, comment_ids: Iterable[str]) -> Dict[str, Comment]:
        """批量获取评论"""
        ids = list(set(comment_ids))
        if not ids:
            return {}

        result = await session.execute(select(Comment).where(Comment.id.in_(ids)))
        return {comment.id: comment for comment in result.scalars().all()}

    @staticmethod
    async def get_post_comments(
        session: AsyncSession,
        post_id: str,
        limit: int = 20,
        offset: int = 0
    ) -> List[Comment]:
        """获取帖子的顶级评论（按时间倒序）"""
        result = await session.execute(
            select(Comment)
            .where(Comment.post_id == post_id, Comment.parent_id.is_(None))
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_replies(
        session: AsyncSession,
        parent_id: str,
        limit: int = 20,
        offset: int = 0
    ) -> List[Comment]:
        """获取评论的回复（按时间正序）"""
        result = await session.execute(
            select(Comment)
            .where(Comment.parent_id == parent_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    @staticmethod
    async def count_replies_by_parents(session: AsyncSession, parent_ids: Iterable[str]) -> Dict[str, int]:
        """批量统计回复数，返回 {parent_id: count}"""
        ids = list(set(parent_ids))
        if not ids:
            return {}

        result = await session.execute(
            select(Comment.parent_id, func.count(Comment.id))
            .where(Comment.parent_id.in_(ids))
            .group_by(Comment.parent_id)
        )
        return {parent_id: count for parent_id, count in result.all()}

    @staticmethod
    async def list_recent(session: AsyncSession, limit: int = 20, offset: int = 0) -> List[Comment]:
        """全站最新评论与回复（跳过所属帖子已删除的）"""
        result = await session.execute(
            select(Comment)
            .join(Post, Post.id == Comment.post_id)
            .where(Post.deleted_at.is_(None))
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_user_comments(
        session: AsyncSession,
        user_id: str,
        limit: int = 20,
        offset: int = 0
    ) -> List[Comment]:
        """获取用户的评论历史"""
        result = await session.execute(
            select(Comment)
            .where(Comment.user_id == user_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    @staticmethod
    async def update(session: AsyncSession, comment: Comment, text: str) -> Comment:
        """更新评论内容"""
        comment.text = text
        await session.flush()
        return comment
