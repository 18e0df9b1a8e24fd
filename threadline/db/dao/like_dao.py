"""
点赞数据访问对象
"""

from typing import Optional, List, Dict, Set, Iterable
from sqlalchemy import select, and_, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.db.models.like import Like
from threadline.db.models.user import User


class LikeDAO:
    """点赞 DAO（目标为 post / comment / reply）"""

    @staticmethod
    async def create(
        session: AsyncSession,
        user_id: str,
        target_type: str,
        target_id: str
    ) -> Like:
        """
        创建点赞

        唯一约束 uk_like_user_target 冲突时抛出 IntegrityError

        Args:
            session: 数据库会话
            user_id: 用户ID
            target_type: 目标类型
            target_id: 目标ID

        Returns:
            Like: 新创建的点赞记录
        """
        like = Like(
            user_id=user_id,
            target_type=target_type,
            target_id=target_id,
        )

        session.add(like)
        await session.flush()

        return like

    @staticmethod
    async def delete(
        session: AsyncSession,
        user_id: str,
        target_type: str,
        target_id: str
    ) -> bool:
        """取消点赞，返回是否删除了记录"""
        result = await session.execute(
            delete(Like).where(
                and_(
                    Like.user_id == user_id,
                    Like.target_type == target_type,
                    Like.target_id == target_id
                )
            )
        )
        return (result.rowcount or 0) > 0

    @staticmethod
    async def find(
        session: AsyncSession,
        user_id: str,
        target_type: str,
        target_id: str
    ) -> Optional[Like]:
        """查找用户对某个目标的点赞"""
        result = await session.execute(
            select(Like).where(
                and_(
                    Like.user_id == user_id,
                    Like.target_type == target_type,
                    Like.target_id == target_id
                )
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def count_by_targets(
        session: AsyncSession,
        target_type: str,
        target_ids: Iterable[str]
    ) -> Dict[str, int]:
        """批量统计点赞数，返回 {target_id: count}（无点赞的不出现）"""
        ids = list(set(target_ids))
        if not ids:
            return {}

        result = await session.execute(
            select(Like.target_id, func.count(Like.id))
            .where(Like.target_type == target_type, Like.target_id.in_(ids))
            .group_by(Like.target_id)
        )
        return {target_id: count for target_id, count in result.all()}

    @staticmethod
    async def get_liked_target_ids(
        session: AsyncSession,
        user_id: str,
        target_type: str,
        target_ids: Iterable[str]
    ) -> Set[str]:
        """批量判断用户点赞过哪些目标"""
        ids = list(set(target_ids))
        if not ids:
            return set()

        result = await session.execute(
            select(Like.target_id).where(
                Like.user_id == user_id,
                Like.target_type == target_type,
                Like.target_id.in_(ids)
            )
        )
        return set(result.scalars().all())

    @staticmethod
    async def get_by_user(
        session: AsyncSession,
        user_id: str,
        target_type: Optional[str] = None,
        limit: int = 20,
        offset: int = 0
    ) -> List[Like]:
        """获取用户的点赞记录（按时间倒序）"""
        query = select(Like).where(Like.user_id == user_id)
        if target_type:
            query = query.where(Like.target_type == target_type)

        result = await session.execute(
            query.order_by(Like.created_at.desc(), Like.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_likers(
        session: AsyncSession,
        target_type: str,
        target_id: str,
        limit: int = 20,
        offset: int = 0
    ) -> List[User]:
        """获取点赞了某个目标的用户"""
        result = await session.execute(
            select(User)
            .join(Like, User.id == Like.user_id)
            .where(
                Like.target_type == target_type,
                Like.target_id == target_id,
                User.deleted_at.is_(None)
            )
            .order_by(Like.created_at.desc(), Like.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())
