"""
关注关系数据访问对象
"""

from typing import List, Tuple, Set, Iterable
from sqlalchemy import select, and_, or_, delete
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.db.models.follow import UserFollow
from threadline.db.models.user import User


class FollowDAO:
    """关注关系 DAO"""

    @staticmethod
    async def create(
        session: AsyncSession,
        follower_id: str,
        following_id: str
    ) -> UserFollow:
        """
        创建关注关系

        唯一约束 uk_follower_following 冲突时抛出 IntegrityError，由调用方处理

        Args:
            session: 数据库会话
            follower_id: 关注者ID
            following_id: 被关注者ID

        Returns:
            UserFollow: 新创建的关注关系
        """
        follow = UserFollow(
            follower_id=follower_id,
            following_id=following_id,
        )

        session.add(follow)
        await session.flush()

        return follow

    @staticmethod
    async def delete(
        session: AsyncSession,
        follower_id: str,
        following_id: str
    ) -> bool:
        """
        删除关注关系

        Returns:
            是否确实删除了一条记录
        """
        result = await session.execute(
            delete(UserFollow).where(
                and_(
                    UserFollow.follower_id == follower_id,
                    UserFollow.following_id == following_id
                )
            )
        )
        return (result.rowcount or 0) > 0

    @staticmethod
    async def is_following(
        session: AsyncSession,
        follower_id: str,
        following_id: str
    ) -> bool:
        """检查是否已关注"""
        result = await session.execute(
            select(UserFollow.id).where(
                and_(
                    UserFollow.follower_id == follower_id,
                    UserFollow.following_id == following_id
                )
            ).limit(1)
        )
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def get_following_ids(session: AsyncSession, user_id: str) -> List[str]:
        """获取用户关注的全部用户ID"""
        result = await session.execute(
            select(UserFollow.following_id).where(UserFollow.follower_id == user_id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_following_flags(
        session: AsyncSession,
        viewer_id: str,
        user_ids: Iterable[str]
    ) -> Set[str]:
        """批量判断 viewer 是否关注了给定用户，返回已关注的用户ID集合"""
        ids = list(set(user_ids))
        if not ids:
            return set()

        result = await session.execute(
            select(UserFollow.following_id).where(
                UserFollow.follower_id == viewer_id,
                UserFollow.following_id.in_(ids)
            )
        )
        return set(result.scalars().all())

    @staticmethod
    async def get_following_list(
        session: AsyncSession,
        user_id: str,
        limit: int = 20,
        offset: int = 0
    ) -> List[Tuple[User, UserFollow]]:
        """
        获取用户的关注列表（跳过已注销用户）

        Args:
            session: 数据库会话
            user_id: 用户ID
            limit: 每页数量
            offset: 偏移量

        Returns:
            (被关注用户, 关注关系) 元组列表
        """
        result = await session.execute(
            select(User, UserFollow)
            .join(UserFollow, User.id == UserFollow.following_id)
            .where(UserFollow.follower_id == user_id, User.deleted_at.is_(None))
            .order_by(UserFollow.created_at.desc(), UserFollow.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.all())

    @staticmethod
    async def get_follower_list(
        session: AsyncSession,
        user_id: str,
        limit: int = 20,
        offset: int = 0
    ) -> List[Tuple[User, UserFollow]]:
        """获取用户的粉丝列表（跳过已注销用户）"""
        result = await session.execute(
            select(User, UserFollow)
            .join(UserFollow, User.id == UserFollow.follower_id)
            .where(UserFollow.following_id == user_id, User.deleted_at.is_(None))
            .order_by(UserFollow.created_at.desc(), UserFollow.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.all())

    @staticmethod
    async def detach_user(session: AsyncSession, user_id: str) -> Tuple[List[str], List[str]]:
        """
        删除用户两个方向的全部关注关系（注销账号时使用）

        Returns:
            (该用户关注的用户ID列表, 该用户的粉丝ID列表)
        """
        following_ids = await FollowDAO.get_following_ids(session, user_id)

        result = await session.execute(
            select(UserFollow.follower_id).where(UserFollow.following_id == user_id)
        )
        follower_ids = list(result.scalars().all())

        await session.execute(
            delete(UserFollow).where(
                or_(UserFollow.follower_id == user_id, UserFollow.following_id == user_id)
            )
        )
        return following_ids, follower_ids
