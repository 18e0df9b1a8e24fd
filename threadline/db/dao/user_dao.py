"""
用户数据访问对象
"""

from datetime import datetime
from typing import Optional, List, Dict, Iterable
from sqlalchemy import select, update, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.db.models.user import User
from threadline.utils.id_generator import generate_user_id
from threadline.utils.auth import get_password_hash


class UserDAO:
    """用户 DAO"""

    @staticmethod
    async def create(
        session: AsyncSession,
        name: str,
        username: str,
        email: str,
        password: str
    ) -> User:
        """
        创建用户

        Args:
            session: 数据库会话
            name: 显示名称
            username: 用户名（存储为小写）
            email: 邮箱
            password: 明文密码

        Returns:
            User: 新创建的用户对象
        """
        user = User(
            id=generate_user_id(),
            name=name,
            username=username.lower(),
            email=email.lower(),
            password_hash=get_password_hash(password),
            role="user",
            status="active",
            follower_count=0,
            following_count=0,
        )

        session.add(user)
        await session.flush()

        return user

    @staticmethod
    async def get_by_id(
        session: AsyncSession,
        user_id: str,
        include_deleted: bool = False
    ) -> Optional[User]:
        """根据ID获取用户（默认只查有效用户）"""
        query = select(User).where(User.id == user_id)
        if not include_deleted:
            query = query.where(User.deleted_at.is_(None))

        result = await session.execute(query)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_ids(session: AsyncSession, user_ids: Iterable[str]) -> Dict[str, User]:
        """批量获取用户（包含已注销用户，用于展示作者）"""
        ids = list(set(user_ids))
        if not ids:
            return {}

        result = await session.execute(select(User).where(User.id.in_(ids)))
        return {user.id: user for user in result.scalars().all()}

    @staticmethod
    async def get_by_email(session: AsyncSession, email: str) -> Optional[User]:
        """根据邮箱获取用户"""
        result = await session.execute(
            select(User).where(User.email == email.lower())
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_username(
        session: AsyncSession,
        username: str,
        include_deleted: bool = False
    ) -> Optional[User]:
        """根据用户名获取用户（默认只查有效用户）"""
        query = select(User).where(User.username == username.lower())
        if not include_deleted:
            query = query.where(User.deleted_at.is_(None))

        result = await session.execute(query)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_login(session: AsyncSession, login: str) -> Optional[User]:
        """根据邮箱或用户名获取有效用户"""
        value = login.lower()
        result = await session.execute(
            select(User).where(
                or_(User.email == value, User.username == value),
                User.deleted_at.is_(None)
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_active(session: AsyncSession, limit: int = 20, offset: int = 0) -> List[User]:
        """有效用户列表（按注册时间倒序）"""
        result = await session.execute(
            select(User)
            .where(User.deleted_at.is_(None))
            .order_by(User.created_at.desc(), User.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    @staticmethod
    async def sample_active(
        session: AsyncSession,
        size: int,
        exclude_id: Optional[str] = None
    ) -> List[User]:
        """随机抽取若干有效用户（推荐用）"""
        query = select(User).where(User.deleted_at.is_(None))
        if exclude_id:
            query = query.where(User.id != exclude_id)

        result = await session.execute(query.order_by(func.random()).limit(size))
        return list(result.scalars().all())

    @staticmethod
    async def update_role(session: AsyncSession, user: User, role: str) -> User:
        """修改用户角色"""
        user.role = role
        await session.flush()
        return user

    @staticmethod
    async def update_profile(session: AsyncSession, user: User, changes: dict) -> User:
        """更新个人资料（只更新传入的字段）"""
        for field in ("name", "bio", "avatar_url"):
            if field in changes:
                setattr(user, field, changes[field])

        await session.flush()
        return user

    @staticmethod
    async def increment_counters(
        session: AsyncSession,
        user_id: str,
        follower_delta: int = 0,
        following_delta: int = 0
    ):
        """
        原子地调整关注 / 粉丝计数

        使用 SET n = n + delta，在同一事务内与关注关系写入一起提交
        """
        values = {}
        if follower_delta:
            values["follower_count"] = User.follower_count + follower_delta
        if following_delta:
            values["following_count"] = User.following_count + following_delta
        if not values:
            return

        await session.execute(
            update(User)
            .where(User.id == user_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )

    @staticmethod
    async def increment_counters_bulk(
        session: AsyncSession,
        user_ids: Iterable[str],
        follower_delta: int = 0,
        following_delta: int = 0
    ):
        """批量调整一组用户的关注 / 粉丝计数"""
        ids = list(set(user_ids))
        values = {}
        if follower_delta:
            values["follower_count"] = User.follower_count + follower_delta
        if following_delta:
            values["following_count"] = User.following_count + following_delta
        if not ids or not values:
            return

        await session.execute(
            update(User)
            .where(User.id.in_(ids))
            .values(**values)
            .execution_options(synchronize_session=False)
        )

    @staticmethod
    async def soft_delete(session: AsyncSession, user: User) -> User:
        """注销用户（保留记录作为墓碑）"""
        user.status = "deleted"
        user.deleted_at = datetime.utcnow()
        await session.flush()
        return user
