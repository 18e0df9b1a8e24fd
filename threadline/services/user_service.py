"""
用户服务

处理用户注册、登录、个人资料、注销、用户发现与管理员操作
"""

from typing import Optional, List

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.config.settings import settings
from threadline.db.dao import UserDAO, PostDAO, FollowDAO
from threadline.db.models.user import User
from threadline.models import (
    UserCreate, UserLogin, UserUpdate, UserProfile, UserCard, UserRole, TokenResponse
)
from threadline.utils.auth import verify_password, create_access_token
from threadline.utils.exceptions import (
    ConflictError, AuthenticationError, AuthorizationError, NotFoundError
)
from threadline.utils.logger_config import operation_logger
from threadline.utils.pagination import normalize_page
from threadline.utils.user_cache import user_cache


def to_profile(user: User, is_following: Optional[bool] = None) -> UserProfile:
    """ORM 用户 -> 公开资料"""
    return UserProfile(
        user_id=user.id,
        name=user.name,
        username=user.username,
        avatar_url=user.avatar_url,
        bio=user.bio,
        role=user.role,
        follower_count=user.follower_count,
        following_count=user.following_count,
        is_following=is_following,
        created_at=user.created_at,
    )


def _issue_token(user: User) -> TokenResponse:
    token = create_access_token(user.id, user.username, user.role)
    return TokenResponse(access_token=token, user=to_profile(user))


class UserService:
    """用户服务"""

    @staticmethod
    @operation_logger("account", "register")
    async def register(session: AsyncSession, user_data: UserCreate) -> TokenResponse:
        """
        用户注册

        Args:
            session: 数据库会话
            user_data: 用户注册数据

        Returns:
            TokenResponse，包含用户资料和 token

        Raises:
            ConflictError: 邮箱或用户名已被使用
        """
        if await UserDAO.get_by_email(session, user_data.email):
            raise ConflictError("Email already registered", code="EMAIL_EXISTS")

        if await UserDAO.get_by_username(session, user_data.username, include_deleted=True):
            raise ConflictError("Username already taken", code="USERNAME_EXISTS")

        user = await UserDAO.create(
            session=session,
            name=user_data.name,
            username=user_data.username,
            email=user_data.email,
            password=user_data.password,
        )

        logger.info(f"✅ User registered: {user.id} ({user.username})")
        return _issue_token(user)

    @staticmethod
    @operation_logger("account", "login")
    async def login(session: AsyncSession, login_data: UserLogin) -> TokenResponse:
        """
        用户登录（邮箱或用户名）

        Raises:
            AuthenticationError: 用户不存在或密码错误
        """
        user = await UserDAO.get_by_login(session, login_data.login)

        if not user or not verify_password(login_data.password, user.password_hash):
            raise AuthenticationError("Invalid credentials")

        return _issue_token(user)

    @staticmethod
    async def get_me(session: AsyncSession, user_id: str) -> UserProfile:
        """
        获取当前用户资料

        优先读 Redis 缓存，未命中时从数据库加载并回填
        """
        async def load() -> Optional[dict]:
            user = await UserDAO.get_by_id(session, user_id)
            if not user:
                return None
            return to_profile(user).model_dump(mode="json")

        payload = await user_cache.get_or_load(user_id, load)
        if payload is None:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")

        return UserProfile(**payload)

    @staticmethod
    @operation_logger("account", "update_profile")
    async def update_me(session: AsyncSession, user_id: str, data: UserUpdate) -> UserProfile:
        """更新个人资料并使缓存失效"""
        user = await UserDAO.get_by_id(session, user_id)
        if not user:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")

        user = await UserDAO.update_profile(session, user, data.model_dump(exclude_unset=True))
        await user_cache.invalidate(user_id)

        return to_profile(user)

    @staticmethod
    async def _delete_account(session: AsyncSession, user: User):
        """
        注销账号的公共部分

        用户记录保留为墓碑，本人的帖子一并删除（墓碑）；
        双向关注关系解除并同步对方计数，点赞和转发记录保留。
        """
        following_ids, follower_ids = await FollowDAO.detach_user(session, user.id)
        await UserDAO.increment_counters_bulk(session, following_ids, follower_delta=-1)
        await UserDAO.increment_counters_bulk(session, follower_ids, following_delta=-1)

        user.follower_count = 0
        user.following_count = 0
        await UserDAO.soft_delete(session, user)
        removed = await PostDAO.soft_delete_by_author(session, user.id)
        await user_cache.invalidate(user.id, *following_ids, *follower_ids)

        logger.info(
            f"🗑️  User deleted: {user.id}, {removed} posts tombstoned, "
            f"{len(following_ids) + len(follower_ids)} follow edges removed"
        )

    @staticmethod
    @operation_logger("account", "delete_account")
    async def delete_me(session: AsyncSession, user_id: str):
        """注销当前账号"""
        user = await UserDAO.get_by_id(session, user_id)
        if not user:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")

        await UserService._delete_account(session, user)

    @staticmethod
    async def get_profile(
        session: AsyncSession,
        username: str,
        viewer_id: Optional[str] = None
    ) -> UserProfile:
        """
        获取用户公开资料

        is_following 只在登录且查看他人时给出
        """
        user = await UserDAO.get_by_username(session, username)
        if not user:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")

        is_following = None
        if viewer_id and viewer_id != user.id:
            is_following = await FollowDAO.is_following(session, viewer_id, user.id)

        return to_profile(user, is_following)

    @staticmethod
    async def _to_cards(
        session: AsyncSession,
        users: List[User],
        viewer_id: Optional[str]
    ) -> List[UserCard]:
        followed = set()
        if viewer_id:
            followed = await FollowDAO.get_following_flags(session, viewer_id, [user.id for user in users])

        return [
            UserCard(
                user_id=user.id,
                name=user.name,
                username=user.username,
                avatar_url=user.avatar_url,
                follower_count=user.follower_count,
                following_count=user.following_count,
                is_following=user.id in followed,
                created_at=user.created_at,
            )
            for user in users
        ]

    @staticmethod
    async def list_users(
        session: AsyncSession,
        viewer_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[UserCard]:
        """用户列表（最新注册在前），附带查看者的关注状态"""
        offset, limit = normalize_page(offset, limit)

        users = await UserDAO.list_active(session, limit, offset)
        return await UserService._to_cards(session, users, viewer_id)

    @staticmethod
    async def suggest_users(session: AsyncSession, viewer_id: Optional[str] = None) -> List[UserCard]:
        """
        随机推荐用户

        每次随机抽取 business.suggestion_size 个有效用户（不含查看者本人）
        """
        users = await UserDAO.sample_active(session, settings.USER_SUGGESTION_SIZE, exclude_id=viewer_id)
        return await UserService._to_cards(session, users, viewer_id)

    @staticmethod
    async def _require_admin(session: AsyncSession, actor_id: str) -> User:
        actor = await UserDAO.get_by_id(session, actor_id)
        if not actor or actor.role != UserRole.ADMIN.value:
            raise AuthorizationError("Administrator role required", code="ADMIN_REQUIRED")
        return actor

    @staticmethod
    @operation_logger("account", "update_role")
    async def update_role(
        session: AsyncSession,
        actor_id: str,
        user_id: str,
        role: UserRole
    ) -> UserProfile:
        """
        管理员修改用户角色

        Raises:
            AuthorizationError: 操作者不是管理员
            NotFoundError: 目标用户不存在
        """
        await UserService._require_admin(session, actor_id)

        user = await UserDAO.get_by_id(session, user_id)
        if not user:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")

        user = await UserDAO.update_role(session, user, UserRole(role).value)
        await user_cache.invalidate(user_id)

        logger.info(f"🛡️  {actor_id} set role of {user_id} to {user.role}")
        return to_profile(user)

    @staticmethod
    @operation_logger("account", "admin_delete_user")
    async def delete_user(session: AsyncSession, actor_id: str, user_id: str):
        """
        管理员注销用户

        Raises:
            AuthorizationError: 操作者不是管理员
            NotFoundError: 目标用户不存在
        """
        await UserService._require_admin(session, actor_id)

        user = await UserDAO.get_by_id(session, user_id)
        if not user:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")

        await UserService._delete_account(session, user)


# 全局服务实例
user_service = UserService()
