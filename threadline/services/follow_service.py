"""
关注服务

处理用户关注相关业务逻辑：关注关系与双方的关注 / 粉丝计数
在同一个事务中写入。
"""

from typing import Optional, List, Tuple

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.db.dao import FollowDAO, UserDAO
from threadline.db.models.follow import UserFollow
from threadline.db.models.user import User
from threadline.models import FollowToggleResult, UserListItem
from threadline.utils.exceptions import ConflictError, NotFoundError
from threadline.utils.logger_config import operation_logger
from threadline.utils.pagination import normalize_page
from threadline.utils.user_cache import user_cache


class FollowService:
    """关注服务"""

    @staticmethod
    @operation_logger("social", "toggle_follow")
    async def toggle_follow(
        session: AsyncSession,
        follower_id: str,
        target_id: str
    ) -> FollowToggleResult:
        """
        关注 / 取消关注

        已关注则取消关注，否则关注。关系和计数在调用方的事务内一起提交。

        Args:
            session: 数据库会话
            follower_id: 当前用户ID
            target_id: 目标用户ID

        Returns:
            FollowToggleResult（目标用户的粉丝数、当前用户的关注数）

        Raises:
            ConflictError: 关注自己
            NotFoundError: 目标用户不存在，或已注销且未被关注
        """
        if follower_id == target_id:
            raise ConflictError("Cannot follow yourself", code="CANNOT_FOLLOW_SELF")

        # 已注销用户只能被取消关注，不能被新关注
        target = await UserDAO.get_by_id(session, target_id, include_deleted=True)
        if not target:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")

        follower = await UserDAO.get_by_id(session, follower_id)
        if not follower:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")

        already_following = await FollowDAO.is_following(session, follower_id, target_id)
        if target.deleted_at is not None and not already_following:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")

        if already_following:
            removed = await FollowDAO.delete(session, follower_id, target_id)
            if removed:
                await UserDAO.increment_counters(session, target_id, follower_delta=-1)
                await UserDAO.increment_counters(session, follower_id, following_delta=-1)
            action = "unfollowed"
        else:
            try:
                async with session.begin_nested():
                    await FollowDAO.create(session, follower_id, target_id)
            except IntegrityError:
                # 并发请求已经建立了关系，计数由那一方负责
                logger.info(f"🔁 Follow {follower_id} -> {target_id} already exists")
            else:
                await UserDAO.increment_counters(session, target_id, follower_delta=1)
                await UserDAO.increment_counters(session, follower_id, following_delta=1)
            action = "followed"

        await session.refresh(target, attribute_names=["follower_count", "following_count"])
        await session.refresh(follower, attribute_names=["follower_count", "following_count"])

        await user_cache.invalidate(follower_id, target_id)

        logger.info(f"👥 {follower_id} {action} {target_id}")
        return FollowToggleResult(
            action=action,
            follower_count=target.follower_count,
            following_count=follower.following_count,
        )

    @staticmethod
    async def _to_list_items(
        session: AsyncSession,
        rows: List[Tuple[User, UserFollow]],
        viewer_id: Optional[str]
    ) -> List[UserListItem]:
        followed = set()
        if viewer_id:
            followed = await FollowDAO.get_following_flags(
                session, viewer_id, [user.id for user, _ in rows]
            )

        return [
            UserListItem(
                user_id=user.id,
                name=user.name,
                username=user.username,
                avatar_url=user.avatar_url,
                follower_count=user.follower_count,
                following_count=user.following_count,
                is_following=user.id in followed,
                followed_at=follow.created_at,
            )
            for user, follow in rows
        ]

    @staticmethod
    async def get_following_list(
        session: AsyncSession,
        username: str,
        viewer_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[UserListItem]:
        """
        获取用户的关注列表

        Args:
            session: 数据库会话
            username: 用户名
            viewer_id: 查看者ID（用于 is_following）
            limit: 每页数量
            offset: 偏移量

        Returns:
            UserListItem 列表
        """
        offset, limit = normalize_page(offset, limit)

        user = await UserDAO.get_by_username(session, username)
        if not user:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")

        rows = await FollowDAO.get_following_list(session, user.id, limit, offset)
        return await FollowService._to_list_items(session, rows, viewer_id)

    @staticmethod
    async def get_follower_list(
        session: AsyncSession,
        username: str,
        viewer_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[UserListItem]:
        """获取用户的粉丝列表"""
        offset, limit = normalize_page(offset, limit)

        user = await UserDAO.get_by_username(session, username)
        if not user:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")

        rows = await FollowDAO.get_follower_list(session, user.id, limit, offset)
        return await FollowService._to_list_items(session, rows, viewer_id)


# 全局服务实例
follow_service = FollowService()
