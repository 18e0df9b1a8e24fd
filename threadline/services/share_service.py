"""
分享服务

只记录分享事件，信息流不依赖分享数据。
"""

from typing import Optional, List

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.config.settings import settings
from threadline.db.dao import ShareDAO
from threadline.models import ShareResponse
from threadline.services.targets import resolve_target
from threadline.utils.exceptions import ValidationError
from threadline.utils.logger_config import operation_logger
from threadline.utils.pagination import normalize_page


class ShareService:
    """分享服务"""

    @staticmethod
    @operation_logger("social", "share")
    async def share(
        session: AsyncSession,
        user_id: str,
        target_type,
        target_id: str,
        message: Optional[str] = None
    ) -> ShareResponse:
        """
        记录一次分享

        Args:
            session: 数据库会话
            user_id: 当前用户ID
            target_type: 目标类型
            target_id: 目标ID
            message: 分享附言

        Returns:
            ShareResponse
        """
        if message and len(message) > settings.MAX_SHARE_MESSAGE_LENGTH:
            raise ValidationError(
                f"Share message must be at most {settings.MAX_SHARE_MESSAGE_LENGTH} characters",
                code="MESSAGE_TOO_LONG"
            )

        target = await resolve_target(session, target_type, target_id)
        share = await ShareDAO.create(session, user_id, target.kind.value, target.id, message)

        logger.info(f"📤 {user_id} shared {target.kind.value}:{target.id}")
        return ShareResponse(
            share_id=share.id,
            user_id=share.user_id,
            target_type=target.kind,
            target_id=share.target_id,
            message=share.message,
            created_at=share.created_at,
        )

    @staticmethod
    async def get_shares(
        session: AsyncSession,
        target_type,
        target_id: str,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[ShareResponse]:
        """获取某个目标的分享记录"""
        offset, limit = normalize_page(offset, limit)
        target = await resolve_target(session, target_type, target_id)

        shares = await ShareDAO.get_by_target(session, target.kind.value, target.id, limit, offset)
        return [
            ShareResponse(
                share_id=share.id,
                user_id=share.user_id,
                target_type=target.kind,
                target_id=share.target_id,
                message=share.message,
                created_at=share.created_at,
            )
            for share in shares
        ]


# 全局服务实例
share_service = ShareService()
