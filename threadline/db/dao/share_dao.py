"""
分享数据访问对象
"""

from typing import Optional, List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.db.models.share import Share
from threadline.utils.id_generator import generate_share_id


class ShareDAO:
    """分享 DAO"""

    @staticmethod
    async def create(
        session: AsyncSession,
        user_id: str,
        target_type: str,
        target_id: str,
        message: Optional[str] = None
    ) -> Share:
        """创建分享记录"""
        share = Share(
            id=generate_share_id(),
            user_id=user_id,
            target_type=target_type,
            target_id=target_id,
            message=message,
        )

        session.add(share)
        await session.flush()

        return share

    @staticmethod
    async def get_by_target(
        session: AsyncSession,
        target_type: str,
        target_id: str,
        limit: int = 20,
        offset: int = 0
    ) -> List[Share]:
        """获取某个目标的分享记录"""
        result = await session.execute(
            select(Share)
            .where(Share.target_type == target_type, Share.target_id == target_id)
            .order_by(Share.created_at.desc(), Share.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())
