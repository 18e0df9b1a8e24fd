"""
互动目标解析

点赞 / 分享的目标在存储层是 (target_type, target_id) 二元组，
应用层统一通过 TargetKind 分派解析。
"""

from sqlalchemy.ext.asyncio import AsyncSession

from threadline.db.dao import PostDAO, CommentDAO
from threadline.models import TargetKind, ContentTarget
from threadline.utils.exceptions import ValidationError, NotFoundError


def parse_target_kind(value) -> TargetKind:
    """字符串 -> TargetKind，未知类型抛出 ValidationError"""
    if isinstance(value, TargetKind):
        return value
    try:
        return TargetKind(str(value).lower())
    except ValueError:
        raise ValidationError(f"Unknown target type: {value}", code="INVALID_TARGET_TYPE")


async def resolve_target(session: AsyncSession, target_type, target_id: str) -> ContentTarget:
    """
    确认目标存在

    Args:
        session: 数据库会话
        target_type: 目标类型（post / comment / reply）
        target_id: 目标ID

    Returns:
        ContentTarget

    Raises:
        ValidationError: 未知的目标类型
        NotFoundError: 目标不存在（或类型与记录不符）
    """
    kind = parse_target_kind(target_type)

    if kind is TargetKind.POST:
        exists = await PostDAO.get_by_id(session, target_id) is not None
    elif kind is TargetKind.COMMENT:
        comment = await CommentDAO.get_by_id(session, target_id)
        exists = comment is not None and comment.parent_id is None
    elif kind is TargetKind.REPLY:
        comment = await CommentDAO.get_by_id(session, target_id)
        exists = comment is not None and comment.parent_id is not None
    else:
        raise ValidationError(f"Unsupported target type: {kind}", code="INVALID_TARGET_TYPE")

    if not exists:
        raise NotFoundError(f"{kind.value.capitalize()} not found", code=f"{kind.value.upper()}_NOT_FOUND")

    return ContentTarget(kind=kind, id=target_id)
