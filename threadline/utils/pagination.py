"""
偏移分页参数处理
"""

from typing import Optional, Tuple

from threadline.config.settings import settings
from threadline.utils.exceptions import ValidationError


def normalize_page(
    offset: int,
    limit: Optional[int],
    default_limit: Optional[int] = None,
    max_limit: Optional[int] = None
) -> Tuple[int, int]:
    """
    校验 offset 并把 limit 收敛到 [1, max_limit]

    Args:
        offset: 偏移量（负数为非法输入）
        limit: 每页数量，None 时使用默认值
        default_limit: 默认每页数量
        max_limit: 每页上限

    Returns:
        (offset, limit)
    """
    if offset is None:
        offset = 0
    if offset < 0:
        raise ValidationError("offset must be non-negative", code="INVALID_OFFSET")

    default_limit = default_limit or settings.DEFAULT_PAGE_SIZE
    max_limit = max_limit or settings.MAX_PAGE_SIZE

    if limit is None:
        limit = default_limit

    return offset, max(1, min(limit, max_limit))
