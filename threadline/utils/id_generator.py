"""
ID 生成器

提供各种实体的唯一 ID 生成功能
"""

import ulid


def generate_ulid() -> str:
    """
    生成 ULID（Universally Unique Lexicographically Sortable Identifier）

    特点：
    - 128-bit 兼容性
    - 按时间排序
    - 规范化的字符串表示（26个字符）

    Returns:
        ULID 字符串
    """
    return str(ulid.new())


def generate_user_id() -> str:
    """
    生成用户 ID

    格式：user_<ulid>
    示例：user_01ARZ3NDEKTSV4RRFFQ69G5FAV
    """
    return f"user_{generate_ulid()}"


def generate_post_id() -> str:
    """
    生成帖子 ID

    格式：post_<ulid>
    """
    return f"post_{generate_ulid()}"


def generate_comment_id() -> str:
    """
    生成评论 ID

    格式：comment_<ulid>
    """
    return f"comment_{generate_ulid()}"


def generate_repost_id() -> str:
    """生成转发 ID（repost_<ulid>）"""
    return f"repost_{generate_ulid()}"


def generate_share_id() -> str:
    """生成分享 ID（share_<ulid>）"""
    return f"share_{generate_ulid()}"


def ulid_part(entity_id: str) -> str:
    """
    取出带前缀 ID 中的 ULID 部分

    不同实体的 ID 前缀不同，按生成顺序比较时只能比较 ULID 部分
    """
    return entity_id.split("_", 1)[-1]
