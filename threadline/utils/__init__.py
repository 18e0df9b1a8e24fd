"""
工具模块
"""

from .auth import create_access_token, verify_password, get_password_hash, decode_access_token
from .id_generator import (
    generate_ulid, generate_user_id, generate_post_id,
    generate_comment_id, generate_repost_id, generate_share_id,
)

__all__ = [
    # 认证工具
    "create_access_token",
    "verify_password",
    "get_password_hash",
    "decode_access_token",

    # ID 生成器
    "generate_ulid",
    "generate_user_id",
    "generate_post_id",
    "generate_comment_id",
    "generate_repost_id",
    "generate_share_id",
]
