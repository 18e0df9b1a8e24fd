"""
转发表 ORM 模型
"""

from sqlalchemy import Column, String, TIMESTAMP, ForeignKey, Index
from datetime import datetime

from threadline.db.base import Base


class Repost(Base):
    """转发表（同一用户可多次转发同一帖子）"""
    __tablename__ = "reposts"

    # 主键
    id = Column(String(64), primary_key=True, comment="转发ID")

    # 外键
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, comment="转发用户")
    original_post_id = Column(String(64), ForeignKey("posts.id"), nullable=False, comment="原帖子ID")

    # 转发附言
    comment = Column(String(256), nullable=True, comment="转发附言")

    # 时间戳
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="转发时间")
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow, comment="更新时间")

    # 索引
    __table_args__ = (
        Index('idx_reposts_user', 'user_id', 'created_at', postgresql_ops={'created_at': 'DESC'}),
        Index('idx_reposts_original', 'original_post_id'),
    )
