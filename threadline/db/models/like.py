"""
点赞表 ORM 模型
"""

from sqlalchemy import Column, String, Integer, TIMESTAMP, ForeignKey, Index, UniqueConstraint
from datetime import datetime

from threadline.db.base import Base


class Like(Base):
    """点赞表（多态目标：post / comment / reply）"""
    __tablename__ = "likes"

    # 主键
    id = Column(Integer, primary_key=True, autoincrement=True, comment="自增ID")

    # 外键
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, comment="点赞用户")

    # 目标
    target_type = Column(String(20), nullable=False, comment="目标类型")
    target_id = Column(String(64), nullable=False, comment="目标ID")

    # 时间戳
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="点赞时间")

    # 约束和索引
    __table_args__ = (
        UniqueConstraint('user_id', 'target_type', 'target_id', name='uk_like_user_target'),
        Index('idx_likes_target', 'target_type', 'target_id'),
        Index('idx_likes_user', 'user_id', 'created_at', postgresql_ops={'created_at': 'DESC'}),
    )
