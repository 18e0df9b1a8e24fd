"""
分享记录表 ORM 模型
"""

from sqlalchemy import Column, String, Text, TIMESTAMP, ForeignKey, Index
from datetime import datetime

from threadline.db.base import Base


class Share(Base):
    """分享记录表"""
    __tablename__ = "shares"

    # 主键
    id = Column(String(64), primary_key=True, comment="分享ID")

    # 外键
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, comment="分享用户")

    # 目标
    target_type = Column(String(20), nullable=False, comment="目标类型")
    target_id = Column(String(64), nullable=False, comment="目标ID")

    # 附言
    message = Column(Text, nullable=True, comment="分享附言")

    # 时间戳
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="分享时间")

    __table_args__ = (
        Index('idx_shares_target', 'target_type', 'target_id'),
    )
