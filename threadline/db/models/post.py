"""
帖子表 ORM 模型
"""

from sqlalchemy import Column, String, Text, TIMESTAMP, ForeignKey, Index
from datetime import datetime

from threadline.db.base import Base


class Post(Base):
    """帖子表（parent_id 非空即为嵌套帖子）"""
    __tablename__ = "posts"

    # 主键
    id = Column(String(64), primary_key=True, comment="帖子ID")

    # 外键
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, comment="作者")
    parent_id = Column(String(64), ForeignKey("posts.id"), nullable=True, comment="父帖子ID")

    # 内容
    text = Column(Text, nullable=True, comment="正文（最多280字符）")
    image_url = Column(String(512), nullable=True, comment="图片URL")
    video_url = Column(String(512), nullable=True, comment="视频URL")

    # 时间戳
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="创建时间")
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow, comment="更新时间")
    deleted_at = Column(TIMESTAMP, nullable=True, comment="删除时间（墓碑）")

    # 索引
    __table_args__ = (
        Index('idx_posts_user_created', 'user_id', 'created_at', postgresql_ops={'created_at': 'DESC'}),
        Index('idx_posts_parent', 'parent_id'),
    )
