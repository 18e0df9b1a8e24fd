"""
评论表 ORM 模型
"""

from sqlalchemy import Column, String, Text, TIMESTAMP, ForeignKey, Index
from datetime import datetime

from threadline.db.base import Base


class Comment(Base):
    """评论表（parent_id 非空即为回复）"""
    __tablename__ = "comments"

    # 主键
    id = Column(String(64), primary_key=True, comment="评论ID")

    # 外键
    post_id = Column(String(64), ForeignKey("posts.id"), nullable=False, comment="帖子ID")
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, comment="评论用户")
    parent_id = Column(String(64), ForeignKey("comments.id"), nullable=True, comment="父评论ID")

    # 评论内容
    text = Column(Text, nullable=False, comment="评论内容")
    image_url = Column(String(512), nullable=True, comment="图片URL")
    video_url = Column(String(512), nullable=True, comment="视频URL")

    # 时间戳
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="创建时间")
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow, comment="更新时间")

    # 索引
    __table_args__ = (
        Index('idx_comments_post', 'post_id', 'created_at', postgresql_ops={'created_at': 'DESC'}),
        Index('idx_comments_user', 'user_id', 'created_at', postgresql_ops={'created_at': 'DESC'}),
        Index('idx_comments_parent', 'parent_id'),
    )
