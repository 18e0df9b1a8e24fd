"""
用户表 ORM 模型
"""

from sqlalchemy import Column, String, Text, Integer, TIMESTAMP, Index
from datetime import datetime

from threadline.db.base import Base


class User(Base):
    """用户表"""
    __tablename__ = "users"

    # 主键
    id = Column(String(64), primary_key=True, comment="用户ID")

    # 基本信息
    name = Column(String(128), nullable=False, comment="显示名称")
    username = Column(String(64), unique=True, nullable=False, comment="用户名（小写唯一）")
    email = Column(String(128), unique=True, nullable=False, comment="邮箱")
    password_hash = Column(String(256), nullable=False, comment="密码哈希")
    bio = Column(Text, nullable=True, comment="个人简介")
    avatar_url = Column(String(512), nullable=True, comment="头像URL")

    # 角色与状态
    role = Column(String(20), nullable=False, default="user", comment="角色")
    status = Column(String(20), nullable=False, default="active", comment="用户状态")

    # 统计字段（冗余计数，必须与关注关系表一致）
    following_count = Column(Integer, nullable=False, default=0, comment="关注数")
    follower_count = Column(Integer, nullable=False, default=0, comment="粉丝数")

    # 时间戳
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="创建时间")
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow, comment="更新时间")
    deleted_at = Column(TIMESTAMP, nullable=True, comment="注销时间")

    # 索引
    __table_args__ = (
        Index('idx_users_status', 'status'),
    )
