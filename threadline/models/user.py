"""
用户相关数据模型
"""

from typing import Optional
from pydantic import BaseModel, Field, EmailStr
from datetime import datetime
from enum import Enum


class UserStatus(str, Enum):
    """用户状态"""
    ACTIVE = "active"
    DELETED = "deleted"


class UserRole(str, Enum):
    """用户角色"""
    USER = "user"
    ADMIN = "admin"


class UserCreate(BaseModel):
    """用户注册请求"""
    name: str = Field(..., min_length=1, max_length=128, description="显示名称")
    username: str = Field(..., min_length=3, max_length=64, pattern=r"^[A-Za-z0-9_]+$", description="用户名")
    email: EmailStr = Field(..., description="邮箱")
    password: str = Field(..., min_length=6, description="密码")


class UserLogin(BaseModel):
    """用户登录请求（邮箱或用户名）"""
    login: str = Field(..., description="邮箱或用户名")
    password: str = Field(..., description="密码")


class UserUpdate(BaseModel):
    """更新个人资料"""
    name: Optional[str] = Field(None, min_length=1, max_length=128)
    bio: Optional[str] = Field(None, max_length=500)
    avatar_url: Optional[str] = Field(None, max_length=512)


class UserSummary(BaseModel):
    """内容作者 / 列表中的用户摘要"""
    user_id: str
    name: str
    username: str
    avatar_url: Optional[str] = None


class UserProfile(UserSummary):
    """用户公开资料"""
    bio: Optional[str] = None
    role: UserRole = UserRole.USER
    follower_count: int = 0
    following_count: int = 0
    is_following: Optional[bool] = None
    created_at: datetime


class UserListItem(UserSummary):
    """关注 / 粉丝列表项"""
    follower_count: int = 0
    following_count: int = 0
    is_following: bool = False
    followed_at: datetime


class UserCard(UserSummary):
    """用户列表 / 推荐用户"""
    follower_count: int = 0
    following_count: int = 0
    is_following: bool = False
    created_at: datetime


class UserRoleUpdate(BaseModel):
    """管理员修改用户角色"""
    role: UserRole = Field(..., description="新角色")


class TokenResponse(BaseModel):
    """登录 / 注册成功后返回的令牌"""
    access_token: str
    token_type: str = "bearer"
    user: UserProfile
