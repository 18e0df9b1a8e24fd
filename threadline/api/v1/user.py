"""
用户模块路由
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.models import ApiResponse, UserCreate, UserLogin, UserUpdate, UserRoleUpdate
from threadline.api.deps import get_current_user, get_current_user_optional, get_db_session
from threadline.services.user_service import user_service

router = APIRouter()


@router.post("/register", response_model=ApiResponse)
async def register(
    user_data: UserCreate,
    session: AsyncSession = Depends(get_db_session)
):
    """
    用户注册

    - 用户名唯一（不区分大小写）
    - 邮箱唯一
    """
    result = await user_service.register(session, user_data)
    return ApiResponse(data=result, message="Registration successful")


@router.post("/login", response_model=ApiResponse)
async def login(
    login_data: UserLogin,
    session: AsyncSession = Depends(get_db_session)
):
    """用户登录（邮箱或用户名 + 密码）"""
    result = await user_service.login(session, login_data)
    return ApiResponse(data=result, message="Login successful")


@router.get("/me", response_model=ApiResponse)
async def get_me(
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """获取当前用户资料（经由缓存）"""
    profile = await user_service.get_me(session, current_user["user_id"])
    return ApiResponse(data=profile)


@router.put("/me", response_model=ApiResponse)
async def update_me(
    data: UserUpdate,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """更新昵称 / 简介 / 头像"""
    profile = await user_service.update_me(session, current_user["user_id"], data)
    return ApiResponse(data=profile, message="Profile updated")


@router.delete("/me", response_model=ApiResponse)
async def delete_me(
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """注销当前账号"""
    await user_service.delete_me(session, current_user["user_id"])
    return ApiResponse(message="Account deleted")


@router.get("", response_model=ApiResponse)
async def list_users(
    limit: Optional[int] = Query(None),
    offset: int = Query(0),
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """用户列表（最新注册在前，附带关注状态）"""
    users = await user_service.list_users(session, current_user["user_id"], limit, offset)
    return ApiResponse(data=users)


@router.get("/suggestions", response_model=ApiResponse)
async def suggest_users(
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """随机推荐用户"""
    users = await user_service.suggest_users(session, current_user["user_id"])
    return ApiResponse(data=users)


@router.put("/{user_id}/role", response_model=ApiResponse)
async def update_user_role(
    user_id: str,
    data: UserRoleUpdate,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """修改用户角色（仅管理员）"""
    profile = await user_service.update_role(session, current_user["user_id"], user_id, data.role)
    return ApiResponse(data=profile, message="Role updated")


@router.delete("/{user_id}", response_model=ApiResponse)
async def delete_user(
    user_id: str,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """注销指定用户（仅管理员）"""
    await user_service.delete_user(session, current_user["user_id"], user_id)
    return ApiResponse(message="User deleted")


@router.get("/{username}", response_model=ApiResponse)
async def get_profile(
    username: str,
    current_user: Optional[dict] = Depends(get_current_user_optional),
    session: AsyncSession = Depends(get_db_session)
):
    """
    获取用户公开资料

    - 游客可查看
    - 登录用户额外返回 is_following
    """
    viewer_id = current_user["user_id"] if current_user else None
    profile = await user_service.get_profile(session, username, viewer_id)
    return ApiResponse(data=profile)
