"""
业务异常

服务层抛出，由 app.py 中注册的异常处理器统一转换为 HTTP 响应
"""

from typing import Optional


class ApiError(Exception):
    """
    业务异常基类

    - status_code: 对应的 HTTP 状态码
    - code: 业务错误码（如 USER_NOT_FOUND）
    - message: 返回给客户端的说明
    """
    status_code = 500
    default_code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def to_error(self) -> dict:
        return {"code": self.code, "message": self.message}


class ValidationError(ApiError):
    """400 参数或内容不合法"""
    status_code = 400
    default_code = "VALIDATION_ERROR"


class ConflictError(ApiError):
    """400 与当前状态冲突（关注自己、重复注册等）"""
    status_code = 400
    default_code = "CONFLICT"


class AuthenticationError(ApiError):
    """401 凭证无效"""
    status_code = 401
    default_code = "INVALID_CREDENTIALS"


class AuthorizationError(ApiError):
    """403 操作他人的资源"""
    status_code = 403
    default_code = "PERMISSION_DENIED"


class NotFoundError(ApiError):
    """404 用户 / 帖子 / 目标不存在"""
    status_code = 404
    default_code = "NOT_FOUND"


class RequestTimeoutError(ApiError):
    """504 请求处理超时"""
    status_code = 504
    default_code = "REQUEST_TIMEOUT"


class ServiceUnavailableError(ApiError):
    """503 数据库未启用"""
    status_code = 503
    default_code = "SERVICE_UNAVAILABLE"
