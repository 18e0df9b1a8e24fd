"""
日志配置模块
为不同的业务操作族创建独立的日志文件
"""
import os
import sys
import asyncio
from functools import wraps

from loguru import logger

from threadline.config.settings import settings

# 每个操作族一个日志文件
OPERATION_LOGGERS = ("feed", "social", "content", "account")

_configured = False


def setup_logging():
    """配置控制台日志和每个操作族的文件日志（只执行一次）"""
    global _configured
    if _configured:
        return

    os.makedirs(settings.LOG_DIR, exist_ok=True)

    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL)

    for family in OPERATION_LOGGERS:
        logger.add(
            f"{settings.LOG_DIR}/{family}.log",
            rotation=settings.LOG_ROTATION,
            retention=settings.LOG_RETENTION,
            compression="zip",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {extra[operation]} | {name}:{function}:{line} | {message}",
            level="DEBUG",
            filter=lambda record, family=family: record["extra"].get("family") == family
        )

    _configured = True


def operation_logger(family: str, operation: str):
    """
    装饰器：为服务操作添加日志上下文

    用法:
        @staticmethod
        @operation_logger("social", "toggle_follow")
        async def toggle_follow(...):
            pass
    """
    def decorator(func):
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            with logger.contextualize(family=family, operation=operation):
                logger.debug(f"▶️  {operation}")
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    logger.warning(f"❌ {operation} failed: {type(e).__name__}: {e}")
                    raise

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            with logger.contextualize(family=family, operation=operation):
                logger.debug(f"▶️  {operation}")
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    logger.warning(f"❌ {operation} failed: {type(e).__name__}: {e}")
                    raise

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
