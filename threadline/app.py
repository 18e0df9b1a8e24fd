"""
FastAPI 应用入口
"""

import asyncio

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from loguru import logger
from sqlalchemy import text

from threadline.config import settings
from threadline.api import api_v1_router
from threadline.db import base as db_base
from threadline.db.base import init_db, close_db
from threadline.utils.exceptions import ApiError, RequestTimeoutError
from threadline.utils.logger_config import setup_logging
from threadline.utils.redis_client import redis_client


def error_body(status_code: int, message: str, error: dict) -> dict:
    """统一错误响应体"""
    return {
        "success": False,
        "code": status_code,
        "message": message,
        "error": error,
    }


class RequestDeadlineMiddleware:
    """
    每个 HTTP 请求的整体超时

    超时后请求协程被取消（会话随之回滚），若响应尚未开始则返回 504
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message):
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await asyncio.wait_for(
                self.app(scope, receive, send_wrapper),
                timeout=settings.REQUEST_TIMEOUT
            )
        except asyncio.TimeoutError:
            logger.warning(f"⏱️  Request timed out: {scope['method']} {scope['path']}")
            if response_started:
                return
            exc = RequestTimeoutError("Request timed out")
            response = JSONResponse(
                status_code=exc.status_code,
                content=error_body(exc.status_code, exc.message, exc.to_error())
            )
            await response(scope, receive, send)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    setup_logging()
    logger.info(f"🚀 Starting {settings.APP_NAME}...")

    # 初始化 Redis（失败时缓存降级为未命中）
    try:
        await redis_client.connect()
        logger.success("✅ Redis initialized")
    except Exception as e:
        logger.error(f"❌ Redis init failed: {e}")
        logger.warning("⚠️  User cache disabled")

    # 初始化数据库（缺失的表自动创建）
    if settings.DATABASE_ENABLED:
        await init_db()
        logger.success("✅ Database connection pool initialized")
    else:
        logger.info("📦 Database disabled, skipping initialization")

    logger.success("🎉 Application started successfully!")

    yield

    logger.info("👋 Shutting down...")

    await redis_client.close()

    if settings.DATABASE_ENABLED:
        try:
            await close_db()
            logger.info("✅ Database connections closed")
        except Exception as e:
            logger.error(f"❌ Database close failed: {e}")

    logger.success("✅ Application shutdown complete")


# 创建 FastAPI 应用
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(RequestDeadlineMiddleware)

# CORS 配置
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# 注册 API 路由
app.include_router(api_v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
async def root():
    """健康检查"""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "ok"
    }


@app.get("/health")
async def health_check():
    """健康检查（详细）"""
    health_status = {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "services": {}
    }

    # 检查 Redis
    if redis_client.is_connected:
        try:
            await redis_client.ping()
            health_status["services"]["redis"] = "healthy"
        except Exception as e:
            logger.warning(f"⚠️  Redis health check failed: {e}")
            health_status["services"]["redis"] = "unhealthy"
            health_status["status"] = "degraded"
    else:
        health_status["services"]["redis"] = "not_initialized"

    # 检查数据库
    if settings.DATABASE_ENABLED:
        if db_base.async_engine is not None:
            try:
                async with db_base.async_engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
                health_status["services"]["database"] = "healthy"
            except Exception as e:
                logger.warning(f"⚠️  Database health check failed: {e}")
                health_status["services"]["database"] = "unhealthy"
                health_status["status"] = "degraded"
        else:
            health_status["services"]["database"] = "not_initialized"
    else:
        health_status["services"]["database"] = "disabled"

    return health_status


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    """业务异常 -> 对应状态码"""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, exc.message, exc.to_error())
    )


# 全局异常处理
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """全局异常处理（内部细节只写日志）"""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {type(exc).__name__}: {exc}")

    return JSONResponse(
        status_code=500,
        content=error_body(500, "Internal server error", {
            "code": "INTERNAL_ERROR",
            "message": "Internal server error"
        })
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "threadline.app:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
