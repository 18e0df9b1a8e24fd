"""
用户资料缓存

以用户ID为键缓存最新的用户 JSON，带 TTL。
缓存永远不是数据源：未连接 / 读写失败时按未命中处理，
每次用户记录变更都必须调用 invalidate。
"""

import json
from typing import Any, Awaitable, Callable, Optional

from loguru import logger
from redis.exceptions import RedisError

from threadline.config.settings import settings
from threadline.utils.redis_client import redis_client, RedisClient


class UserCache:
    """用户资料缓存（Redis）"""

    def __init__(self, client: Optional[RedisClient] = None, ttl: Optional[int] = None):
        self._client = client or redis_client
        self._ttl = ttl

    @property
    def ttl(self) -> int:
        return self._ttl or settings.USER_CACHE_TTL

    @staticmethod
    def key(user_id: str) -> str:
        """缓存键"""
        return f"{settings.USER_CACHE_PREFIX}:{user_id}"

    @staticmethod
    def _serialize(value: Any) -> str:
        return json.dumps(value, ensure_ascii=False, default=str)

    async def get(self, user_id: str) -> Optional[dict]:
        """读取缓存，未命中或不可用时返回 None"""
        if not self._client.is_connected:
            return None

        try:
            value = await self._client.get(self.key(user_id))
        except RedisError as e:
            logger.warning(f"⚠️  User cache read failed for {user_id}: {e}")
            return None

        if value is None:
            return None

        try:
            return json.loads(value)
        except (json.JSONDecodeError, ValueError):
            # 脏数据直接丢弃
            await self.invalidate(user_id)
            return None

    async def set(self, user_id: str, payload: dict):
        """写入缓存"""
        if not self._client.is_connected:
            return

        try:
            await self._client.set(self.key(user_id), self._serialize(payload), ex=self.ttl)
        except RedisError as e:
            logger.warning(f"⚠️  User cache write failed for {user_id}: {e}")

    async def invalidate(self, *user_ids: str):
        """删除一个或多个用户的缓存"""
        if not user_ids or not self._client.is_connected:
            return

        try:
            await self._client.delete(*[self.key(user_id) for user_id in user_ids])
        except RedisError as e:
            logger.warning(f"⚠️  User cache invalidation failed for {user_ids}: {e}")

    async def get_or_load(
        self,
        user_id: str,
        loader: Callable[[], Awaitable[Optional[dict]]]
    ) -> Optional[dict]:
        """
        获取缓存，未命中时调用 loader 从数据库加载并回填

        Args:
            user_id: 用户ID
            loader: 异步加载函数，返回 None 表示用户不存在（不缓存）

        Returns:
            用户资料字典或 None
        """
        cached = await self.get(user_id)
        if cached is not None:
            return cached

        payload = await loader()
        if payload is not None:
            await self.set(user_id, payload)
        return payload


# 全局用户缓存实例
user_cache = UserCache()
