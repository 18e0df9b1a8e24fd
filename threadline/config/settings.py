"""
应用全局配置

从 config.yaml 加载配置，支持环境变量覆盖
"""

import yaml
from pathlib import Path
from typing import Optional, List
import os


class Settings:
    """应用全局配置（从 config.yaml 加载）"""

    def __init__(self, config_path: Optional[str] = None):
        # 加载 config.yaml（可通过 THREADLINE_CONFIG 指定路径）
        path = config_path or os.getenv("THREADLINE_CONFIG")
        if path:
            config_file = Path(path)
        else:
            config_file = Path(__file__).parent.parent.parent / "config.yaml"
        with open(config_file, 'r', encoding='utf-8') as f:
            self._config = yaml.safe_load(f)

    def _section(self, name: str) -> dict:
        return self._config.get(name) or {}

    # ==================== 应用基础配置 ====================
    @property
    def APP_NAME(self) -> str:
        return os.getenv("APP_NAME", self._config["app"]["name"])

    @property
    def APP_VERSION(self) -> str:
        return os.getenv("APP_VERSION", self._config["app"]["version"])

    @property
    def API_V1_PREFIX(self) -> str:
        return os.getenv("API_V1_PREFIX", self._config["app"]["api_prefix"])

    @property
    def DEBUG(self) -> bool:
        debug_str = os.getenv("DEBUG", str(self._config["app"]["debug"]))
        return debug_str.lower() in ("true", "1", "yes")

    @property
    def REQUEST_TIMEOUT(self) -> float:
        return float(os.getenv("REQUEST_TIMEOUT", self._config["app"].get("request_timeout", 15)))

    # ==================== 数据库配置 ====================
    @property
    def DATABASE_ENABLED(self) -> bool:
        enabled_str = os.getenv("DATABASE_ENABLED", str(self._config["database"]["enabled"]))
        return enabled_str.lower() in ("true", "1", "yes")

    @property
    def DATABASE_URL(self) -> Optional[str]:
        if not self.DATABASE_ENABLED:
            return None
        return os.getenv("DATABASE_URL", self._config["database"]["url"])

    @property
    def DATABASE_POOL_SIZE(self) -> int:
        return int(os.getenv("DATABASE_POOL_SIZE", self._config["database"]["pool_size"]))

    @property
    def DATABASE_MAX_OVERFLOW(self) -> int:
        return int(os.getenv("DATABASE_MAX_OVERFLOW", self._config["database"]["max_overflow"]))

    # ==================== Redis 配置 ====================
    @property
    def REDIS_HOST(self) -> str:
        return os.getenv("REDIS_HOST", self._config["redis"]["host"])

    @property
    def REDIS_PORT(self) -> int:
        return int(os.getenv("REDIS_PORT", self._config["redis"]["port"]))

    @property
    def REDIS_DB(self) -> int:
        return int(os.getenv("REDIS_DB", self._config["redis"]["database"]))

    @property
    def REDIS_PASSWORD(self) -> Optional[str]:
        return os.getenv("REDIS_PASSWORD", self._config["redis"]["password"])

    @property
    def REDIS_MAX_CONNECTIONS(self) -> int:
        return int(os.getenv("REDIS_MAX_CONNECTIONS", self._config["redis"].get("max_connections", 20)))

    # ==================== JWT 认证配置 ====================
    @property
    def JWT_SECRET_KEY(self) -> str:
        return os.getenv("JWT_SECRET_KEY", self._config["jwt"]["secret_key"])

    @property
    def JWT_ALGORITHM(self) -> str:
        return os.getenv("JWT_ALGORITHM", self._config["jwt"]["algorithm"])

    @property
    def JWT_EXPIRE_MINUTES(self) -> int:
        return int(os.getenv("JWT_EXPIRE_MINUTES", self._config["jwt"]["expire_minutes"]))

    # ==================== CORS 配置 ====================
    @property
    def CORS_ORIGINS(self) -> List[str]:
        env_origins = os.getenv("CORS_ORIGINS")
        if env_origins:
            return [origin.strip() for origin in env_origins.split(",")]
        return self._config["cors"]["origins"]

    # ==================== 分页配置 ====================
    @property
    def DEFAULT_PAGE_SIZE(self) -> int:
        return int(os.getenv("DEFAULT_PAGE_SIZE", self._config["business"]["default_page_size"]))

    @property
    def MAX_PAGE_SIZE(self) -> int:
        return int(os.getenv("MAX_PAGE_SIZE", self._config["business"]["max_page_size"]))

    @property
    def USER_SUGGESTION_SIZE(self) -> int:
        return int(os.getenv("USER_SUGGESTION_SIZE", self._section("business").get("suggestion_size", 5)))

    # ==================== 信息流配置 ====================
    @property
    def FEED_DEFAULT_LIMIT(self) -> int:
        return int(os.getenv("FEED_DEFAULT_LIMIT", self._section("feed").get("default_limit", 50)))

    @property
    def FEED_MAX_LIMIT(self) -> int:
        return int(os.getenv("FEED_MAX_LIMIT", self._section("feed").get("max_limit", 200)))

    # ==================== 内容规则配置 ====================
    @property
    def MAX_POST_LENGTH(self) -> int:
        return int(os.getenv("MAX_POST_LENGTH", self._section("content").get("max_post_length", 280)))

    @property
    def MAX_REPOST_COMMENT_LENGTH(self) -> int:
        return int(os.getenv(
            "MAX_REPOST_COMMENT_LENGTH",
            self._section("content").get("max_repost_comment_length", 256)
        ))

    @property
    def MAX_COMMENT_LENGTH(self) -> int:
        return int(os.getenv("MAX_COMMENT_LENGTH", self._section("content").get("max_comment_length", 500)))

    @property
    def MAX_SHARE_MESSAGE_LENGTH(self) -> int:
        return int(os.getenv(
            "MAX_SHARE_MESSAGE_LENGTH",
            self._section("content").get("max_share_message_length", 280)
        ))

    # ==================== 缓存配置 ====================
    @property
    def USER_CACHE_TTL(self) -> int:
        return int(os.getenv("USER_CACHE_TTL", self._section("cache").get("user_ttl", 3600)))

    @property
    def USER_CACHE_PREFIX(self) -> str:
        return os.getenv("USER_CACHE_PREFIX", self._section("cache").get("key_prefix", "user"))

    # ==================== 日志配置 ====================
    @property
    def LOG_LEVEL(self) -> str:
        return os.getenv("LOG_LEVEL", self._section("logging").get("level", "INFO"))

    @property
    def LOG_DIR(self) -> str:
        return os.getenv("LOG_DIR", self._section("logging").get("dir", "logs"))

    @property
    def LOG_ROTATION(self) -> str:
        return os.getenv("LOG_ROTATION", self._section("logging").get("rotation", "10 MB"))

    @property
    def LOG_RETENTION(self) -> str:
        return os.getenv("LOG_RETENTION", self._section("logging").get("retention", "7 days"))


# 全局配置实例
settings = Settings()
