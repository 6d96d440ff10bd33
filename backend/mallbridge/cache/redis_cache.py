"""
Redis 持久层：值统一 JSON 序列化，SETEX 写入。
没配 REDIS_URL 时整个层是空操作；任何 Redis 错误都只记日志，不往上抛。
"""
from __future__ import annotations
import json, logging
from typing import Any, Optional

import redis

from mallbridge.core.config import settings

logger = logging.getLogger(__name__)


class RedisCache:

    def __init__(self, url: Optional[str] = None, client: Optional["redis.Redis"] = None) -> None:
        self._r = client
        if self._r is None and url:
            self._r = redis.from_url(
                url,
                decode_responses=True,
                socket_connect_timeout=settings.REDIS_CONNECT_TIMEOUT,
                socket_timeout=settings.REDIS_CONNECT_TIMEOUT,
            )
            logger.info("Redis cache configured")

    @property
    def enabled(self) -> bool:
        return self._r is not None

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        if self._r is None:
            return
        try:
            self._r.setex(key, int(ttl_seconds), json.dumps(value, ensure_ascii=False))
        except Exception as e:
            logger.error("Redis set error for %s: %s", key, e)

    def get(self, key: str) -> Optional[Any]:
        if self._r is None:
            return None
        try:
            raw = self._r.get(key)
            return json.loads(raw) if raw else None
        except Exception as e:
            logger.error("Redis get error for %s: %s", key, e)
            return None

    def delete(self, key: str) -> None:
        if self._r is None:
            return
        try:
            self._r.delete(key)
        except Exception as e:
            logger.error("Redis delete error for %s: %s", key, e)

    def close(self) -> None:
        if self._r is None:
            return
        try:
            self._r.close()
        except Exception as e:
            logger.warning("Redis close error: %s", e)
