"""
两级缓存门面：Redis（持久、权威） + 进程内（有界、镜像）

  set：两层都写（Redis 失败只记日志，内存照写）
  get：先读 Redis，命中则用 CACHE_MIRROR_TTL_SEC 回填内存；Redis 未命中再读内存
  多进程共享同一个 Redis 时同 key 并发写，最后写入者生效
"""
from __future__ import annotations
import logging, threading
from typing import Any, Dict, Optional

from mallbridge.cache.memory_cache import InMemoryCache
from mallbridge.cache.redis_cache import RedisCache
from mallbridge.core.config import settings

logger = logging.getLogger(__name__)


def product_cache_key(lang: str, platform: str, item_id: str) -> str:
    """{lang}:product:{platform}:{id}"""
    return f"{lang}:product:{platform}:{item_id}"


class Cache:

    def __init__(
        self,
        durable: Optional[RedisCache] = None,
        memory: Optional[InMemoryCache] = None,
        mirror_ttl_sec: Optional[int] = None,
    ) -> None:
        self.durable = durable if durable is not None else RedisCache()
        self.memory = memory if memory is not None else InMemoryCache()
        self.mirror_ttl_sec = mirror_ttl_sec or settings.CACHE_MIRROR_TTL_SEC

    @classmethod
    def from_settings(cls) -> "Cache":
        cache = cls(
            durable=RedisCache(settings.REDIS_URL),
            memory=InMemoryCache(settings.MAX_CACHE_ENTRIES),
        )
        logger.info(
            "Cache initialized: redis=%s, memory max_entries=%d",
            "enabled" if cache.durable.enabled else "disabled (in-memory only)",
            cache.memory.max_size,
        )
        return cache

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        self.durable.set(key, value, ttl_seconds)
        self.memory.set(key, value, ttl_seconds)

    def get(self, key: str) -> Optional[Any]:
        value = self.durable.get(key)
        if value is not None:
            self.memory.set(key, value, self.mirror_ttl_sec)
            return value
        return self.memory.get(key)

    def delete(self, key: str) -> None:
        self.durable.delete(key)
        self.memory.delete(key)

    def stats(self) -> Dict[str, Any]:
        return {
            "memory": self.memory.stats(),
            "redis": "configured" if self.durable.enabled else "not configured",
        }

    def close(self) -> None:
        self.durable.close()
        self.memory.close()


_cache: Optional[Cache] = None
_cache_lock = threading.Lock()


def get_cache() -> Cache:
    """进程内单例（首次调用时按 settings 构建）。"""
    global _cache
    if _cache is None:
        with _cache_lock:
            if _cache is None:
                _cache = Cache.from_settings()
    return _cache
