from .memory_cache import InMemoryCache
from .redis_cache import RedisCache
from .cache import Cache, get_cache, product_cache_key


__all__ = ["InMemoryCache", "RedisCache", "Cache", "get_cache", "product_cache_key"]
