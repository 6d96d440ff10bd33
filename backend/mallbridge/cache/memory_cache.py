"""
进程内缓存（有界 + TTL）

  - 满了一次淘汰 evict_batch 条，挑「最早过期」的淘汰（按过期时间，不是 LRU）
  - 后台 daemon 线程每 sweep_interval_sec 清一次已过期条目（0 = 不启动）
  - 存取都做深拷贝：调用方改返回值不会污染缓存
  - 翻译走线程池，请求线程和池线程可能同时读写，所以整个 map 用一把锁
"""
from __future__ import annotations
import copy, heapq, json, logging, threading, time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from mallbridge.core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    value: Any
    expires_at: float


class InMemoryCache:

    def __init__(
        self,
        max_size: Optional[int] = None,
        evict_batch: Optional[int] = None,
        sweep_interval_sec: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_size = max_size or settings.MAX_CACHE_ENTRIES
        self.evict_batch = evict_batch or settings.CACHE_EVICT_BATCH
        self._clock = clock
        self._data: Dict[str, _Entry] = {}
        self._lock = threading.RLock()

        interval = settings.CACHE_SWEEP_INTERVAL_SEC if sweep_interval_sec is None else sweep_interval_sec
        self._stop = threading.Event()
        self._sweeper: Optional[threading.Thread] = None
        if interval and interval > 0:
            self._sweeper = threading.Thread(
                target=self._sweep_loop, args=(interval,), name="mallbridge-cache-sweeper", daemon=True
            )
            self._sweeper.start()


    # ---------- Public ----------
    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        if ttl_seconds is None or ttl_seconds <= 0:
            self.delete(key)
            return
        stored = copy.deepcopy(value)
        with self._lock:
            if key not in self._data and len(self._data) >= self.max_size:
                self._evict_soonest(self.evict_batch)
            self._data[key] = _Entry(value=stored, expires_at=self._clock() + ttl_seconds)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            if self._clock() > entry.expires_at:
                del self._data[key]
                return None
            return copy.deepcopy(entry.value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def cleanup(self) -> int:
        """删掉所有已过期条目，返回删除数量。"""
        now = self._clock()
        with self._lock:
            expired = [k for k, e in self._data.items() if now > e.expires_at]
            for k in expired:
                del self._data[k]
        if expired:
            logger.info("Cleaned up %d expired cache entries", len(expired))
        return len(expired)

    def stats(self) -> Dict[str, Any]:
        self.cleanup()
        with self._lock:
            items = list(self._data.items())

        # 粗估内存：key/value 按 UTF-16 两字节一个字符，再加每条 100 字节开销
        estimated = 0
        for key, entry in items:
            estimated += len(key) * 2
            estimated += len(json.dumps(entry.value, default=str)) * 2
            estimated += 100

        return {
            "size": len(items),
            "max_size": self.max_size,
            "entries": [k for k, _ in items],
            "estimated_memory_mb": round(estimated / 1024 / 1024, 2),
        }

    def close(self) -> None:
        self._stop.set()
        if self._sweeper is not None and self._sweeper.is_alive():
            self._sweeper.join(timeout=1.0)
        self.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


    # ---------- Internals ----------
    def _evict_soonest(self, count: int) -> None:
        victims = heapq.nsmallest(count, self._data.items(), key=lambda kv: kv[1].expires_at)
        for key, _ in victims:
            del self._data[key]
        logger.debug("Evicted %d cache entries (soonest expiry first)", len(victims))

    def _sweep_loop(self, interval: float) -> None:
        while not self._stop.wait(interval):
            try:
                self.cleanup()
            except Exception:
                logger.exception("Cache sweep failed")
