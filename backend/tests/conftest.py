from __future__ import annotations
from typing import Dict, List, Optional

import pytest

from mallbridge.cache import Cache, InMemoryCache, RedisCache


class FakeClock:
    """可手动拨动的单调时钟，用于 TTL 测试。"""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "", headers: Optional[Dict[str, str]] = None, json_body=None):
        self.status_code = status_code
        self.text = text
        self.headers = headers or {}
        self._json = json_body
        self.url = "http://fake"

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        if self._json is None:
            raise ValueError("no json")
        return self._json


class FakeSession:
    """记录调用并按顺序返回预置响应；响应是 Exception 时直接抛。"""

    def __init__(self, responses: List[object]) -> None:
        self.responses = list(responses)
        self.calls: List[dict] = []

    def _next(self, **call):
        self.calls.append(call)
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def get(self, url, **kwargs):
        return self._next(method="GET", url=url, **kwargs)

    def post(self, url, **kwargs):
        return self._next(method="POST", url=url, **kwargs)

    def request(self, method, url, **kwargs):
        return self._next(method=method, url=url, **kwargs)

    def close(self) -> None:
        pass


class RecordingTranslator:
    """把文本翻成 "[lang]text"，并记录调用次数。"""

    def __init__(self, table: Optional[Dict[str, str]] = None) -> None:
        self.table = table or {}
        self.calls: List[str] = []

    def translate(self, text: str, target_lang: str, source_lang: str = "auto") -> str:
        self.calls.append(text)
        return self.table.get(text, f"[{target_lang}]{text}")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_cache(clock: FakeClock):
    cache = InMemoryCache(max_size=100, evict_batch=10, sweep_interval_sec=0, clock=clock)
    try:
        yield cache
    finally:
        cache.close()


@pytest.fixture
def cache(memory_cache: InMemoryCache) -> Cache:
    # 不配 Redis：只用进程内层
    return Cache(durable=RedisCache(), memory=memory_cache)
