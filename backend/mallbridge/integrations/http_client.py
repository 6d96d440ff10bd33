"""
低层 HTTP 客户端：超时/重试/JSON 解析
  - 平台接口（Weidian / OneBound）共用一个 requests.Session；
  - 429/5xx/网络异常做指数退避重试，其它 4xx 直接抛；
  - 只提供 get_json 入口，不关心业务字段结构。
"""

from __future__ import annotations
import json, logging, random, time, requests
from typing import Any, Dict, Optional, Tuple

from mallbridge.core.config import settings
from mallbridge.integrations.errors import (
    UpstreamClientError, UpstreamServerError, UpstreamRateLimitError, UpstreamPayloadError
)

logger = logging.getLogger(__name__)


class PlatformHttpClient:
    """平台 API 的低层 HTTP 客户端：负责超时与重试。"""

    def __init__(
        self,
        connect_timeout: Optional[float] = None,
        read_timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        session: Optional[requests.Session] = None,
        sleep=time.sleep,
    ) -> None:
        """初始化客户端，允许覆盖基础配置以便测试。"""
        self.connect_timeout = connect_timeout or settings.HTTP_CONNECT_TIMEOUT
        self.read_timeout = read_timeout or settings.HTTP_READ_TIMEOUT
        self.max_attempts = max_attempts or settings.HTTP_MAX_ATTEMPTS
        self._session = session or requests.Session()
        self._sleep = sleep


    # ---------- Public ----------
    def get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """发送 GET 请求并返回解析后的 JSON，附带重试。"""
        resp = self._request("GET", url, params=params, headers=headers)
        return self._as_json(resp)

    def close(self) -> None:
        self._session.close()

    @property
    def timeout(self) -> Tuple[float, float]:
        return (self.connect_timeout, self.read_timeout)


    # ---------- Internals ----------
    def _as_json(self, resp: requests.Response) -> Any:
        """尝试解析响应 JSON；若失败则截取文本并抛 UpstreamPayloadError。"""
        ctype = (resp.headers.get("Content-Type") or "").lower()
        if "json" not in ctype:
            logger.debug("non-JSON response Content-Type=%s url=%s", ctype, resp.url)
        try:
            return resp.json()
        except Exception as e:
            text = (resp.text or "")[:500]  # 截断，避免日志过大
            raise UpstreamPayloadError(f"non-JSON response (status={resp.status_code}): {text}") from e


    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        """执行一次底层 HTTP 调用，负责重试与状态码处理。"""
        headers = kwargs.pop("headers", None) or {}
        headers.setdefault("Accept", "application/json, text/plain, */*")

        for attempt in range(1, self.max_attempts + 1):
            try:
                resp = self._session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
            except requests.RequestException as e:
                # error1: 连接/超时等异常：指数退避
                if attempt == self.max_attempts:
                    raise UpstreamClientError(f"request error: {e}") from e
                logger.info("HTTP %s %s attempt %d/%d failed: %s", method, url, attempt, self.max_attempts, e)
                self._sleep_backoff(attempt)
                continue

            # 429 限流：指数退避后重试；用尽重试则抛 UpstreamRateLimitError
            if resp.status_code == 429:
                if attempt == self.max_attempts:
                    raise UpstreamRateLimitError(f"429 after retries: {(resp.text or '')[:300]}")
                self._sleep_backoff(attempt)
                continue

            # 5xx 服务端错误：指数退避后重试；用尽重试则抛 UpstreamServerError
            if resp.status_code >= 500:
                if attempt == self.max_attempts:
                    raise UpstreamServerError(f"{resp.status_code} after retries: {(resp.text or '')[:300]}")
                self._sleep_backoff(attempt)
                continue

            # 其它 4xx 统一转为 UpstreamClientError
            if 400 <= resp.status_code < 500:
                snippet = (resp.text or "")[:300]
                raise UpstreamClientError(f"{resp.status_code} client error: {snippet}")

            return resp    # 成功

        # 理论上不会走到这里
        raise UpstreamClientError("unreachable retry loop")


    # 指数退避：上限 30 秒，加上 0~25% 抖动。例：1s, 2s, 4s ...
    def _sleep_backoff(self, attempt: int) -> None:
        """指数退避等待，加入 0~25%% 抖动，平衡重试压力。"""
        base = min(2 ** (attempt - 1), 30)
        jitter = random.uniform(0, 0.25 * base)
        self._sleep(base + jitter)


def dumps_param(payload: Dict[str, Any]) -> str:
    """Weidian 一类接口把业务参数 JSON 序列化后放进 query 的 param 字段。"""
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
