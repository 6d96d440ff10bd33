"""
短链解析（best-effort）：e.tb.cn / qr.1688.com → 平台标准商品链接 | None

不跟随重定向（allow_redirects=False）：
   - 301/302：直接读 Location
   - 200：页面里藏着 JS 变量 var url = '...' 或 var wirelessUrl = "..."
再从目标链接里正则取 offerId= / id=。任何一步失败（网络、超时、没匹配）都返回 None。
"""
from __future__ import annotations
import logging, re
from typing import Optional

import requests

from mallbridge.core.config import settings
from mallbridge.links.urls import ALIBABA_1688, TAOBAO, build_item_link

logger = logging.getLogger(__name__)

_JS_URL_PATTERNS = (
    re.compile(r"var url = '([^']+)';"),
    re.compile(r'var wirelessUrl\s*=\s*"([^"]+)";'),
)
_ITEM_ID_RE = re.compile(r"(?:offerId|id)=(\d+)")


def resolve_short_link(
    url: str,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> Optional[str]:
    """短链 → 标准商品链接；超时按解析失败处理。"""
    try:
        target = _fetch_target(url, session, timeout or settings.LINK_RESOLVE_TIMEOUT)
    except Exception as e:
        logger.warning("Short link resolution failed for %s: %s", url, e)
        return None

    if not target:
        logger.info("Short link %s did not expose a target url", url)
        return None

    m = _ITEM_ID_RE.search(target)
    if not m:
        logger.info("Short link %s resolved to %s without an item id", url, target[:200])
        return None

    item_id = m.group(1)
    if "tb.cn" in url:
        return build_item_link(TAOBAO, item_id)
    if "1688.com" in url:
        return build_item_link(ALIBABA_1688, item_id)
    return None


def _fetch_target(url: str, session: Optional[requests.Session], timeout: float) -> Optional[str]:
    http = session or requests
    resp = http.get(
        url,
        allow_redirects=False,
        headers={"User-Agent": settings.SHORT_LINK_USER_AGENT},
        timeout=timeout,
    )

    if resp.status_code in (301, 302):
        return resp.headers.get("Location") or resp.headers.get("location")

    if 200 <= resp.status_code < 300:
        html = resp.text or ""
        for pattern in _JS_URL_PATTERNS:
            m = pattern.search(html)
            if m:
                return m.group(1)
    return None
