"""
链接分类（纯函数，不发网络请求）：任意 URL → ResolvedLink(platform, id) | None

规则按优先级依次匹配，越往后越宽松，所以平台自有域名必须先判：
   1) 平台直链：taobao / tmall / 1688 / weidian
   2) 代购站固定路径：hoobuy.com/product/{type}/{id}
   3) 代购站通用转发：?id=...&shop_type=...
   4) 包了一层编码 URL 的站点：解码后递归（带深度上限）
匹配不到或信息不全一律返回 None，不抛异常。
"""
from __future__ import annotations
import logging, re
from typing import Dict, List, Optional
from urllib.parse import parse_qsl, unquote, urlsplit

from mallbridge.core.config import settings
from mallbridge.links.urls import ALIBABA_1688, TAOBAO, TMALL, WEIDIAN, ResolvedLink

logger = logging.getLogger(__name__)


# hoobuy.com/product/{type}/{id} 的 type 编码；未知编码直接失败，不猜
HOOBUY_TYPES: Dict[str, str] = {
    "0": ALIBABA_1688,
    "1": TAOBAO,
    "2": WEIDIAN,
}

# 通用转发站（id + shop_type/source/platform 参数）
FORWARDING_HOSTS: List[str] = [
    "mulebuy.com",
    "joyabuy.com",
    "cnfans.com",
    "orientdig.com",
    "lovegobuy.com",
    "acbuy.com",
    "oopbuy.com",
]
FORWARDING_TYPE_PARAMS = ("shop_type", "shoptype", "type", "source", "platform")
FORWARDING_TYPES: Dict[str, str] = {
    "weidian": WEIDIAN,
    "taobao": TAOBAO,
    "tmall": TMALL,
    "1688": ALIBABA_1688,
    "ali_1688": ALIBABA_1688,
}

# 把目标链接编码在 query(url/q) 或 #fragment(url=) 里的站点
ENCODED_URL_HOSTS: List[str] = ["loongbuy.com", "kakobuy.com", "superbuy.com", "google.com"]
# 把目标链接放在 search_text 里的站点
SEARCH_TEXT_HOSTS: List[str] = ["niuniubox.com"]

_OFFER_PATH_RE = re.compile(r"/offer/(\d+)(?:\.html)?")
_FRAGMENT_URL_RE = re.compile(r"[?&]url=([^&]+)")


def convert_link(raw: Optional[str], depth: int = 0, max_depth: Optional[int] = None) -> Optional[ResolvedLink]:
    """
    分类一个 URL。depth 由递归调用传递，超过 max_depth（默认 LINK_MAX_DEPTH）直接返回 None，
    防止编码链接互相嵌套形成环。
    """
    limit = max_depth if max_depth is not None else settings.LINK_MAX_DEPTH
    if not isinstance(raw, str) or not raw.strip():
        return None

    text = raw.strip()
    try:
        parts = urlsplit(text)
    except ValueError:
        logger.debug("Invalid URL: %s", text)
        return None
    if parts.scheme.lower() not in ("http", "https") or not parts.hostname:
        logger.debug("Invalid URL: %s", text)
        return None

    host = parts.hostname.lower()
    path = parts.path or ""
    params = _query_params(parts.query)

    # 1) 平台直链
    if _host_has(host, "1688.com"):
        return _from_1688(host, path, params)
    if _host_has(host, "tmall.com"):
        item_id = _first(params, "id")
        return ResolvedLink.of(TMALL, item_id) if item_id else None
    if _host_has(host, "taobao.com"):
        item_id = _first(params, "id")
        return ResolvedLink.of(TAOBAO, item_id) if item_id else None
    if _host_has(host, "weidian.com"):
        item_id = _first(params, "itemID", "itemId", "itemid", "id")
        return ResolvedLink.of(WEIDIAN, item_id) if item_id else None

    # 2) hoobuy.com/product/{type}/{id}
    if _host_has(host, "hoobuy.com"):
        segments = [p for p in path.split("/") if p]
        type_code = segments[1] if len(segments) > 1 else ""
        item_id = segments[2] if len(segments) > 2 else ""
        platform = HOOBUY_TYPES.get(type_code)
        if not item_id or not platform:
            return None
        return ResolvedLink.of(platform, item_id)

    # 3) 通用转发站
    if any(_host_has(host, d) for d in FORWARDING_HOSTS):
        return _from_forwarder(params)

    # 4) 编码链接：解码后递归
    if any(_host_has(host, d) for d in ENCODED_URL_HOSTS):
        embedded = _embedded_url(parts.fragment, params)
        return _recurse(embedded, depth, limit)
    if any(_host_has(host, d) for d in SEARCH_TEXT_HOSTS):
        return _recurse(_first(params, "search_text"), depth, limit)

    return None


# ============= tool function ===============

def _host_has(host: str, domain: str) -> bool:
    return domain in host


def _query_params(query: str) -> Dict[str, List[str]]:
    """保持参数名原样（大小写敏感），同名参数按出现顺序保留。"""
    out: Dict[str, List[str]] = {}
    for key, value in parse_qsl(query, keep_blank_values=False):
        out.setdefault(key, []).append(value)
    return out


def _first(params: Dict[str, List[str]], *names: str) -> Optional[str]:
    for name in names:
        values = params.get(name)
        if values and values[0].strip():
            return values[0].strip()
    return None


def _first_ci(params: Dict[str, List[str]], *names: str) -> Optional[str]:
    """参数名大小写不敏感地取第一个非空值。"""
    lowered: Dict[str, List[str]] = {}
    for key, values in params.items():
        lowered.setdefault(key.lower(), []).extend(values)
    return _first(lowered, *names)


def _from_1688(host: str, path: str, params: Dict[str, List[str]]) -> Optional[ResolvedLink]:
    offer_id = _first(params, "offerId")
    if not offer_id:
        m = _OFFER_PATH_RE.search(path)
        offer_id = m.group(1) if m else None
    if not offer_id and "detail.1688.com" in host:
        last = path.rstrip("/").split("/")[-1].replace(".html", "")
        offer_id = last if last.isdigit() else None
    return ResolvedLink.of(ALIBABA_1688, offer_id) if offer_id else None


def _from_forwarder(params: Dict[str, List[str]]) -> Optional[ResolvedLink]:
    item_id = _first_ci(params, "id")
    shop_type = (_first_ci(params, *FORWARDING_TYPE_PARAMS) or "").lower()
    if not item_id or not shop_type:
        return None
    platform = FORWARDING_TYPES.get(shop_type)
    return ResolvedLink.of(platform, item_id) if platform else None


def _embedded_url(fragment: str, params: Dict[str, List[str]]) -> Optional[str]:
    if fragment:
        m = _FRAGMENT_URL_RE.search("&" + fragment)
        if m:
            return unquote(m.group(1))
    # parse_qsl 已经解过一次码；目标链接经常被二次编码，这里再解一次
    value = _first(params, "url", "q")
    return unquote(value) if value else None


def _recurse(embedded: Optional[str], depth: int, limit: int) -> Optional[ResolvedLink]:
    if not embedded:
        return None
    if depth + 1 > limit:
        logger.info("Link nesting deeper than %d, giving up: %s", limit, embedded[:200])
        return None
    return convert_link(embedded, depth=depth + 1, max_depth=limit)
