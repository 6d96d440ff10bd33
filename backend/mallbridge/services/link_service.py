"""
链接解析服务：用户粘贴的链接 / 分享文案 → 平台 + 商品 id + 前端详情页跳转链接。
直链分类不发请求，不走缓存；需要请求短链的结果按原始输入缓存（LINK_CACHE_TTL_SEC）。
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import requests

from mallbridge.cache import Cache, get_cache
from mallbridge.core.config import settings
from mallbridge.links import ResolvedLink, convert_link, resolve

logger = logging.getLogger(__name__)


class LinkService:

    def __init__(
        self,
        cache: Optional[Cache] = None,
        session: Optional[requests.Session] = None,
        frontend_url: Optional[str] = None,
    ) -> None:
        self.cache = cache if cache is not None else get_cache()
        self.session = session
        self.frontend_url = (frontend_url or settings.FRONTEND_URL).rstrip("/")

    def get_link_details(self, link: Optional[str]) -> Dict[str, Any]:
        if not link or not link.strip():
            return {"error": "link query is required"}

        resolved = convert_link(link) or self._resolve_cached(link.strip())
        if resolved is None:
            return {"error": "Unable to process the provided product link."}

        return {"data": resolved.to_dict(), "link": self.detail_link(resolved)}

    def detail_link(self, resolved: ResolvedLink) -> str:
        query = urlencode({"platform": resolved.platform, "id": resolved.id})
        return f"{self.frontend_url}/product-detail?{query}"

    def _resolve_cached(self, text: str) -> Optional[ResolvedLink]:
        key = f"link:{text}"
        cached = self.cache.get(key)
        if isinstance(cached, dict) and cached.get("platform") and cached.get("id"):
            return ResolvedLink.of(cached["platform"], cached["id"])

        resolved = resolve(text, session=self.session)
        if resolved is not None:
            self.cache.set(key, resolved.to_dict(), settings.LINK_CACHE_TTL_SEC)
        else:
            logger.info("Unable to resolve link input: %s", text[:200])
        return resolved
