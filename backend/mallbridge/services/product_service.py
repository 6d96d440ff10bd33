"""
商品详情编排：(platform, id, lang) → ProductEnvelope

  1) 校验入参（缺参 code=-1，不认识的平台 code=-2）
  2) 读缓存 {SOURCE_LANG}:product:{platform}:{id}，命中直接用（cache="yes"），不再请求平台
  3) 未命中：平台 fetch（异常原样上抛）→ normalize → 成功的源语言记录写缓存
  4) taobao / tmall / micro 且 lang != SOURCE_LANG 时，返回翻译后的副本
缓存里永远只有源语言版本；失败信封不缓存。
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from mallbridge.cache import Cache, get_cache, product_cache_key
from mallbridge.core.config import settings
from mallbridge.integrations.errors import FetcherNotConfiguredError
from mallbridge.integrations.onebound import OneBoundAPI
from mallbridge.integrations.weidian import WeidianAPI
from mallbridge.links.urls import ALIBABA_1688, TAOBAO, TMALL, WEIDIAN, as_platform
from mallbridge.normalizers import (
    ProductEnvelope, normalize_1688, normalize_onebound, normalize_taobao, normalize_weidian,
)
from mallbridge.translation import Translator, translate_product
from mallbridge.translation.product_translation import SupportsTranslate

logger = logging.getLogger(__name__)

# 这些平台的原始数据是中文，需要翻译；1688 接口自带译文
TRANSLATED_PLATFORMS = (TAOBAO, TMALL, WEIDIAN)


@dataclass(frozen=True)
class ProductAdapter:
    """一个平台的 拉取 + 归一化。fetch 抛出的上游异常不在这里处理。"""
    fetch: Callable[[str], Any]
    normalize: Callable[[Any], ProductEnvelope]


def weidian_adapter(api: Optional[WeidianAPI] = None) -> ProductAdapter:
    api = api or WeidianAPI()
    return ProductAdapter(
        fetch=api.fetch,
        normalize=lambda raw: normalize_weidian(raw.get("details"), raw.get("description")),
    )


def onebound_adapter(platform: str, api: OneBoundAPI) -> ProductAdapter:
    return ProductAdapter(
        fetch=partial(api.fetch, platform),
        normalize=partial(normalize_onebound, platform=platform),
    )


def taobao_adapter(fetch: Callable[[str], Any], platform: str = TAOBAO) -> ProductAdapter:
    """官方淘宝接口需要签名，由调用方注入 fetch(id) -> 原始 item 字典。"""
    return ProductAdapter(fetch=fetch, normalize=partial(normalize_taobao, platform=platform))


def alibaba_1688_adapter(fetch: Callable[[str], Any]) -> ProductAdapter:
    """官方 1688 接口同样由调用方注入 fetch(id) -> 完整响应（含 result.result）。"""
    return ProductAdapter(fetch=fetch, normalize=normalize_1688)


def default_adapters(
    weidian: Optional[WeidianAPI] = None,
    onebound: Optional[OneBoundAPI] = None,
) -> Dict[str, ProductAdapter]:
    """micro 走微店公开接口；taobao / tmall / 1688 在配置了 OneBound 凭证时走 OneBound。"""
    adapters: Dict[str, ProductAdapter] = {WEIDIAN: weidian_adapter(weidian)}

    if onebound is None and settings.onebound_enabled:
        onebound = OneBoundAPI()
    if onebound is not None:
        for platform in (TAOBAO, TMALL, ALIBABA_1688):
            adapters[platform] = onebound_adapter(platform, onebound)
    else:
        logger.info("OneBound credentials not configured; taobao/tmall/1688 need injected fetchers")
    return adapters


class ProductService:

    def __init__(
        self,
        cache: Optional[Cache] = None,
        translator: Optional[SupportsTranslate] = None,
        adapters: Optional[Dict[str, ProductAdapter]] = None,
    ) -> None:
        self.cache = cache if cache is not None else get_cache()
        self.translator = translator if translator is not None else Translator()
        self.adapters = adapters if adapters is not None else default_adapters()


    def get_product_details(
        self,
        platform: Optional[str],
        item_id: Optional[str],
        lang: Optional[str] = None,
    ) -> ProductEnvelope:
        item_id = (item_id or "").strip()
        if not platform or not item_id:
            return ProductEnvelope.failure('Error: The "platform" and "id" parameters are required.', code=-1)

        canonical = as_platform(platform)
        if canonical is None:
            return ProductEnvelope.failure(f"Error: Unsupported platform {platform!r}.", code=-2)

        lang = (lang or settings.DEFAULT_LANG).strip().lower()
        key = product_cache_key(settings.SOURCE_LANG, canonical, item_id)

        envelope = self._from_cache(key)
        if envelope is not None:
            logger.info("[Cache] HIT for %s", key)
        else:
            logger.info("[Cache] MISS for %s, fetching from platform", key)
            envelope = self._fetch_and_normalize(canonical, item_id)
            if not envelope.ok:
                logger.warning("Normalization failed for %s:%s: %s", canonical, item_id, envelope.msg)
                return envelope
            self._to_cache(key, envelope)

        if canonical in TRANSLATED_PLATFORMS and lang != settings.SOURCE_LANG:
            return translate_product(envelope, lang, self.translator)
        return envelope


    # ---------- Internals ----------
    def _fetch_and_normalize(self, platform: str, item_id: str) -> ProductEnvelope:
        adapter = self.adapters.get(platform)
        if adapter is None:
            raise FetcherNotConfiguredError(f"No fetcher configured for platform {platform!r}")
        raw = adapter.fetch(item_id)
        envelope = adapter.normalize(raw)
        if envelope.ok:
            envelope.data.cache = "no"
        return envelope

    def _from_cache(self, key: str) -> Optional[ProductEnvelope]:
        cached = self.cache.get(key)
        if not cached:
            return None
        try:
            envelope = ProductEnvelope.model_validate(cached)
        except ValidationError as e:
            logger.warning("Dropping malformed cache entry %s: %s", key, e.errors()[:3])
            self.cache.delete(key)
            return None
        if not envelope.ok:
            return None
        envelope.data.cache = "yes"
        return envelope

    def _to_cache(self, key: str, envelope: ProductEnvelope) -> None:
        try:
            self.cache.set(key, envelope.to_dict(), settings.PRODUCT_CACHE_TTL_SEC)
        except Exception as e:
            # 缓存失败不影响返回
            logger.error("Failed to cache %s: %s", key, e)
