"""
商品翻译视图：缓存里的源语言记录 → 目标语言副本。

步骤：
  1) 深拷贝（绝不改入参，入参通常就是缓存里拿出来的那份）
  2) 按稳定 key 收集待译文本（商品名 / 组名 / 值名 / 兜底的 properties_name），
     相同文本只译一次，线程池并发，完成顺序无关
  3) 按 key 回填，再从翻译后的规格组重建 props_list_origin 和每个 SKU 的 properties_name
"""
from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional, Protocol

from mallbridge.core.config import settings
from mallbridge.links.urls import WEIDIAN
from mallbridge.normalizers.common import SKU_KEY_SEP, origin_from_groups, split_sku_key
from mallbridge.normalizers.models import ProductEnvelope
from mallbridge.normalizers.weidian import clear_size_images

logger = logging.getLogger(__name__)


class SupportsTranslate(Protocol):
    def translate(self, text: str, target_lang: str, source_lang: str = "auto") -> str: ...


def translate_product(
    envelope: ProductEnvelope,
    lang: str,
    translator: SupportsTranslate,
    max_workers: Optional[int] = None,
) -> ProductEnvelope:
    clone = envelope.model_copy(deep=True)
    if not clone.ok or not lang or lang == settings.SOURCE_LANG:
        return clone

    data = clone.data
    origin_from_source = origin_from_groups(data.prop_list)

    # ---------- 1) 收集 ----------
    jobs: Dict[str, str] = {"product_name": data.product_name}
    for group in data.prop_list:
        jobs[f"prop_name:{group.prop_type}"] = group.prop_name
        for value in group.prop_list:
            jobs[f"p_name:{value.p_value}"] = value.p_name
    for key, sku in data.sku_list.items():
        # 能从规格组重建的 SKU 不单独翻译 properties_name
        if not _rebuildable(sku.properties, origin_from_source):
            jobs[f"sku_name:{key}"] = sku.properties_name

    # ---------- 2) 并发翻译（同文只译一次） ----------
    texts = sorted({t for t in jobs.values() if t and t.strip()})
    translated = _translate_all(texts, lang, translator, max_workers or settings.TRANSLATE_MAX_WORKERS)

    def tr(key: str, fallback: str) -> str:
        source = jobs.get(key, fallback)
        return translated.get(source, source) if source else fallback

    # ---------- 3) 回填 + 重建派生字段 ----------
    data.product_name = tr("product_name", data.product_name)
    for group in data.prop_list:
        group.prop_name = tr(f"prop_name:{group.prop_type}", group.prop_name)
        for value in group.prop_list:
            value.p_name = tr(f"p_name:{value.p_value}", value.p_name)
    if data.product_platform == WEIDIAN:
        clear_size_images(data.prop_list)

    origin = origin_from_groups(data.prop_list)
    for key, label in data.props_list_origin.items():
        origin.setdefault(key, label)          # 规格组以外的条目（如 1688 商品属性）原样保留
    data.props_list_origin = origin

    for key, sku in data.sku_list.items():
        tokens = split_sku_key(sku.properties)
        if tokens and all(t in origin_from_source for t in tokens):
            sku.properties_name = SKU_KEY_SEP.join(origin[t] for t in tokens)
        else:
            sku.properties_name = tr(f"sku_name:{key}", sku.properties_name)

    return clone


def _rebuildable(properties: str, origin: Dict[str, str]) -> bool:
    tokens = split_sku_key(properties)
    return bool(tokens) and all(t in origin for t in tokens)


def _translate_all(texts, lang: str, translator: SupportsTranslate, max_workers: int) -> Dict[str, str]:
    if not texts:
        return {}

    out: Dict[str, str] = {}
    with ThreadPoolExecutor(max_workers=min(max_workers, len(texts))) as pool:
        futures = {text: pool.submit(translator.translate, text, lang) for text in texts}
        for text, fut in futures.items():
            try:
                out[text] = fut.result() or text
            except Exception as e:
                logger.warning("Translation of %r failed, keeping source text: %s", text[:50], e)
                out[text] = text
    return out
