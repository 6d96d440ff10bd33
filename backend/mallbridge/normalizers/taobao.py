"""
Taobao / Tmall 原始商品 → ProductEnvelope（纯函数，不翻译、不写缓存）。

  - 分组 key：prop_id，值 key：prop_id:value_id
  - 价格单位是分：sku price = promotion_price/100（没有促销价退回 price/100）
  - 运费取第一个 SKU 的 postFee/100
  - 美元价：商品价 / 6.65，运费 × 0.14（两个系数不同，保持原样）
"""
from __future__ import annotations
import logging
from typing import Any, Dict

from mallbridge.links.urls import TAOBAO, TMALL, build_item_link
from mallbridge.normalizers.common import PropertyMatrix, image_list, join_sku_key, text
from mallbridge.normalizers.models import ProductEnvelope, ProductRecord, SkuRecord
from mallbridge.normalizers.raw_models import TaobaoItem, parse_raw
from mallbridge.utils.clock import now_iso
from mallbridge.utils.currency import (
    TAOBAO_FREIGHT_RATE, TAOBAO_PRICE_RATE,
    cny_to_usd, minor_to_major, to_float, to_int,
)

logger = logging.getLogger(__name__)


def normalize_taobao(raw: Any, platform: str = TAOBAO) -> ProductEnvelope:
    item = parse_raw(TaobaoItem, raw)
    if item is None or not text(item.item_id):
        return ProductEnvelope.failure("Error: Invalid or unsuccessful Taobao API response.")

    item_id = text(item.item_id)
    platform = TMALL if platform == TMALL else TAOBAO
    sku_rows = item.sku_list or []

    matrix = PropertyMatrix()
    sku_list: Dict[str, SkuRecord] = {}

    for sku in sku_rows:
        props = sku.properties or []
        if not props:
            logger.warning("Taobao %s: skip sku %s without properties", item_id, sku.sku_id)
            continue

        tokens = []
        for prop in props:
            if prop.prop_id is None or prop.value_id is None:
                continue
            group_key = text(prop.prop_id)
            value_key = f"{group_key}:{text(prop.value_id)}"
            matrix.add(group_key, text(prop.prop_name), value_key, text(prop.value_name), sku.pic_url or "")
            tokens.append(value_key)

        if not tokens:
            logger.warning("Taobao %s: skip sku %s, properties carry no ids", item_id, sku.sku_id)
            continue

        key = join_sku_key(tokens)
        orginal = minor_to_major(sku.price)
        promo = to_float(sku.promotion_price)
        sku_list[key] = SkuRecord(
            price=minor_to_major(promo) if promo is not None else orginal,
            total_price=0,
            orginal_price=orginal,
            properties=key,
            properties_name=matrix.describe(tokens) or "",
            quantity=to_int(sku.quantity),
            sku_id=text(sku.sku_id),
        )

    groups = matrix.groups()
    pic_urls = item.pic_urls or []

    # 主图兜底：没有 pic_urls 时用第一个规格值的图
    main_image = text(pic_urls[0]) if pic_urls else ""
    if not main_image and groups and groups[0].prop_list:
        main_image = groups[0].prop_list[0].p_sku_img

    freight_cny = minor_to_major(sku_rows[0].postFee) if sku_rows else 0.0
    price = minor_to_major(item.promotion_price if to_float(item.promotion_price) is not None else item.price)

    record = ProductRecord(
        product_item_id=item_id,
        product_platform=platform,
        product_link=build_item_link(platform, item_id),
        product_image_url=main_image,
        product_image_list=image_list(pic_urls),
        product_name=text(item.title) or "No Title",
        product_details=item.description or "",
        product_price=price,
        current_price_usd=cny_to_usd(price, TAOBAO_PRICE_RATE),
        product_freight_amount_cny=freight_cny,
        product_freight_amount_usd=cny_to_usd(freight_cny, TAOBAO_FREIGHT_RATE),
        prop_list=groups,
        sku_list=sku_list,
        props_list_origin=matrix.origin(),
        min_num=to_int(item.begin_amount, default=1) or 1,
        num=to_int(item.quantity),
        sales=0,
        store_id=text(item.shop_id),
        seller_name=text(item.shop_name),
        api_time=text(item.trace_id) or now_iso(),
    )
    return ProductEnvelope.success(record)
