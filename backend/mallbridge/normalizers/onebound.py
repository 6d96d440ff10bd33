"""
OneBound 通用接口（item_get / item_get_pro）→ ProductEnvelope。
OneBound 已经把淘宝 / 1688 / 微店的数据整理成统一格式，这里主要是补协议、拆 props_list。
"""
from __future__ import annotations
import logging
from typing import Any, Dict

from mallbridge.links.urls import as_platform, build_item_link
from mallbridge.normalizers.common import (
    PropertyMatrix, image_list, join_sku_key, split_sku_key, text, with_scheme,
)
from mallbridge.normalizers.models import ProductEnvelope, ProductRecord, SkuRecord
from mallbridge.normalizers.raw_models import OneBoundItem, parse_raw
from mallbridge.utils.clock import now_iso
from mallbridge.utils.currency import (
    ONEBOUND_PRICE_RATE, convert_cny_to_usd, cny_to_usd, round_money, to_float, to_int,
)

logger = logging.getLogger(__name__)


def normalize_onebound(raw: Any, platform: str) -> ProductEnvelope:
    item = parse_raw(OneBoundItem, raw)
    if item is None or not text(item.pic_url) or not text(item.num_iid):
        return ProductEnvelope.failure("Error: Invalid product data received from OneBound API.")

    canonical = as_platform(platform)
    if canonical is None:
        return ProductEnvelope.failure(f"Error: Unsupported platform {platform!r}.", code=-2)

    item_id = text(item.num_iid)

    # props_list: {"pid:vid": "name:value"}
    matrix = PropertyMatrix()
    props_img = {k: with_scheme(v) for k, v in (item.props_img or {}).items() if text(v)}
    for key, label in (item.props_list or {}).items():
        if not isinstance(label, str) or ":" not in key:
            continue
        group_key = key.split(":", 1)[0]
        raw_name, _, display = label.partition(":")
        matrix.add(group_key, raw_name[:1].upper() + raw_name[1:], key, display, props_img.get(key, ""))

    sku_list: Dict[str, SkuRecord] = {}
    for sku in (item.skus.sku if item.skus else None) or []:
        tokens = split_sku_key(text(sku.properties))
        if not tokens:
            logger.warning("OneBound %s: skip sku %s without properties", item_id, sku.sku_id)
            continue
        if any(t not in matrix for t in tokens):
            logger.warning("OneBound %s: skip sku %s, properties %s not in props_list", item_id, sku.sku_id, tokens)
            continue

        key = join_sku_key(tokens)
        price = round_money(to_float(sku.price) or 0.0)
        orginal = to_float(sku.orginal_price)
        sku_list[key] = SkuRecord(
            price=price,
            total_price=round_money(to_float(sku.total_price) or 0.0),
            orginal_price=round_money(orginal) if orginal is not None else price,
            properties=key,
            properties_name=matrix.describe(tokens) or "",
            quantity=to_int(sku.quantity),
            sku_id=text(sku.sku_id),
        )

    price = round_money(to_float(item.price) or 0.0)
    freight_cny = round_money(to_float(item.post_fee) or 0.0)
    seller = text(item.seller_info.nick) if item.seller_info and item.seller_info.nick else text(item.nick)

    record = ProductRecord(
        product_item_id=item_id,
        product_platform=canonical,
        product_link=text(item.detail_url) or build_item_link(canonical, item_id),
        product_image_url=with_scheme(item.pic_url),
        product_image_list=image_list(with_scheme(i.url) for i in item.item_imgs or []),
        product_name=text(item.title) or "No Title",
        product_details=item.desc or "",
        product_price=price,
        current_price_usd=cny_to_usd(price, ONEBOUND_PRICE_RATE),
        product_freight_amount_cny=freight_cny,
        product_freight_amount_usd=convert_cny_to_usd(freight_cny),
        prop_list=matrix.groups(),
        sku_list=sku_list,
        props_list_origin=matrix.origin(),
        props_img=props_img,
        min_num=1,
        num=to_int(item.num),
        sales=to_int(item.sales if to_float(item.sales) is not None else item.total_sold),
        store_id=text(item.seller_id),
        seller_name=seller,
        item_weight=text(item.item_weight),
        api_time=now_iso(),
    )
    return ProductEnvelope.success(record)
