"""
1688（跨境分销接口）原始返回 → ProductEnvelope。

1688 返回里已经带了 *Trans 译文字段，这里直接优先使用，不再走翻译。
所有图片（主图 / SKU 图 / 描述 <img>）都改写为走图片代理。
"""
from __future__ import annotations
import logging
from typing import Any, Dict

from mallbridge.links.urls import ALIBABA_1688, build_item_link
from mallbridge.normalizers.common import (
    PropertyMatrix, image_list, join_sku_key, proxy_description_images, proxy_image, text,
)
from mallbridge.normalizers.models import ProductEnvelope, ProductRecord, SkuRecord
from mallbridge.normalizers.raw_models import Alibaba1688Response, parse_raw
from mallbridge.utils.clock import now_iso
from mallbridge.utils.currency import ALIBABA_1688_RATE, cny_to_usd, round_money, to_float, to_int

logger = logging.getLogger(__name__)

# 1688 国内段运费按固定估算
FLAT_FREIGHT_CNY = 6.0
FLAT_FREIGHT_USD = 0.9


def normalize_1688(raw: Any) -> ProductEnvelope:
    resp = parse_raw(Alibaba1688Response, raw)
    product = resp.product if resp is not None else None
    if product is None or not text(product.offerId):
        return ProductEnvelope.failure("Error: Invalid or unsuccessful 1688 API response.")

    offer_id = text(product.offerId)
    skus = product.productSkuInfos or []

    matrix = PropertyMatrix()
    sku_list: Dict[str, SkuRecord] = {}

    for sku in skus:
        attrs = sku.skuAttributes or []
        if not attrs:
            logger.warning("1688 %s: skip sku %s without skuAttributes", offer_id, sku.skuId)
            continue

        tokens = []
        for attr in attrs:
            if attr.attributeId is None:
                continue
            group_key = text(attr.attributeId)
            value_key = f"{group_key}:{text(attr.value)}"
            matrix.add(
                group_key,
                text(attr.attributeNameTrans) or text(attr.attributeName),
                value_key,
                text(attr.valueTrans) or text(attr.value),
                proxy_image(attr.skuImageUrl),
            )
            tokens.append(value_key)

        if not tokens:
            logger.warning("1688 %s: skip sku %s, attributes carry no ids", offer_id, sku.skuId)
            continue

        key = join_sku_key(tokens)
        price = _sku_price(sku)
        sku_list[key] = SkuRecord(
            price=price,
            total_price=0,
            orginal_price=price,
            properties=key,
            properties_name=matrix.describe(tokens) or "",
            quantity=to_int(sku.amountOnSale),
            sku_id=f"{text(sku.skuId)}-{text(sku.specId)}",
        )

    # props_list_origin：SKU 规格在前，商品属性（材质、产地...）补在后面，不覆盖规格
    origin = matrix.origin()
    for attr in product.productAttribute or []:
        if attr.attributeId is None:
            continue
        name = text(attr.attributeNameTrans) or text(attr.attributeName)
        value = text(attr.valueTrans) or text(attr.value)
        origin.setdefault(f"{text(attr.attributeId)}:{text(attr.value)}", f"{name}:{value}")

    pics = [proxy_image(u) for u in (product.productImage.images if product.productImage else None) or []]
    price = _sku_price(skus[0]) if skus else 0.0

    shipping = product.productShippingInfo
    details = (shipping.skuShippingDetails if shipping else None) or []
    first_ship = details[0] if details else None

    record = ProductRecord(
        product_item_id=offer_id,
        product_platform=ALIBABA_1688,
        product_link=text(product.promotionUrl) or build_item_link(ALIBABA_1688, offer_id),
        product_image_url=pics[0] if pics else "",
        product_image_list=image_list(pics),
        product_name=text(product.subjectTrans) or text(product.subject),
        product_details=proxy_description_images(product.description),
        product_price=price,
        current_price_usd=cny_to_usd(price, ALIBABA_1688_RATE),
        product_freight_amount_cny=FLAT_FREIGHT_CNY,
        product_freight_amount_usd=FLAT_FREIGHT_USD,
        prop_list=matrix.groups(),
        sku_list=sku_list,
        props_list_origin=origin,
        min_num=to_int(product.minOrderQuantity, default=1) or 1,
        num=to_int(product.productSaleInfo.amountOnSale) if product.productSaleInfo else 0,
        sales=to_int(product.soldOut),
        store_id=text(product.sellerOpenId),
        seller_name="",
        item_weight=text(first_ship.weight) if first_ship else "",
        item_size=(
            f"{text(first_ship.length)}x{text(first_ship.width)}x{text(first_ship.height)}"
            if first_ship else ""
        ),
        api_time=now_iso(),
    )
    return ProductEnvelope.success(record)


def _sku_price(sku) -> float:
    # 1688 的价格是元（字符串），不是分
    value = to_float(sku.price)
    if value is None:
        value = to_float(sku.consignPrice)
    return round_money(value) if value is not None else 0.0
