"""
微店 getItemSkuInfo + getDetailDesc → ProductEnvelope。

规格组来自 attrList（组 key = attrTitle，值 key = attrId），
SKU 组合键 = attrIds 按接口原始顺序拼接；attrIds 里出现 attrList 没有的 id 时整条 SKU 跳过。
"""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from mallbridge.links.urls import WEIDIAN, build_item_link
from mallbridge.normalizers.common import PropertyMatrix, image_list, join_sku_key, text
from mallbridge.normalizers.models import ProductEnvelope, ProductRecord, PropertyGroup, SkuRecord
from mallbridge.normalizers.raw_models import WeidianDescription, WeidianDetails, parse_raw
from mallbridge.utils.clock import now_iso
from mallbridge.utils.currency import WEIDIAN_RATE, cny_to_usd, minor_to_major, to_float, to_int

logger = logging.getLogger(__name__)

FLAT_FREIGHT_CNY = 10.0
FLAT_FREIGHT_USD = 1.49

# 尺码类规格不展示 SKU 图（图基本都是同一张尺码表）
SIZE_GROUP_NAMES = ("尺码", "size", "taille", "tamaño")

DESC_IMAGE_STYLE = "display: block;width: 100.0%;height: auto;"


def normalize_weidian(details: Any, description: Any = None) -> ProductEnvelope:
    item = parse_raw(WeidianDetails, details)
    if item is None or not text(item.itemId):
        logger.error("Invalid or incomplete Weidian product details received")
        return ProductEnvelope.failure("Error: Invalid or incomplete Weidian product details data.")

    item_id = text(item.itemId)
    attr_groups = item.attrList or []

    matrix = PropertyMatrix()
    seen_titles = set()
    for index, group in enumerate(attr_groups):
        title = text(group.attrTitle)
        # 每个 attrList 分组各占一个规格组；标题为空或重复时用位置区分
        group_key = title if title and title not in seen_titles else f"{title}#{index}"
        seen_titles.add(title)
        for value in group.attrValues or []:
            if value.attrId is None:
                continue
            matrix.add(group_key, title, text(value.attrId), text(value.attrValue), value.img or "")

    sku_list: Dict[str, SkuRecord] = {}
    for sku in item.skuInfos or []:
        if sku.skuInfo is None or not sku.attrIds:
            logger.warning("Weidian %s: skip invalid sku entry %r", item_id, sku.model_dump(exclude_none=True))
            continue

        tokens = [text(a) for a in sku.attrIds]
        name = matrix.describe(tokens)
        if name is None:
            logger.warning("Weidian %s: skip sku %s, attrIds %s not in attrList", item_id, sku.skuInfo.id, tokens)
            continue

        key = join_sku_key(tokens)
        price = minor_to_major(sku.skuInfo.discountPrice)
        orginal = to_float(sku.skuInfo.originalPrice)
        sku_list[key] = SkuRecord(
            price=price,
            total_price=0,
            orginal_price=minor_to_major(orginal) if orginal else price,
            properties=key,
            properties_name=name,
            quantity=to_int(sku.skuInfo.stock),
            sku_id=text(sku.skuInfo.id),
        )

    groups = matrix.groups()
    clear_size_images(groups)

    # 主图 + 各规格值图片（去重，保持顺序）
    images = [item.itemMainPic] + [v.img for g in attr_groups for v in (g.attrValues or [])]
    pics = image_list(images)
    price = minor_to_major(item.itemDiscountLowPrice)

    record = ProductRecord(
        product_item_id=item_id,
        product_platform=WEIDIAN,
        product_link=build_item_link(WEIDIAN, item_id),
        product_image_url=pics[0].url if pics else "",
        product_image_list=pics,
        product_name=text(item.itemTitle),
        product_details=description_html(description),
        product_price=price,
        current_price_usd=cny_to_usd(price, WEIDIAN_RATE),
        product_freight_amount_cny=FLAT_FREIGHT_CNY,
        product_freight_amount_usd=FLAT_FREIGHT_USD,
        prop_list=groups,
        sku_list=sku_list,
        props_list_origin=matrix.origin(),
        min_num=1,
        num=to_int(item.itemStock),
        sales=0,
        store_id=item_id,
        seller_name="",
        api_time=now_iso(),
    )
    return ProductEnvelope.success(record)


def clear_size_images(groups: List[PropertyGroup]) -> None:
    for group in groups:
        if group.prop_name.strip().lower() in SIZE_GROUP_NAMES:
            for value in group.prop_list:
                value.p_sku_img = ""


def description_html(description: Any) -> str:
    """只取描述里的图片（type == 2），套固定的详情页外壳。"""
    desc: Optional[WeidianDescription] = parse_raw(WeidianDescription, description) if description else None
    if desc is None or desc.item_detail is None:
        return ""

    urls = [
        text(c.url)
        for c in desc.item_detail.desc_content or []
        if to_int(c.type, default=-1) == 2 and text(c.url)
    ]
    if not urls:
        return ""

    images = "\r\n        ".join(f'<img src="{u}" style="{DESC_IMAGE_STYLE}"/>' for u in urls)
    return (
        '<div id="offer-template-0"></div><div style="width: 790.0px;">\r\n        '
        f"{images}\r\n    </div><p>&nbsp;&nbsp;</p>"
    )
