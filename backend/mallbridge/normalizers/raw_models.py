"""
各平台原始返回的入口校验模型（只校验形状，不做业务转换）。

原则：
  - 宽松：extra="allow"，子字段基本都可选，平台多给的字段原样保留
  - 根字段缺失（Taobao item_id / 1688 result.result / Weidian itemId / OneBound pic_url）
    由各 normalizer 判定为失败信封
  - 单个 SKU 缺子字段不算校验错误，由 normalizer 跳过并打 warning
数值字段平台有时给数字、有时给字符串，统一用 Scalar 接住，换算交给 utils.currency。
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Type, TypeVar, Union
import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

Scalar = Optional[Union[int, float, str]]


class _Raw(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


# ================= Taobao =================

class TaobaoSkuProperty(_Raw):
    prop_id: Scalar = None
    prop_name: Scalar = None
    value_id: Scalar = None
    value_name: Scalar = None


class TaobaoSku(_Raw):
    sku_id: Scalar = None
    price: Scalar = None
    promotion_price: Scalar = None
    quantity: Scalar = None
    pic_url: Optional[str] = None
    postFee: Scalar = None
    properties: Optional[List[TaobaoSkuProperty]] = None


class TaobaoItem(_Raw):
    item_id: Scalar = None
    title: Optional[str] = None
    description: Optional[str] = None
    pic_urls: Optional[List[str]] = None
    sku_list: Optional[List[TaobaoSku]] = None
    price: Scalar = None
    promotion_price: Scalar = None
    begin_amount: Scalar = None
    quantity: Scalar = None
    shop_id: Scalar = None
    shop_name: Optional[str] = None
    trace_id: Optional[str] = Field(None, alias="_trace_id_")


# ================= 1688 =================

class Alibaba1688SkuAttribute(_Raw):
    attributeId: Scalar = None
    attributeName: Scalar = None
    attributeNameTrans: Scalar = None
    value: Scalar = None
    valueTrans: Scalar = None
    skuImageUrl: Optional[str] = None


class Alibaba1688SkuInfo(_Raw):
    skuId: Scalar = None
    specId: Scalar = None
    price: Scalar = None
    consignPrice: Scalar = None
    amountOnSale: Scalar = None
    skuAttributes: Optional[List[Alibaba1688SkuAttribute]] = None


class Alibaba1688Attribute(_Raw):
    attributeId: Scalar = None
    attributeName: Scalar = None
    attributeNameTrans: Scalar = None
    value: Scalar = None
    valueTrans: Scalar = None


class Alibaba1688ShippingDetail(_Raw):
    weight: Scalar = None
    length: Scalar = None
    width: Scalar = None
    height: Scalar = None


class Alibaba1688ShippingInfo(_Raw):
    skuShippingDetails: Optional[List[Alibaba1688ShippingDetail]] = None


class Alibaba1688Images(_Raw):
    images: Optional[List[str]] = None


class Alibaba1688SaleInfo(_Raw):
    amountOnSale: Scalar = None


class Alibaba1688Product(_Raw):
    offerId: Scalar = None
    subject: Optional[str] = None
    subjectTrans: Optional[str] = None
    promotionUrl: Optional[str] = None
    description: Optional[str] = None
    productImage: Optional[Alibaba1688Images] = None
    productSkuInfos: Optional[List[Alibaba1688SkuInfo]] = None
    productAttribute: Optional[List[Alibaba1688Attribute]] = None
    productShippingInfo: Optional[Alibaba1688ShippingInfo] = None
    productSaleInfo: Optional[Alibaba1688SaleInfo] = None
    minOrderQuantity: Scalar = None
    soldOut: Scalar = None
    sellerOpenId: Optional[str] = None


class Alibaba1688Result(_Raw):
    result: Optional[Alibaba1688Product] = None


class Alibaba1688Response(_Raw):
    result: Optional[Alibaba1688Result] = None

    @property
    def product(self) -> Optional[Alibaba1688Product]:
        return self.result.result if self.result else None


# ================= Weidian =================

class WeidianAttrValue(_Raw):
    attrId: Scalar = None
    attrValue: Scalar = None
    img: Optional[str] = None


class WeidianAttrGroup(_Raw):
    attrTitle: Scalar = None
    attrValues: Optional[List[WeidianAttrValue]] = None


class WeidianSkuInfo(_Raw):
    id: Scalar = None
    discountPrice: Scalar = None
    originalPrice: Scalar = None
    stock: Scalar = None
    title: Optional[str] = None
    img: Optional[str] = None


class WeidianSku(_Raw):
    attrIds: Optional[List[Union[int, str]]] = None
    skuInfo: Optional[WeidianSkuInfo] = None


class WeidianDetails(_Raw):
    itemId: Scalar = None
    itemTitle: Optional[str] = None
    itemMainPic: Optional[str] = None
    itemStock: Scalar = None
    itemDiscountLowPrice: Scalar = None
    attrList: Optional[List[WeidianAttrGroup]] = None
    skuInfos: Optional[List[WeidianSku]] = None


class WeidianDescContent(_Raw):
    type: Scalar = None       # 2 = 图片，1 = 文本，10000 = 折叠文本
    url: Optional[str] = None
    text: Optional[str] = None


class WeidianItemDetail(_Raw):
    desc_content: Optional[List[WeidianDescContent]] = None


class WeidianDescription(_Raw):
    item_detail: Optional[WeidianItemDetail] = None


# ================= OneBound =================

class OneBoundImage(_Raw):
    url: Optional[str] = None


class OneBoundSku(_Raw):
    properties: Scalar = None
    properties_name: Scalar = None
    price: Scalar = None
    orginal_price: Scalar = None
    total_price: Scalar = None
    quantity: Scalar = None
    sku_id: Scalar = None


class OneBoundSkus(_Raw):
    sku: Optional[List[OneBoundSku]] = None

    @field_validator("sku", mode="before")
    @classmethod
    def _list_or_none(cls, v: Any) -> Any:
        return v if isinstance(v, list) else None


class OneBoundSeller(_Raw):
    nick: Optional[str] = None


class OneBoundItem(_Raw):
    num_iid: Scalar = None
    title: Optional[str] = None
    pic_url: Optional[str] = None
    item_imgs: Optional[List[OneBoundImage]] = None
    props_list: Optional[Dict[str, Any]] = None
    props_img: Optional[Dict[str, Any]] = None
    skus: Optional[OneBoundSkus] = None
    price: Scalar = None
    post_fee: Scalar = None
    detail_url: Optional[str] = None
    desc: Optional[str] = None
    num: Scalar = None
    sales: Scalar = None
    total_sold: Scalar = None
    seller_id: Scalar = None
    nick: Optional[str] = None
    seller_info: Optional[OneBoundSeller] = None
    item_weight: Scalar = None

    @field_validator("props_list", "props_img", "skus", "seller_info", mode="before")
    @classmethod
    def _php_empty_object(cls, v: Any) -> Any:
        # PHP 把空对象序列化成 []
        if isinstance(v, (dict, BaseModel)):
            return v
        return None


# ============= tool function ===============

M = TypeVar("M", bound=BaseModel)


def parse_raw(model: Type[M], raw: Any) -> Optional[M]:
    """原始 dict → 校验模型；形状不对返回 None（调用方转成失败信封）。"""
    if isinstance(raw, model):
        return raw
    if not isinstance(raw, dict):
        return None
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        logger.warning("%s validation failed: %s", model.__name__, e.errors()[:3])
        return None
