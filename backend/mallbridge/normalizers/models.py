# 统一商品结构（所有平台 normalizer 的输出）
# 字段名与下游前端约定一致，orginal_price 的拼写保持原样

from __future__ import annotations
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class ProductImage(BaseModel):
    url: str


class PropertyValue(BaseModel):
    p_value: str                 # 组内唯一：groupId:valueId 或平台原生 id，也是 SKU 组合键里的 token
    p_name: str = ""
    p_sku_img: str = ""


class PropertyGroup(BaseModel):
    prop_type: str               # 平台侧稳定的分组 id
    prop_name: str = ""
    prop_list: List[PropertyValue] = Field(default_factory=list)


class SkuRecord(BaseModel):
    price: float = 0.0
    total_price: float = 0.0
    orginal_price: float = 0.0
    properties: str              # ";" 拼接的 p_value，顺序 = 原始属性顺序
    properties_name: str = ""    # ";" 拼接的 "组名:值名"，与 properties 逐位对应
    quantity: int = 0
    sku_id: str = ""


class ProductRecord(BaseModel):
    # ---- 标识 ----
    product_item_id: str
    product_platform: Literal["taobao", "tmall", "1688", "micro"]
    product_link: str = ""

    # ---- 图片 ----
    product_image_url: str = ""
    product_image_list: List[ProductImage] = Field(default_factory=list)

    # ---- 文本 ----
    product_name: str = ""
    product_details: str = ""

    # ---- 价格 ----
    product_price: float = 0.0
    current_price_usd: float = Field(0.0, ge=0)
    product_freight_amount_cny: float = 0.0
    product_freight_amount_usd: float = 0.0

    # ---- 规格矩阵 ----
    prop_list: List[PropertyGroup] = Field(default_factory=list)
    sku_list: Dict[str, SkuRecord] = Field(default_factory=dict)
    props_list_origin: Dict[str, str] = Field(default_factory=dict)

    # 兼容字段：前端仍会读取，目前恒为空
    sku_prop_list: Dict[str, str] = Field(default_factory=dict)
    sku_prop_list_sort: List[str] = Field(default_factory=list)
    props_img: Dict[str, str] = Field(default_factory=dict)

    # ---- 库存 / 元信息 ----
    min_num: int = 1
    num: int = 0
    sales: int = 0
    store_id: str = ""
    seller_name: str = ""
    item_weight: str = ""
    item_size: str = ""
    api_time: str = ""
    cache: Literal["yes", "no"] = "no"


class ProductEnvelope(BaseModel):
    """
    对外返回的统一信封：
      - code = 0  成功，data 一定有值
      - code < 0  结构化失败，data 一定为 None（绝不返回半成品）
    """
    code: int = 0
    msg: str = "Success"
    data: Optional[ProductRecord] = None

    @classmethod
    def success(cls, data: ProductRecord) -> "ProductEnvelope":
        return cls(code=0, msg="Success", data=data)

    @classmethod
    def failure(cls, msg: str, code: int = -1) -> "ProductEnvelope":
        return cls(code=code, msg=msg, data=None)

    @property
    def ok(self) -> bool:
        return self.code == 0 and self.data is not None

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")
