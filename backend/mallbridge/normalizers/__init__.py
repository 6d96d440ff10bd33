"""
对外统一入口（Public Surface）：各平台原始返回 → ProductEnvelope。
"""

from .models import (
    ProductImage, PropertyValue, PropertyGroup, SkuRecord, ProductRecord, ProductEnvelope,
)
from .taobao import normalize_taobao
from .alibaba_1688 import normalize_1688
from .weidian import normalize_weidian
from .onebound import normalize_onebound


__all__ = [
    "ProductImage", "PropertyValue", "PropertyGroup", "SkuRecord", "ProductRecord", "ProductEnvelope",
    "normalize_taobao", "normalize_1688", "normalize_weidian", "normalize_onebound",
]
