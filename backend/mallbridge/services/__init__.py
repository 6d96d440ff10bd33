from .product_service import (
    ProductAdapter, ProductService,
    default_adapters, weidian_adapter, onebound_adapter, taobao_adapter, alibaba_1688_adapter,
)
from .link_service import LinkService


__all__ = [
    "ProductAdapter", "ProductService",
    "default_adapters", "weidian_adapter", "onebound_adapter", "taobao_adapter", "alibaba_1688_adapter",
    "LinkService",
]
