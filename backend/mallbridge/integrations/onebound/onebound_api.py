"""
OneBound 聚合接口（api-gw.onebound.cn），key/secret 直接放 query，无需签名。
   - item_get / item_get_pro：商品详情（淘宝走 item_get_pro，天猫按淘宝查）
   - item_fee：运费估算
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from mallbridge.core.config import settings
from mallbridge.integrations.errors import FetcherNotConfiguredError, UpstreamPayloadError
from mallbridge.integrations.http_client import PlatformHttpClient
from mallbridge.utils.currency import convert_cny_to_usd, to_float

logger = logging.getLogger(__name__)

# 微店没有 item_fee，统一按 10 元估算
WEIDIAN_FLAT_FREIGHT_CNY = 10.0


class OneBoundAPI:
    """封装 OneBound 商品详情与运费接口。"""

    def __init__(
        self,
        http: Optional[PlatformHttpClient] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> None:
        self.http = http or PlatformHttpClient()
        self.base_url = (base_url or settings.ONEBOUND_BASE_URL).rstrip("/")
        self.api_key = api_key or settings.ONEBOUND_API_KEY
        secret = api_secret or settings.ONEBOUND_API_SECRET
        if hasattr(secret, "get_secret_value"):
            secret = secret.get_secret_value()
        self.api_secret = secret
        if not self.api_key or not self.api_secret:
            raise FetcherNotConfiguredError("ONEBOUND_API_KEY / ONEBOUND_API_SECRET not configured")


    def fetch_item(self, platform: str, item_id: str, lang: str = "en") -> Dict[str, Any]:
        """拉取商品详情，返回 item 字典（body.item 或 body.data.item）。"""
        api_platform = "taobao" if platform == "tmall" else platform
        endpoint = "item_get_pro" if api_platform == "taobao" else "item_get"

        body = self.http.get_json(
            f"{self.base_url}/{api_platform}/{endpoint}",
            params=self._params(endpoint, num_iid=item_id, lang=lang),
        )
        body = body if isinstance(body, dict) else {}
        item = body.get("item") or (body.get("data") or {}).get("item")
        if not item:
            raise UpstreamPayloadError(f"No item returned from OneBound for {platform}:{item_id}")
        return item


    def fetch_local_shipping_fee(self, platform: str, item_id: str) -> Dict[str, float]:
        """
        运费估算：item_fee 可能返回 {data:{post_fee}} / {item:{post_fee}} / {post_fee}，三种都兼容。
        """
        if platform in ("micro", "weidian"):
            return {
                "product_freight_amount_cny": WEIDIAN_FLAT_FREIGHT_CNY,
                "product_freight_amount_usd": convert_cny_to_usd(WEIDIAN_FLAT_FREIGHT_CNY),
            }

        api_platform = "taobao" if platform == "tmall" else platform
        body = self.http.get_json(
            f"{self.base_url}/{api_platform}/item_fee",
            params=self._params(
                "item_fee", num_iid=item_id, lang="en", area_id=settings.ONEBOUND_AREA_ID, sku="0",
            ),
        )
        body = body if isinstance(body, dict) else {}
        container = body.get("data") or body.get("item") or body
        raw_fee = container.get("post_fee", container.get("postFee")) if isinstance(container, dict) else None
        freight_cny = to_float(raw_fee) or 0.0

        return {
            "product_freight_amount_cny": freight_cny,
            "product_freight_amount_usd": convert_cny_to_usd(freight_cny),
        }


    def fetch(self, platform: str, item_id: str) -> Dict[str, Any]:
        """供 ProductService 调用：详情 + 运费合并成一个 item（运费覆盖 post_fee）。"""
        item = dict(self.fetch_item(platform, item_id))
        try:
            fee = self.fetch_local_shipping_fee(platform, item_id)
            item["post_fee"] = fee["product_freight_amount_cny"]
        except UpstreamPayloadError as e:
            # 运费只是估算，拿不到就用详情里的 post_fee
            logger.warning("OneBound item_fee failed for %s:%s: %s", platform, item_id, e)
        return item


    def _params(self, api_name: str, **extra: Any) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "cache": "no",
            "api_name": api_name,
            "key": self.api_key,
            "secret": self.api_secret,
        }
        params.update({k: v for k, v in extra.items() if v is not None})
        return params
