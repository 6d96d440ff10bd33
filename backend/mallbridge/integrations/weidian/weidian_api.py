"""
Weidian 公开接口（thor.weidian.com，无需签名）：
   - getItemSkuInfo：商品标题/主图/规格(attrList)/SKU(skuInfos)/价格（单位：分）
   - getDetailDesc：详情描述（图片+文字块）
   返回的都是原始 result 字典，字段映射交给 normalizers.weidian。
"""
from __future__ import annotations
import logging, time
from typing import Any, Dict, Optional

from mallbridge.core.config import settings
from mallbridge.integrations.errors import UpstreamError, UpstreamPayloadError
from mallbridge.integrations.http_client import PlatformHttpClient, dumps_param

logger = logging.getLogger(__name__)


class WeidianAPI:
    """封装 Weidian 两个详情接口。"""

    SKU_INFO_PATH = "/detail/getItemSkuInfo/1.0"
    DESCRIPTION_PATH = "/detail/getDetailDesc/1.0"

    def __init__(self, http: Optional[PlatformHttpClient] = None, base_url: Optional[str] = None) -> None:
        self.http = http or PlatformHttpClient()
        self.base_url = (base_url or settings.WEIDIAN_BASE_URL).rstrip("/")
        self.headers = {
            "User-Agent": settings.WEIDIAN_USER_AGENT,
            "Accept": "application/json, text/plain, */*",
        }


    def get_item_sku_info(self, item_id: str) -> Dict[str, Any]:
        """获取 SKU/价格等主数据；接口报错直接抛 UpstreamPayloadError。"""
        logger.info("Fetching Weidian sku info item_id=%s", item_id)
        payload = self._get(self.SKU_INFO_PATH, {"itemId": str(item_id)})
        result = self._unwrap(payload)
        if result is None:
            message = self._status_message(payload) or "Unknown API error"
            raise UpstreamPayloadError(f"Weidian getItemSkuInfo failed for {item_id}: {message}")
        return result


    def get_item_description(self, item_id: str) -> Optional[Dict[str, Any]]:
        """
        获取详情描述。描述是可选数据：接口失败只记日志返回 None，不影响主流程。
        """
        logger.info("Fetching Weidian description item_id=%s", item_id)
        try:
            payload = self._get(self.DESCRIPTION_PATH, {"vItemId": str(item_id)})
        except UpstreamError as e:
            logger.warning("Weidian getDetailDesc failed for %s: %s", item_id, e)
            return None

        result = self._unwrap(payload)
        if result is None:
            logger.warning(
                "Weidian getDetailDesc returned error for %s: %s",
                item_id, self._status_message(payload),
            )
        return result


    def fetch(self, item_id: str) -> Dict[str, Any]:
        """供 ProductService 调用：一次拿齐 details + description。"""
        return {
            "details": self.get_item_sku_info(item_id),
            "description": self.get_item_description(item_id),
        }


    # ---------- Helpers ----------
    def _get(self, path: str, param: Dict[str, Any]) -> Any:
        params = {
            "param": dumps_param(param),
            "_": str(int(time.time() * 1000)),   # 防缓存时间戳
        }
        return self.http.get_json(f"{self.base_url}{path}", params=params, headers=dict(self.headers))


    @staticmethod
    def _unwrap(payload: Any) -> Optional[Dict[str, Any]]:
        """status.code == 0 且有 result 才算成功。"""
        if not isinstance(payload, dict):
            return None
        status = payload.get("status") or {}
        result = payload.get("result")
        if status.get("code") == 0 and isinstance(result, dict):
            return result
        return None


    @staticmethod
    def _status_message(payload: Any) -> Optional[str]:
        if not isinstance(payload, dict):
            return None
        return (payload.get("status") or {}).get("message")
