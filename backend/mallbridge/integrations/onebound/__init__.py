from .onebound_api import OneBoundAPI, WEIDIAN_FLAT_FREIGHT_CNY

__all__ = ["OneBoundAPI", "WEIDIAN_FLAT_FREIGHT_CNY"]
