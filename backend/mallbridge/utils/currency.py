"""
CNY → USD 换算（纯函数）。

各平台的汇率常量故意不统一：线上缓存和前端比价都是按各自的系数算出来的，
统一成一个汇率会悄悄改掉已展示的价格。
"""
from __future__ import annotations
import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional


# ---------- 各平台系数 ----------
TAOBAO_PRICE_RATE = 1 / 6.65       # 商品价：price / 6.65
TAOBAO_FREIGHT_RATE = 0.14         # 运费：× 0.14
ALIBABA_1688_RATE = 0.14
WEIDIAN_RATE = 0.14
ONEBOUND_PRICE_RATE = 0.14
DEFAULT_CNY_PER_USD = 6.7          # convert_cny_to_usd 默认除数（OneBound 运费）


def round_money(value: float, q: str = "0.01") -> float:
    """四舍五入到 2 位小数（ROUND_HALF_UP，避免 float 银行家舍入）。"""
    try:
        return float(Decimal(str(value)).quantize(Decimal(q), rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError, TypeError):
        return 0.0


def cny_to_usd(amount: Optional[float], rate: float) -> float:
    """按乘数换算，结果非负、保留两位。"""
    if amount is None:
        return 0.0
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(value) or value <= 0:   # NaN / 负数 → 0
        return 0.0
    return round_money(value * rate)


def convert_cny_to_usd(cny_amount: Optional[float], cny_per_usd: float = DEFAULT_CNY_PER_USD) -> float:
    """按除数换算：cny / 6.7。"""
    if not cny_per_usd:
        return 0.0
    return cny_to_usd(cny_amount, 1 / cny_per_usd)


def minor_to_major(value) -> float:
    """分 → 元（平台价格普遍以分为单位）。"""
    f = to_float(value)
    return round_money(f / 100) if f is not None else 0.0


def to_float(val) -> Optional[float]:
    if val is None:
        return None
    s = str(val).strip()
    if not s:
        return None
    try:
        return float(s)
    except (ValueError, TypeError):
        return None


def to_int(val, default: int = 0) -> int:
    f = to_float(val)
    return int(f) if f is not None else default
