from __future__ import annotations
from datetime import datetime, timezone


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def now_iso() -> str:
    """api_time 字段统一用 UTC ISO 字符串。"""
    return now_utc().isoformat()
