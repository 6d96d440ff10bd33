"""
对外统一入口（Public Surface）：链接分类 / 短链解析 / 标准链接拼接。
"""

from .urls import (
    TAOBAO, TMALL, ALIBABA_1688, WEIDIAN, PLATFORMS,
    ResolvedLink, build_item_link, as_platform,
)
from .classifier import convert_link
from .extract import extract_relevant_link, extract_short_tb_link
from .short_link import resolve_short_link
from .resolver import resolve


__all__ = [
    "TAOBAO", "TMALL", "ALIBABA_1688", "WEIDIAN", "PLATFORMS",
    "ResolvedLink", "build_item_link", "as_platform",
    "convert_link",
    "extract_relevant_link", "extract_short_tb_link",
    "resolve_short_link",
    "resolve",
]
