"""
从聊天文本里抠出淘宝短链 / 1688 二维码链接。
用户常把整段分享文案贴进来（“【淘宝】... https://e.tb.cn/h.xxx?tk=yyy%20CZ001 ...”），
所以匹配到第一个空白为止，并且在字面的 "%20" 处截断。
"""
from __future__ import annotations
import re
from typing import Optional, Tuple

from mallbridge.links.urls import ALIBABA_1688, TAOBAO

_RELEVANT_LINK_RE = re.compile(r"https?://(?:e\.tb\.cn|qr\.1688\.com)/[^\s]*")
_SHORT_TB_LINK_RE = re.compile(r"https?://e\.tb\.cn/[^\s]*")


def _cut(url: str) -> str:
    idx = url.find("%20")
    if idx != -1:
        url = url[:idx]
    idx = url.find(" ")
    if idx != -1:
        url = url[:idx]
    return url


def extract_relevant_link(raw_text: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """返回 (platform, link)；找不到时为 (None, None)。"""
    if not raw_text:
        return None, None
    m = _RELEVANT_LINK_RE.search(raw_text)
    if not m:
        return None, None

    url = _cut(m.group(0))
    if "e.tb.cn" in url:
        return TAOBAO, url
    if "qr.1688.com" in url:
        return ALIBABA_1688, url
    return None, url


def extract_short_tb_link(raw_text: Optional[str]) -> Optional[str]:
    """只找 e.tb.cn 短链。"""
    if not raw_text:
        return None
    m = _SHORT_TB_LINK_RE.search(raw_text)
    return _cut(m.group(0)) if m else None
