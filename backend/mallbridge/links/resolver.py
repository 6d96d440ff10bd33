from __future__ import annotations
import logging
from typing import Optional

import requests

from mallbridge.links.classifier import convert_link
from mallbridge.links.extract import extract_relevant_link
from mallbridge.links.short_link import resolve_short_link
from mallbridge.links.urls import ResolvedLink

logger = logging.getLogger(__name__)


def resolve(raw: Optional[str], session: Optional[requests.Session] = None) -> Optional[ResolvedLink]:
    """
    任意输入（URL / 整段分享文案）→ ResolvedLink | None，永不抛异常。
      1) 先按 URL 直接分类（不发请求）
      2) 不行再从文本里抠短链，请求一次拿真实链接后再分类
    """
    link = convert_link(raw)
    if link:
        return link

    _, short_link = extract_relevant_link(raw)
    if not short_link:
        logger.debug("Unresolved link input: %s", (raw or "")[:200])
        return None

    target = resolve_short_link(short_link, session=session)
    if not target:
        return None
    return convert_link(target)
