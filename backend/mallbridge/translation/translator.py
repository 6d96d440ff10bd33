"""
翻译适配器（外部协作方边界）：translate(text, target_lang) -> text

后端是 Google Translate v2 兼容的 HTTP 接口（POST JSON {q, source, target, format}，key 放 query）。
约定：
  - 空文本 / 目标语言就是源语言 / 未配置 endpoint → 原文直出
  - 任何失败（网络、超时、非 2xx、返回结构不对）→ 原文，不抛异常
"""
from __future__ import annotations
import logging
from typing import Optional

import requests

from mallbridge.core.config import settings

logger = logging.getLogger(__name__)


class Translator:

    def __init__(
        self,
        endpoint: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.endpoint = endpoint if endpoint is not None else settings.TRANSLATOR_ENDPOINT
        if api_key is None and settings.TRANSLATOR_API_KEY is not None:
            api_key = settings.TRANSLATOR_API_KEY.get_secret_value()
        self.api_key = api_key
        self.timeout = timeout or settings.TRANSLATE_TIMEOUT
        self._session = session or requests.Session()

    @property
    def enabled(self) -> bool:
        return bool(self.endpoint)

    def translate(self, text: str, target_lang: str, source_lang: str = "auto") -> str:
        if not text or not text.strip():
            return text
        if not target_lang or target_lang == settings.SOURCE_LANG or target_lang == source_lang:
            return text
        if not self.enabled:
            return text

        payload = {"q": text, "target": target_lang, "format": "text"}
        if source_lang and source_lang != "auto":
            payload["source"] = source_lang
        params = {"key": self.api_key} if self.api_key else None

        try:
            resp = self._session.post(self.endpoint, params=params, json=payload, timeout=self.timeout)
            if not resp.ok:
                logger.warning("Translate HTTP %s for target=%s", resp.status_code, target_lang)
                return text
            data = resp.json()
            translated = (data.get("data") or {}).get("translations", [{}])[0].get("translatedText")
            return translated or text
        except (requests.RequestException, ValueError, AttributeError, IndexError, TypeError) as e:
            logger.warning("Translate failed (target=%s): %s", target_lang, e)
            return text

    def close(self) -> None:
        self._session.close()
