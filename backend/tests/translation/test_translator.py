import requests

from conftest import FakeResponse, FakeSession
from mallbridge.translation import Translator


def _ok(text):
    return FakeResponse(200, json_body={"data": {"translations": [{"translatedText": text}]}})


def test_translate_posts_google_style_payload():
    session = FakeSession([_ok("Red dress")])
    tr = Translator(endpoint="https://translate.test/v2", api_key="k", timeout=3, session=session)

    assert tr.translate("红色连衣裙", "en") == "Red dress"
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://translate.test/v2"
    assert call["params"] == {"key": "k"}
    assert call["json"] == {"q": "红色连衣裙", "target": "en", "format": "text"}
    assert call["timeout"] == 3


def test_explicit_source_language_is_sent():
    session = FakeSession([_ok("Bonjour")])
    tr = Translator(endpoint="https://translate.test/v2", api_key=None, session=session)
    tr.translate("你好", "fr", source_lang="zh-CN")
    assert session.calls[0]["json"]["source"] == "zh-CN"
    assert session.calls[0]["params"] is None


def test_passthrough_without_calling_backend():
    session = FakeSession([])
    tr = Translator(endpoint="https://translate.test/v2", api_key="k", session=session)

    assert tr.translate("", "en") == ""
    assert tr.translate("   ", "en") == "   "
    assert tr.translate("颜色", "zh") == "颜色"
    assert tr.translate("color", "en", source_lang="en") == "color"
    assert session.calls == []

    disabled = Translator(endpoint="", api_key="k", session=session)
    assert not disabled.enabled
    assert disabled.translate("颜色", "en") == "颜色"
    assert session.calls == []


def test_failures_return_original_text():
    session = FakeSession([
        FakeResponse(500, text="boom"),
        requests.Timeout("slow"),
        FakeResponse(200, text="not json"),
        FakeResponse(200, json_body={"data": {"translations": []}}),
        FakeResponse(200, json_body={"data": {"translations": [{"translatedText": ""}]}}),
    ])
    tr = Translator(endpoint="https://translate.test/v2", api_key="k", session=session)

    for _ in range(5):
        assert tr.translate("尺码", "en") == "尺码"
    assert len(session.calls) == 5
