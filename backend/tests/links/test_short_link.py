import requests

from conftest import FakeResponse, FakeSession
from mallbridge.links import (
    ResolvedLink, extract_relevant_link, extract_short_tb_link, resolve, resolve_short_link,
)


SHARE_TEXT = "【淘宝】限时特惠 https://e.tb.cn/h.gBzK3Yx?tk=abcd%20CZ001 「夏季短袖T恤」 点击链接直接打开"


def test_extract_relevant_link_cuts_at_percent20():
    assert extract_relevant_link(SHARE_TEXT) == ("taobao", "https://e.tb.cn/h.gBzK3Yx?tk=abcd")


def test_extract_relevant_link_cuts_at_whitespace():
    text = "复制这条 https://qr.1688.com/s/AbCdEf 打开阿里巴巴"
    assert extract_relevant_link(text) == ("1688", "https://qr.1688.com/s/AbCdEf")


def test_extract_relevant_link_none():
    assert extract_relevant_link("no links here") == (None, None)
    assert extract_relevant_link("") == (None, None)
    assert extract_short_tb_link("https://qr.1688.com/s/x") is None
    assert extract_short_tb_link(SHARE_TEXT) == "https://e.tb.cn/h.gBzK3Yx?tk=abcd"


def test_short_link_redirect_location():
    session = FakeSession([
        FakeResponse(302, headers={"Location": "https://item.taobao.com/item.htm?ut_sk=1&id=6612345&spm=x"}),
    ])
    assert resolve_short_link("https://e.tb.cn/h.abc", session=session) == "https://item.taobao.com/item.htm?id=6612345"

    call = session.calls[0]
    assert call["allow_redirects"] is False
    assert "iPhone" in call["headers"]["User-Agent"]
    assert call["timeout"] > 0


def test_short_link_html_var_url():
    html = "<html><script>var url = 'https://a.m.taobao.com/i778899.htm?id=778899&sourceType=item';</script></html>"
    session = FakeSession([FakeResponse(200, text=html)])
    assert resolve_short_link("https://e.tb.cn/h.def", session=session) == "https://item.taobao.com/item.htm?id=778899"


def test_short_link_html_wireless_url_1688():
    html = '<script>var wirelessUrl = "https://m.1688.com/offer/123.html?offerId=123456&src=qr";</script>'
    session = FakeSession([FakeResponse(200, text=html)])
    assert resolve_short_link("https://qr.1688.com/s/xyz", session=session) == "https://detail.1688.com/offer/123456.html"


def test_short_link_failures_return_none():
    assert resolve_short_link("https://e.tb.cn/h.x", session=FakeSession([requests.Timeout("slow")])) is None
    assert resolve_short_link("https://e.tb.cn/h.x", session=FakeSession([FakeResponse(200, text="<html></html>")])) is None
    assert resolve_short_link("https://e.tb.cn/h.x", session=FakeSession([FakeResponse(404)])) is None
    # 跳转目标里没有 id
    no_id = FakeResponse(301, headers={"Location": "https://www.taobao.com/"})
    assert resolve_short_link("https://e.tb.cn/h.x", session=FakeSession([no_id])) is None


def test_resolve_direct_link_makes_no_request():
    session = FakeSession([])
    assert resolve("https://item.taobao.com/item.htm?id=5", session=session) == ResolvedLink.of("taobao", "5")
    assert session.calls == []


def test_resolve_share_text_through_short_link():
    session = FakeSession([
        FakeResponse(302, headers={"Location": "https://item.taobao.com/item.htm?id=6612345"}),
    ])
    assert resolve(SHARE_TEXT, session=session) == ResolvedLink.of("taobao", "6612345")
    assert session.calls[0]["url"] == "https://e.tb.cn/h.gBzK3Yx?tk=abcd"


def test_resolve_never_raises():
    session = FakeSession([requests.ConnectionError("boom")])
    assert resolve(SHARE_TEXT, session=session) is None
    assert resolve("random words", session=FakeSession([])) is None
    assert resolve(None) is None
