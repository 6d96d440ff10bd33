"""OneBoundAPI：离线用假 Session；配置了真实凭证时可跑 integration 标记的联调用例。"""

from __future__ import annotations

import os

import pytest

from conftest import FakeResponse, FakeSession
from mallbridge.core.config import settings
from mallbridge.integrations.errors import FetcherNotConfiguredError, UpstreamPayloadError
from mallbridge.integrations.http_client import PlatformHttpClient
from mallbridge.integrations.onebound import OneBoundAPI
from mallbridge.integrations.onebound.onebound_api import WEIDIAN_FLAT_FREIGHT_CNY


def _api(responses):
    session = FakeSession(responses)
    http = PlatformHttpClient(max_attempts=1, session=session, sleep=lambda s: None)
    return OneBoundAPI(http=http, api_key="k", api_secret="s", base_url="https://ob.test"), session


def test_missing_credentials_raise(monkeypatch):
    monkeypatch.setattr(settings, "ONEBOUND_API_KEY", None)
    monkeypatch.setattr(settings, "ONEBOUND_API_SECRET", None)
    with pytest.raises(FetcherNotConfiguredError):
        OneBoundAPI(http=PlatformHttpClient(session=FakeSession([])))


def test_tmall_is_queried_as_taobao_item_get_pro():
    api, session = _api([FakeResponse(200, json_body={"item": {"num_iid": "9", "post_fee": "3"}})])

    assert api.fetch_item("tmall", "9") == {"num_iid": "9", "post_fee": "3"}
    call = session.calls[0]
    assert call["url"] == "https://ob.test/taobao/item_get_pro"
    assert call["params"]["api_name"] == "item_get_pro"
    assert call["params"]["num_iid"] == "9"
    assert call["params"]["key"] == "k" and call["params"]["secret"] == "s"


def test_1688_uses_item_get_and_nested_item():
    api, session = _api([FakeResponse(200, json_body={"data": {"item": {"num_iid": "1"}}})])
    assert api.fetch_item("1688", "1") == {"num_iid": "1"}
    assert session.calls[0]["url"] == "https://ob.test/1688/item_get"


def test_empty_item_raises():
    api, _ = _api([FakeResponse(200, json_body={"error": "item-not-found"})])
    with pytest.raises(UpstreamPayloadError):
        api.fetch_item("taobao", "1")


@pytest.mark.parametrize("body", [
    {"data": {"post_fee": "12.5"}},
    {"item": {"post_fee": "12.5"}},
    {"post_fee": 12.5},
])
def test_shipping_fee_shapes(body):
    api, session = _api([FakeResponse(200, json_body=body)])
    fee = api.fetch_local_shipping_fee("taobao", "1")
    assert fee["product_freight_amount_cny"] == 12.5
    assert session.calls[0]["params"]["area_id"] == settings.ONEBOUND_AREA_ID


def test_weidian_fee_is_flat_without_request():
    api, session = _api([])
    fee = api.fetch_local_shipping_fee("micro", "1")
    assert fee["product_freight_amount_cny"] == WEIDIAN_FLAT_FREIGHT_CNY
    assert session.calls == []


def test_fetch_merges_fee_into_item():
    api, _ = _api([
        FakeResponse(200, json_body={"item": {"num_iid": "9", "post_fee": "3"}}),
        FakeResponse(200, json_body={"data": {"post_fee": "8"}}),
    ])
    assert api.fetch("taobao", "9")["post_fee"] == 8.0


def test_fetch_keeps_item_fee_when_estimate_fails():
    api, _ = _api([
        FakeResponse(200, json_body={"item": {"num_iid": "9", "post_fee": "3"}}),
        FakeResponse(200, text="not json"),
    ])
    assert api.fetch("taobao", "9")["post_fee"] == "3"


# ---------- 联调（需要真实凭证） ----------
@pytest.mark.integration
@pytest.mark.skipif(
    not settings.onebound_enabled or not os.getenv("TEST_ONEBOUND_TAOBAO_ID"),
    reason="ONEBOUND_API_KEY / ONEBOUND_API_SECRET / TEST_ONEBOUND_TAOBAO_ID not configured.",
)
def test_live_taobao_item():
    api = OneBoundAPI()
    try:
        item = api.fetch("taobao", os.environ["TEST_ONEBOUND_TAOBAO_ID"])
    finally:
        api.http.close()
    assert item.get("num_iid")
