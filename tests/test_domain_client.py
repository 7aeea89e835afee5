import pytest
import requests

from listings_dump.adapters import domain_client
from listings_dump.adapters.config import AppConfig
from listings_dump.adapters.domain_client import DomainClient, make_domain_client
from listings_dump.domain.errors import ConfigError, DomainAPIError
from listings_dump.domain.ports import build_search_request


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


@pytest.fixture
def captured(monkeypatch):
    calls = []
    box = {"response": FakeResponse(payload=[])}

    def fake_post(url, headers=None, json=None, timeout=None):
        calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        resp = box["response"]
        if isinstance(resp, Exception):
            raise resp
        return resp

    monkeypatch.setattr(domain_client.requests, "post", fake_post)
    box["calls"] = calls
    return box


def _client():
    return DomainClient(base_url="https://api.example.test/v1/", api_key="secret", timeout_s=5)


def _request():
    return build_search_request(state="NSW", suburb="Pyrmont", postcode="2009")


def test_search_posts_request_with_api_key(captured):
    captured["response"] = FakeResponse(
        payload=[
            {"type": "PropertyListing", "listing": {"id": 1, "listingType": "Rent"}},
            {"type": "Project", "listings": []},
        ]
    )

    results = _client().search_residential(_request())

    (call,) = captured["calls"]
    assert call["url"] == "https://api.example.test/v1/listings/residential/_search"
    assert call["headers"]["X-Api-Key"] == "secret"
    assert call["json"]["listingType"] == "Rent"
    assert call["timeout"] == 5

    assert len(results) == 2
    assert results[0].listing.id == 1
    assert results[1].listing is None


def test_http_error_raises(captured):
    captured["response"] = FakeResponse(status_code=401, text="Unauthorized")

    with pytest.raises(DomainAPIError) as exc:
        _client().search_residential(_request())

    assert exc.value.status_code == 401
    assert "Unauthorized" in str(exc.value)


def test_network_error_raises(captured):
    captured["response"] = requests.ConnectionError("dns failure")

    with pytest.raises(DomainAPIError, match="dns failure"):
        _client().search_residential(_request())


def test_non_json_and_wrong_shape_raise(captured):
    captured["response"] = FakeResponse(payload=None, text="<html>")
    with pytest.raises(DomainAPIError, match="non-JSON"):
        _client().search_residential(_request())

    captured["response"] = FakeResponse(payload={"message": "nope"})
    with pytest.raises(DomainAPIError, match="unexpected search response"):
        _client().search_residential(_request())


def test_unparseable_listing_raises(captured):
    captured["response"] = FakeResponse(payload=[{"listing": {"id": "not-a-number"}}])

    with pytest.raises(DomainAPIError, match="couldn't parse"):
        _client().search_residential(_request())


def test_listing_without_id_is_kept(captured):
    captured["response"] = FakeResponse(
        payload=[
            {"type": "PropertyListing", "listing": {"id": 1}},
            {"type": "PropertyListing", "listing": {"headline": "no id"}},
        ]
    )

    results = _client().search_residential(_request())

    assert len(results) == 2
    assert results[1].listing.id is None
    assert results[1].listing.headline == "no id"


def test_make_client_from_config():
    c = make_domain_client(AppConfig(DOMAIN_API_KEY="abc", DOMAIN_TIMEOUT_S=3))
    assert c.api_key == "abc"
    assert c.base_url == "https://api.domain.com.au/v1"
    assert c.timeout_s == 3

    with pytest.raises(ConfigError):
        make_domain_client(AppConfig())
