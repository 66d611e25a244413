"""Tests for the Open Beauty Facts lookup client."""

import httpx
import pytest

from glowmate.config import Settings
from glowmate.services.product_lookup import ProductLookupClient, parse_ingredients


@pytest.fixture
def lookup_settings():
    return Settings(
        product_lookup_enabled=True,
        product_lookup_url="https://obf.test/api/v2/product",
    )


def _client(settings, handler):
    return ProductLookupClient(
        settings, client=httpx.Client(transport=httpx.MockTransport(handler))
    )


OBF_PRODUCT = {
    "status": 1,
    "product": {
        "product_name": "Hydrating Toner",
        "brands": "Glow Labs",
        "image_front_url": "https://images.test/toner.jpg",
        "ingredients_text": "Aqua, Glycerin , Niacinamide,,",
        "categories_tags": ["en:toners", "en:face-care"],
    },
}


class TestProductLookupClient:
    def test_maps_found_product(self, lookup_settings):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=OBF_PRODUCT)

        product = _client(lookup_settings, handler).fetch("3600523614")

        assert str(requests[0].url) == "https://obf.test/api/v2/product/3600523614.json"
        assert product.barcode == "3600523614"
        assert product.name == "Hydrating Toner"
        assert product.brand == "Glow Labs"
        assert product.image_url == "https://images.test/toner.jpg"
        assert product.ingredients == ["Aqua", "Glycerin", "Niacinamide"]
        assert product.tags == ["en:toners", "en:face-care"]
        assert product.category == "Uncategorized"
        assert product.price == 0.0

    def test_missing_fields_get_placeholders(self, lookup_settings):
        payload = {"status": 1, "product": {"product_name_en": "Night Cream"}}
        product = _client(lookup_settings, lambda request: httpx.Response(200, json=payload)).fetch(
            "111"
        )

        assert product.name == "Night Cream"
        assert product.brand == "Unknown Brand"
        assert product.ingredients == []

    def test_status_zero_is_no_match(self, lookup_settings):
        payload = {"status": 0, "status_verbose": "product not found"}
        client = _client(lookup_settings, lambda request: httpx.Response(200, json=payload))
        assert client.fetch("000") is None

    def test_http_404_is_no_match(self, lookup_settings):
        client = _client(lookup_settings, lambda request: httpx.Response(404))
        assert client.fetch("000") is None

    def test_server_error_is_no_match(self, lookup_settings):
        client = _client(lookup_settings, lambda request: httpx.Response(503))
        assert client.fetch("000") is None

    def test_timeout_is_no_match(self, lookup_settings):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        assert _client(lookup_settings, handler).fetch("000") is None

    def test_invalid_json_is_no_match(self, lookup_settings):
        client = _client(lookup_settings, lambda request: httpx.Response(200, text="<html>"))
        assert client.fetch("000") is None

    def test_disabled_skips_request(self):
        def handler(request):
            raise AssertionError("no request expected")

        client = _client(Settings(product_lookup_enabled=False), handler)
        assert client.fetch("000") is None


def test_parse_ingredients_drops_blanks():
    assert parse_ingredients(" Water ,, Glycerin,  ") == ["Water", "Glycerin"]
