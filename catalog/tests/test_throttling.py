import pytest
from django.conf import settings
from django.test import override_settings
from rest_framework.test import APIClient


def _rates(**overrides):
    rf = {**settings.REST_FRAMEWORK}
    rf["DEFAULT_THROTTLE_RATES"] = {**rf["DEFAULT_THROTTLE_RATES"], **overrides}
    return rf


@pytest.mark.django_db
def test_catalog_scope_throttling_hits_limit_quickly():
    with override_settings(REST_FRAMEWORK=_rates(catalog="1/min")):
        client = APIClient()
        r1 = client.get("/api/v1/catalog/products/")
        assert r1.status_code == 200
        r2 = client.get("/api/v1/catalog/products/")
        # Second call should be throttled under scope rate
        assert r2.status_code == 429


@pytest.mark.django_db
def test_catalog_throttle_is_keyed_by_session_header():
    with override_settings(REST_FRAMEWORK=_rates(catalog="1/min")):
        client = APIClient()
        assert client.get("/api/v1/catalog/products/", HTTP_X_SESSION_ID="guest-a").status_code == 200
        assert client.get("/api/v1/catalog/products/", HTTP_X_SESSION_ID="guest-b").status_code == 200
        assert client.get("/api/v1/catalog/products/", HTTP_X_SESSION_ID="guest-a").status_code == 429
