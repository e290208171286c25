from decimal import Decimal
from unittest.mock import patch

import pytest
from catalog.tests.factories import ProductFactory
from common.choices import ProductCategory
from common.results import QueryResult
from rest_framework.test import APIClient


@pytest.mark.django_db
def test_products_list_filters_ordering_and_search():
    rose = ProductFactory(name="Rose Absolue", brand="Maison Or", price=Decimal("320.00"))
    chrono = ProductFactory(
        name="Heritage Chronograph", brand="Aurum", category=ProductCategory.WATCH, price=Decimal("4200.00")
    )
    ProductFactory(name="Hidden Oud", is_active=False)

    client = APIClient()

    resp = client.get("/api/v1/catalog/products/?ordering=price")
    assert resp.status_code == 200
    assert resp.data["count"] == 2
    assert [r["slug"] for r in resp.data["results"]] == [rose.slug, chrono.slug]
    assert {"id", "name", "price", "original_price", "main_image_url", "is_discounted"} <= set(
        resp.data["results"][0].keys()
    )

    resp_watch = client.get("/api/v1/catalog/products/?category=watch")
    assert [r["slug"] for r in resp_watch.data["results"]] == [chrono.slug]

    resp_search = client.get("/api/v1/catalog/products/?search=rose")
    assert [r["slug"] for r in resp_search.data["results"]] == [rose.slug]

    resp_price = client.get("/api/v1/catalog/products/?price_min=1000")
    assert [r["slug"] for r in resp_price.data["results"]] == [chrono.slug]


@pytest.mark.django_db
def test_products_list_rejects_unknown_ordering():
    client = APIClient()
    resp = client.get("/api/v1/catalog/products/?ordering=stock_count")
    assert resp.status_code == 400
    assert "ordering" in resp.json()


@pytest.mark.django_db
def test_in_stock_filter_requires_positive_stock_count():
    available = ProductFactory(stock_count=3)
    ProductFactory(stock_count=0)
    ProductFactory(in_stock=False, stock_count=5)

    resp = APIClient().get("/api/v1/catalog/products/?in_stock=true")
    assert [r["slug"] for r in resp.data["results"]] == [available.slug]


@pytest.mark.django_db
def test_product_detail_includes_images_and_discount_flag():
    p = ProductFactory(price=Decimal("80.00"), original_price=Decimal("120.00"))

    resp = APIClient().get(f"/api/v1/catalog/products/{p.slug}/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["sku"] == p.sku
    assert body["is_discounted"] is True
    assert body["main_image_url"] == p.images[0]["url"]
    assert len(body["images"]) == 1


@pytest.mark.django_db
def test_product_detail_missing_and_inactive_return_404():
    inactive = ProductFactory(is_active=False)
    client = APIClient()
    assert client.get("/api/v1/catalog/products/does-not-exist/").status_code == 404
    assert client.get(f"/api/v1/catalog/products/{inactive.slug}/").status_code == 404


@pytest.mark.django_db
def test_store_failure_surfaces_as_503_instead_of_empty_list():
    with patch("catalog.views.selectors.fetch_products", return_value=QueryResult.failure("Data store unavailable.")):
        resp = APIClient().get("/api/v1/catalog/products/")
    assert resp.status_code == 503
    assert resp.json()["detail"] == "Data store unavailable."
