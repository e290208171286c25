from unittest.mock import patch

import pytest
from catalog.models import Product
from catalog.selectors import fetch_product, fetch_products
from catalog.tests.factories import ProductFactory
from django.db import OperationalError


@pytest.mark.django_db
def test_fetch_product_by_slug_and_id():
    p = ProductFactory()

    by_slug = fetch_product(slug=p.slug)
    by_id = fetch_product(product_id=p.id)

    assert by_slug.ok and by_slug.value == p
    assert by_id.ok and by_id.value == p


@pytest.mark.django_db
def test_fetch_product_missing_is_explicit_failure():
    result = fetch_product(slug="nope")

    assert result.ok is False
    assert result.missing is True
    assert result.error == "Product not found."
    with pytest.raises(LookupError):
        result.unwrap()


@pytest.mark.django_db
def test_fetch_products_database_error_is_not_an_empty_list():
    ProductFactory()
    with patch.object(Product.objects, "filter", side_effect=OperationalError("connection lost")):
        result = fetch_products()

    assert result.ok is False
    assert result.missing is False
    assert result.value is None
    assert result.error == "Data store unavailable."


def test_fetch_product_requires_a_lookup():
    with pytest.raises(ValueError):
        fetch_product()
