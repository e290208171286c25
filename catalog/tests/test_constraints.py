from decimal import Decimal

import pytest
from catalog.tests.factories import ProductFactory, ReviewFactory
from django.db import IntegrityError, transaction


@pytest.mark.django_db
def test_product_price_cannot_be_negative():
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            ProductFactory(price=Decimal("-1.00"))


@pytest.mark.django_db
def test_original_price_is_optional_but_non_negative():
    assert ProductFactory(original_price=None).is_discounted is False
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            ProductFactory(original_price=Decimal("-5.00"))


@pytest.mark.django_db
def test_main_image_prefers_flagged_image_then_first_by_order():
    p = ProductFactory(
        images=[
            {"url": "https://img/b.jpg", "order": 1},
            {"url": "https://img/a.jpg", "order": 0},
        ]
    )
    assert p.main_image_url == "https://img/a.jpg"

    p.images.append({"url": "https://img/c.jpg", "order": 2, "is_main": True})
    assert p.main_image_url == "https://img/c.jpg"
    assert ProductFactory(images=[]).main_image_url == ""


@pytest.mark.django_db
@pytest.mark.parametrize("rating", [0, 6])
def test_review_rating_is_one_to_five(rating):
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            ReviewFactory(rating=rating)


@pytest.mark.django_db
def test_one_review_per_session_and_product():
    review = ReviewFactory()
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            ReviewFactory(product=review.product, session_id=review.session_id)
