import pytest
from cart.models import CartItem
from cart.tests.factories import CartFactory, CartItemFactory
from catalog.tests.factories import ProductFactory
from django.db import IntegrityError, transaction


@pytest.mark.django_db
def test_unique_product_size_per_cart_constraint():
    cart = CartFactory()
    product = ProductFactory()
    CartItemFactory(cart=cart, product=product, size="50ml")
    CartItemFactory(cart=cart, product=product, size="100ml")

    with pytest.raises(IntegrityError):
        with transaction.atomic():
            CartItemFactory(cart=cart, product=product, size="50ml")


@pytest.mark.django_db
def test_quantity_positive_constraint():
    cart = CartFactory()
    product = ProductFactory()

    with pytest.raises(IntegrityError):
        with transaction.atomic():
            CartItem.objects.create(cart=cart, product=product, quantity=0, product_name=product.name)
