from decimal import Decimal

import factory
from factory.django import DjangoModelFactory
from orders.models import Order, OrderItem


class OrderFactory(DjangoModelFactory):
    class Meta:
        model = Order

    number = factory.Sequence(lambda n: f"MH-{n + 1:06d}")
    email = "ada@example.com"
    customer_name = "Ada Lovelace"
    subtotal = Decimal("100.00")
    tax = Decimal("8.00")
    shipping = Decimal("15.00")
    total = Decimal("123.00")
    payment_method = "card"
    payment_reference = factory.Sequence(lambda n: f"pi_{n}")
    status = Order.STATUS_PAID


class OrderItemFactory(DjangoModelFactory):
    class Meta:
        model = OrderItem

    order = factory.SubFactory(OrderFactory)
    product = factory.SubFactory("catalog.tests.factories.ProductFactory")
    product_name = factory.SelfAttribute("product.name")
    sku = factory.SelfAttribute("product.sku")
    unit_price = factory.SelfAttribute("product.price")
