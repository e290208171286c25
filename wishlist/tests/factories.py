import factory
from factory.django import DjangoModelFactory
from wishlist.models import Wishlist, WishlistItem


class WishlistFactory(DjangoModelFactory):
    class Meta:
        model = Wishlist

    session_id = factory.Sequence(lambda n: f"session-{n}")


class WishlistItemFactory(DjangoModelFactory):
    class Meta:
        model = WishlistItem

    wishlist = factory.SubFactory(WishlistFactory)
    product = factory.SubFactory("catalog.tests.factories.ProductFactory")
