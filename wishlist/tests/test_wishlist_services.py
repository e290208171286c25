import pytest
from catalog.tests.factories import ProductFactory
from django.db import IntegrityError
from wishlist.models import WishlistItem
from wishlist.selectors import get_wishlist_for_session, wishlist_product_ids, wishlist_products
from wishlist.services import (
    WishlistError,
    add_to_wishlist,
    clear_wishlist,
    get_wishlist_count,
    is_in_wishlist,
    remove_from_wishlist,
    toggle_wishlist,
)
from wishlist.tests.factories import WishlistFactory, WishlistItemFactory


@pytest.mark.django_db
def test_adding_twice_keeps_one_entry():
    product = ProductFactory()

    assert add_to_wishlist(session_id="s1", product_id=product.id) is True
    assert add_to_wishlist(session_id="s1", product_id=product.id) is False

    assert get_wishlist_count(session_id="s1") == 1
    assert is_in_wishlist(session_id="s1", product_id=product.id)


@pytest.mark.django_db
def test_products_keep_saving_order():
    first, second, third = ProductFactory(), ProductFactory(), ProductFactory()
    for product in (second, first, third):
        add_to_wishlist(session_id="s1", product_id=product.id)

    wishlist = get_wishlist_for_session(session_id="s1")
    assert wishlist_product_ids(wishlist=wishlist) == [second.id, first.id, third.id]


@pytest.mark.django_db
def test_remove_absent_product_is_a_noop():
    product = ProductFactory()

    assert remove_from_wishlist(session_id="s1", product_id=product.id) is False
    assert get_wishlist_count(session_id="s1") == 0


@pytest.mark.django_db
def test_toggle_flips_membership():
    product = ProductFactory()

    assert toggle_wishlist(session_id="s1", product_id=product.id) is True
    assert is_in_wishlist(session_id="s1", product_id=product.id)
    assert toggle_wishlist(session_id="s1", product_id=product.id) is False
    assert not is_in_wishlist(session_id="s1", product_id=product.id)


@pytest.mark.django_db
def test_unknown_or_inactive_product_is_rejected():
    hidden = ProductFactory(is_active=False)

    with pytest.raises(WishlistError) as exc:
        add_to_wishlist(session_id="s1", product_id=hidden.id)
    assert exc.value.status_code == 404
    with pytest.raises(WishlistError):
        toggle_wishlist(session_id="s1", product_id=999999)
    assert get_wishlist_count(session_id="s1") == 0


@pytest.mark.django_db
def test_sessions_are_isolated_and_clear_only_touches_own_list():
    product = ProductFactory()
    add_to_wishlist(session_id="s1", product_id=product.id)
    add_to_wishlist(session_id="s2", product_id=product.id)

    clear_wishlist(session_id="s1")

    assert get_wishlist_count(session_id="s1") == 0
    assert is_in_wishlist(session_id="s2", product_id=product.id)


@pytest.mark.django_db
def test_deactivated_products_stay_saved_but_are_not_listed():
    product = ProductFactory()
    add_to_wishlist(session_id="s1", product_id=product.id)
    product.is_active = False
    product.save(update_fields=["is_active"])

    wishlist = get_wishlist_for_session(session_id="s1")
    assert wishlist_product_ids(wishlist=wishlist) == [product.id]
    assert wishlist_products(wishlist=wishlist) == []


@pytest.mark.django_db
def test_duplicate_entry_is_rejected_by_the_database():
    wishlist = WishlistFactory()
    item = WishlistItemFactory(wishlist=wishlist)

    with pytest.raises(IntegrityError):
        WishlistItem.objects.create(wishlist=wishlist, product=item.product)
