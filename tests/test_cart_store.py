"""
Unit tests del CartStore: reconciliación de stock entre carritos y catálogo.
"""
import pytest

from retail_store.cart_store import CartStore
from retail_store.data import ProductCatalog
from retail_store.errors import NotFoundError, ValidationError


def _stock(catalog: ProductCatalog, product_id: int) -> int:
    return catalog.get_product(product_id).stock


class TestLazyCart:

    def test_view_creates_empty_cart(self, carts: CartStore):
        assert not carts.has_cart("u1")

        view = carts.view_cart("u1")

        assert view == {"items": [], "total": 0}
        assert carts.has_cart("u1")

    def test_get_or_create_returns_same_cart(self, carts: CartStore):
        first = carts.get_or_create("u1")
        second = carts.get_or_create("u1")
        assert first is second

    def test_total_is_rounded_to_two_decimals(self, carts: CartStore):
        carts.add_item("u1", 1, 3)  # 3 * 29.99 = 89.97000000000001
        carts.add_item("u1", 2, 1)

        assert carts.view_cart("u1")["total"] == 129.96

    def test_total_rounds_ties_up(self, carts: CartStore, catalog: ProductCatalog):
        product = catalog.create_product("Eighth", 0.125, 5)
        carts.add_item("u1", product.id, 1)

        assert carts.view_cart("u1")["total"] == 0.13


class TestAddItem:

    def test_add_decrements_stock(self, carts: CartStore, catalog: ProductCatalog):
        cart = carts.add_item("u1", 1, 3)

        assert _stock(catalog, 1) == 7
        assert len(cart) == 1
        assert cart[0].product_id == 1
        assert cart[0].name == "Product 1"
        assert cart[0].price == 29.99
        assert cart[0].quantity == 3

    def test_default_quantity_is_one(self, carts: CartStore, catalog: ProductCatalog):
        cart = carts.add_item("u1", 2)
        assert cart[0].quantity == 1
        assert _stock(catalog, 2) == 4

    def test_repeated_add_merges_line(self, carts: CartStore, catalog: ProductCatalog):
        carts.add_item("u1", 1, 2)
        cart = carts.add_item("u1", 1, 3)

        assert len(cart) == 1
        assert cart[0].quantity == 5
        assert _stock(catalog, 1) == 5

    def test_merge_keeps_price_snapshot(self, carts: CartStore, catalog: ProductCatalog):
        carts.add_item("u1", 1, 1)
        catalog.update_product(1, price=99.0, name="Renamed")

        cart = carts.add_item("u1", 1, 1)

        assert cart[0].price == 29.99
        assert cart[0].name == "Product 1"

    def test_missing_product_id(self, carts: CartStore):
        with pytest.raises(ValidationError, match="ProductId is required"):
            carts.add_item("u1", None)

    def test_non_positive_quantity(self, carts: CartStore, catalog: ProductCatalog):
        with pytest.raises(ValidationError):
            carts.add_item("u1", 1, 0)
        assert _stock(catalog, 1) == 10

    def test_unknown_product(self, carts: CartStore):
        with pytest.raises(NotFoundError, match="Product not found"):
            carts.add_item("u1", 42, 1)

    def test_unknown_product_wins_over_bad_quantity(self, carts: CartStore):
        with pytest.raises(NotFoundError, match="Product not found"):
            carts.add_item("u1", 42, 0)

    def test_over_stock_leaves_state_untouched(self, carts: CartStore, catalog: ProductCatalog):
        carts.add_item("u1", 2, 2)

        with pytest.raises(ValidationError, match="Insufficient stock"):
            carts.add_item("u1", 2, 4)

        assert _stock(catalog, 2) == 3
        assert carts.view_cart("u1")["items"][0].quantity == 2

    def test_failed_add_does_not_create_cart(self, carts: CartStore):
        with pytest.raises(ValidationError):
            carts.add_item("u1", 1, 11)
        assert not carts.has_cart("u1")

    def test_whole_stock_can_be_taken(self, carts: CartStore, catalog: ProductCatalog):
        carts.add_item("u1", 2, 5)
        assert _stock(catalog, 2) == 0


class TestUpdateItem:

    def test_increase_consumes_stock(self, carts: CartStore, catalog: ProductCatalog):
        carts.add_item("u1", 1, 3)
        cart = carts.update_item("u1", 1, 5)

        assert cart[0].quantity == 5
        assert _stock(catalog, 1) == 5

    def test_decrease_releases_stock(self, carts: CartStore, catalog: ProductCatalog):
        carts.add_item("u1", 1, 6)
        carts.update_item("u1", 1, 2)
        assert _stock(catalog, 1) == 8

    def test_diff_over_stock_fails(self, carts: CartStore, catalog: ProductCatalog):
        carts.add_item("u1", 2, 3)

        with pytest.raises(ValidationError, match="Insufficient stock"):
            carts.update_item("u1", 2, 6)  # diff 3 > stock 2

        assert _stock(catalog, 2) == 2
        assert carts.view_cart("u1")["items"][0].quantity == 3

    def test_diff_equal_to_stock_succeeds(self, carts: CartStore, catalog: ProductCatalog):
        carts.add_item("u1", 2, 3)
        carts.update_item("u1", 2, 5)
        assert _stock(catalog, 2) == 0

    def test_zero_quantity_is_kept_in_cart(self, carts: CartStore, catalog: ProductCatalog):
        carts.add_item("u1", 1, 4)
        cart = carts.update_item("u1", 1, 0)

        assert cart[0].quantity == 0
        assert _stock(catalog, 1) == 10

    def test_negative_quantity_is_accepted(self, carts: CartStore, catalog: ProductCatalog):
        carts.add_item("u1", 1, 1)
        cart = carts.update_item("u1", 1, -2)

        assert cart[0].quantity == -2
        assert _stock(catalog, 1) == 12

    def test_no_cart(self, carts: CartStore):
        with pytest.raises(NotFoundError, match="Cart not found"):
            carts.update_item("ghost", 1, 1)

    def test_product_not_in_cart(self, carts: CartStore):
        carts.add_item("u1", 1, 1)
        with pytest.raises(NotFoundError, match="Product not found in cart"):
            carts.update_item("u1", 2, 1)


class TestRemoveItem:

    def test_remove_releases_full_quantity(self, carts: CartStore, catalog: ProductCatalog):
        carts.add_item("u1", 1, 4)
        carts.add_item("u1", 3, 1)

        cart = carts.remove_item("u1", 1)

        assert [item.product_id for item in cart] == [3]
        assert _stock(catalog, 1) == 10

    def test_remove_then_readd_round_trip(self, carts: CartStore, catalog: ProductCatalog):
        carts.add_item("u1", 3, 2)
        before = _stock(catalog, 3)

        carts.remove_item("u1", 3)
        carts.add_item("u1", 3, 2)

        assert _stock(catalog, 3) == before

    def test_no_cart(self, carts: CartStore):
        with pytest.raises(NotFoundError, match="Cart not found"):
            carts.remove_item("ghost", 1)

    def test_product_not_in_cart(self, carts: CartStore):
        carts.view_cart("u1")
        with pytest.raises(NotFoundError, match="Product not found in cart"):
            carts.remove_item("u1", 1)

    def test_deleted_product_is_removed_without_stock(self, carts: CartStore, catalog: ProductCatalog):
        carts.add_item("u1", 3, 1)
        catalog.delete_product(3)

        assert carts.remove_item("u1", 3) == []


class TestClearCart:

    def test_clear_restores_all_stock(self, carts: CartStore, catalog: ProductCatalog):
        carts.add_item("u1", 1, 3)
        carts.add_item("u1", 2, 2)
        carts.add_item("u1", 3, 8)

        assert carts.clear_cart("u1") == []

        assert _stock(catalog, 1) == 10
        assert _stock(catalog, 2) == 5
        assert _stock(catalog, 3) == 8
        assert carts.view_cart("u1")["items"] == []

    def test_clear_keeps_other_carts_reserved(self, carts: CartStore, catalog: ProductCatalog):
        carts.add_item("u1", 1, 3)
        carts.add_item("u2", 1, 4)

        carts.clear_cart("u1")

        assert _stock(catalog, 1) == 6
        assert carts.view_cart("u2")["items"][0].quantity == 4

    def test_no_cart(self, carts: CartStore):
        with pytest.raises(NotFoundError, match="Cart not found"):
            carts.clear_cart("ghost")

    def test_clear_empty_cart(self, carts: CartStore):
        carts.view_cart("u1")
        assert carts.clear_cart("u1") == []


def test_add_update_remove_walkthrough(carts: CartStore, catalog: ProductCatalog):
    carts.add_item("u1", 1, 3)
    assert _stock(catalog, 1) == 7

    cart = carts.update_item("u1", 1, 5)
    assert cart[0].quantity == 5
    assert _stock(catalog, 1) == 5

    assert carts.remove_item("u1", 1) == []
    assert _stock(catalog, 1) == 10


def test_returned_cart_is_a_snapshot(carts: CartStore):
    cart = carts.add_item("u1", 1, 1)
    cart[0].quantity = 100

    assert carts.view_cart("u1")["items"][0].quantity == 1


def test_concurrent_adds_never_oversell(carts: CartStore, catalog: ProductCatalog):
    from concurrent.futures import ThreadPoolExecutor

    def add(i):
        try:
            carts.add_item(f"u{i}", 1, 1)
            return True
        except ValidationError:
            return False

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(add, range(40)))

    assert results.count(True) == 10
    assert _stock(catalog, 1) == 0
