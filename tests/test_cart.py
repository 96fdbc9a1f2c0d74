import pytest

from glacier.cart import Cart
from glacier.models import Product

VANILLA = Product(id="P-001", name="Vanilla", price=1.50, stock=100)
MANGO = Product(id="P-010", name="Mango", price=2.00, stock=3)
SOLD_OUT = Product(id="P-011", name="Pistachio", price=2.20, stock=0)


class TestCartLines:
    def test_adding_same_product_twice_merges_lines(self):
        cart = Cart()
        cart.add(VANILLA)
        cart.add(VANILLA)
        assert len(cart) == 1
        assert cart.lines[0].quantity == 2

    def test_lines_keep_insertion_order(self):
        cart = Cart()
        cart.add(MANGO)
        cart.add(VANILLA)
        cart.add(MANGO)
        assert [line.product_id for line in cart.lines] == ["P-010", "P-001"]

    def test_sold_out_or_missing_product_is_not_added(self):
        cart = Cart()
        assert cart.add(SOLD_OUT) is None
        assert cart.add(None) is None
        assert len(cart) == 0

    def test_price_is_copied_at_add_time(self):
        cart = Cart()
        cart.add(VANILLA)
        assert cart.lines[0].price == 1.50
        assert cart.lines[0].name == "Vanilla"


class TestCartQuantities:
    def test_set_quantity(self):
        cart = Cart()
        cart.add(VANILLA)
        cart.set_quantity("P-001", 5)
        assert cart.lines[0].quantity == 5

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_zero_or_negative_quantity_removes_line(self, quantity):
        cart = Cart()
        cart.add(VANILLA)
        cart.add(MANGO)
        assert cart.set_quantity("P-001", quantity) is None
        assert [line.product_id for line in cart.lines] == ["P-010"]

    def test_set_quantity_on_unknown_line_is_a_no_op(self):
        cart = Cart()
        cart.add(VANILLA)
        assert cart.set_quantity("P-404", 3) is None
        assert len(cart) == 1

    def test_total_and_clear(self):
        cart = Cart()
        cart.add(VANILLA)
        cart.add(VANILLA)
        cart.add(MANGO)
        assert cart.total() == pytest.approx(5.00)
        cart.clear()
        assert cart.total() == 0.0
        assert cart.lines == []

    def test_to_sale_items_copies_lines(self):
        cart = Cart()
        cart.add(VANILLA)
        items = cart.to_sale_items()
        cart.set_quantity("P-001", 4)
        assert items[0].quantity == 1
