from datetime import datetime, timezone

import pytest

from glacier.currency import format_money, round_money
from glacier.dashboard import (
    filter_sales,
    low_stock_products,
    stock_value,
    summarize,
    total_revenue,
    total_sales_count,
)
from glacier.engine import create_sale
from glacier.ids import SequentialIdGenerator
from glacier.models import PaymentMethod, Product, Sale, SaleItem
from glacier.storage import InMemoryStorage
from glacier.store import Shop

NOW = datetime(2026, 7, 1, 12, 0, tzinfo=timezone.utc)


def sale(id, method, *lines):
    items = [SaleItem(product_id=f"P-{name}", name=name, price=price, quantity=qty) for name, price, qty in lines]
    return Sale(
        id=id,
        date=NOW,
        items=items,
        total=sum(i.price * i.quantity for i in items),
        payment_method=method,
    )


SALES = [
    sale("S-3", PaymentMethod.CARD, ("Chocolate", 1.70, 2)),
    sale("S-2", PaymentMethod.CASH, ("Vanilla", 1.50, 1), ("Strawberry", 1.60, 1)),
    sale("S-1", PaymentMethod.MOBILE_MONEY, ("Vanilla", 1.50, 4)),
]


class TestAggregates:
    def test_revenue_and_count(self):
        assert total_revenue(SALES) == pytest.approx(3.40 + 3.10 + 6.00)
        assert total_sales_count(SALES) == 3
        assert total_revenue([]) == 0.0

    def test_stock_value(self):
        products = [
            Product(id="a", name="A", price=1.50, stock=100),
            Product(id="b", name="B", price=2.00, stock=0),
        ]
        assert stock_value(products) == pytest.approx(150.0)

    def test_low_stock_threshold_is_inclusive(self):
        products = [
            Product(id="a", name="A", price=1, stock=11),
            Product(id="b", name="B", price=1, stock=10),
            Product(id="c", name="C", price=1, stock=0),
        ]
        assert [p.id for p in low_stock_products(products)] == ["b", "c"]


class TestHistoryFilter:
    def test_empty_filter_matches_all(self):
        assert filter_sales(SALES, "") == SALES

    def test_payment_method_case_insensitive(self):
        assert [s.id for s in filter_sales(SALES, "cash")] == ["S-2"]
        assert [s.id for s in filter_sales(SALES, "CASH")] == ["S-2"]

    def test_item_name_substring(self):
        assert [s.id for s in filter_sales(SALES, "vani")] == ["S-2", "S-1"]

    def test_matches_multi_word_payment_method(self):
        assert [s.id for s in filter_sales(SALES, "money")] == ["S-1"]

    def test_no_match(self):
        assert filter_sales(SALES, "pistachio") == []


class TestSummary:
    def test_summary_over_seeded_shop(self):
        shop = Shop(InMemoryStorage(), ids=SequentialIdGenerator(), clock=lambda: NOW)
        create_sale(shop, [SaleItem(product_id="P-003", name="Strawberry", price=1.60, quantity=55)])

        summary = summarize(shop)

        assert summary.total_sales_count == 1
        assert summary.total_revenue == pytest.approx(88.0)
        assert summary.total_revenue_display == "€88.00"
        assert summary.stock_value == pytest.approx(1.50 * 100 + 1.70 * 80 + 1.60 * 5)
        assert [p.name for p in summary.low_stock] == ["Strawberry"]


class TestMoneyFormatting:
    def test_two_decimal_places(self):
        assert format_money(4.5) == "€4.50"
        assert format_money(0) == "€0.00"
        assert str(round_money(1.005)) == "1.01"
