"""
Dashboard figures, recomputed from the current snapshots on every read.
"""

from typing import Iterable

from glacier.currency import format_money
from glacier.models import DashboardSummary, Product, Sale
from glacier.store import Shop

LOW_STOCK_THRESHOLD = 10


def total_revenue(sales: Iterable[Sale]) -> float:
    return sum((s.total for s in sales), 0.0)


def total_sales_count(sales: Iterable[Sale]) -> int:
    return sum(1 for _ in sales)


def stock_value(products: Iterable[Product]) -> float:
    return sum((p.price * p.stock for p in products), 0.0)


def low_stock_products(products: Iterable[Product]) -> list[Product]:
    return [p for p in products if p.stock <= LOW_STOCK_THRESHOLD]


def sale_matches(sale: Sale, query: str) -> bool:
    if not query:
        return True
    q = query.lower()
    if any(q in (item.name or "").lower() for item in sale.items):
        return True
    return q in sale.payment_method.value.lower()


def filter_sales(sales: Iterable[Sale], query: str) -> list[Sale]:
    return [s for s in sales if sale_matches(s, query)]


def summarize(shop: Shop) -> DashboardSummary:
    sales = shop.sales.snapshot()
    products = shop.catalog.snapshot()
    revenue = total_revenue(sales)
    value = stock_value(products)
    return DashboardSummary(
        total_revenue=revenue,
        total_revenue_display=format_money(revenue),
        total_sales_count=total_sales_count(sales),
        stock_value=value,
        stock_value_display=format_money(value),
        low_stock=low_stock_products(products),
    )
