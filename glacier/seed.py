from glacier.models import Product

# Catalog used on first run and after a reset.
DEFAULT_PRODUCTS = (
    ("P-001", "Vanilla", 1.50, 100),
    ("P-002", "Chocolate", 1.70, 80),
    ("P-003", "Strawberry", 1.60, 60),
)


def default_catalog() -> list[Product]:
    return [
        Product(id=pid, name=name, price=price, stock=stock)
        for pid, name, price, stock in DEFAULT_PRODUCTS
    ]
