"""
Deterministic demo-data generator.

Produces, through the regular store operations:
  - 40 sales of 1-3 lines each against the current catalog
    - ~60 % cash, the rest spread over card / mobile money / transfer
    - ~1 in 3 with a named customer
  - 6 expenses (supplies, rent, electricity)

Run against the configured data directory with ``python -m scripts.seed_data``.
"""

import logging
import random

from glacier.cart import Cart
from glacier.config import Settings, configure_logging
from glacier.engine import checkout
from glacier.models import PaymentMethod
from glacier.store import Shop

SEED = 42
N_SALES = 40

CUSTOMER_NAMES = ["Amina", "Lucas", "Chloé", "Kofi", "Sofia", "Mehdi"]
EXPENSES = [
    ("Cones and cups", 42.80),
    ("Milk delivery", 65.00),
    ("Stall rent", 250.00),
    ("Electricity", 38.45),
    ("Cream delivery", 71.20),
    ("Napkins", 9.90),
]

logger = logging.getLogger(__name__)


def seed(shop: Shop, n_sales: int = N_SALES) -> int:
    """Record demo sales and expenses. Returns the number of sales recorded."""
    rng = random.Random(SEED)
    methods = [PaymentMethod.CASH] * 6 + [
        PaymentMethod.CARD,
        PaymentMethod.CARD,
        PaymentMethod.MOBILE_MONEY,
        PaymentMethod.TRANSFER,
    ]

    recorded = 0
    for _ in range(n_sales):
        in_stock = [p for p in shop.catalog if p.stock > 0]
        if not in_stock:
            break
        cart = Cart()
        for product in rng.sample(in_stock, k=min(len(in_stock), rng.randint(1, 3))):
            cart.add(product)
            cart.set_quantity(product.id, rng.randint(1, 4))

        name = rng.choice(CUSTOMER_NAMES) if rng.random() < 0.33 else None
        phone = f"+33 6 {rng.randint(10_000_000, 99_999_999)}" if name else None
        checkout(shop, cart, name, phone, rng.choice(methods))
        recorded += 1

    for description, amount in EXPENSES:
        shop.expenses.add_expense(description, amount)

    logger.info("Seeded %d demo sales and %d expenses", recorded, len(EXPENSES))
    return recorded


if __name__ == "__main__":
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    seed(Shop(settings.open_storage()))
