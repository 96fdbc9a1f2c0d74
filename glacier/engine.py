import logging
from typing import Iterable, Optional, Union

from glacier.cart import Cart
from glacier.models import CartLine, PaymentMethod, Sale, SaleItem
from glacier.store import Shop

logger = logging.getLogger(__name__)


class EmptyCartError(ValueError):
    pass


def _as_sale_item(item: Union[SaleItem, CartLine, dict]) -> SaleItem:
    if isinstance(item, SaleItem):
        return item.model_copy()
    if isinstance(item, CartLine):
        return SaleItem(**item.model_dump())
    return SaleItem.model_validate(item)


def create_sale(
    shop: Shop,
    items: Iterable[Union[SaleItem, CartLine, dict]],
    customer_id: Optional[str] = None,
    payment_method: PaymentMethod = PaymentMethod.CASH,
    note: Optional[str] = None,
) -> Optional[Sale]:
    """
    Record a sale from the given line items.

    The total is computed from the prices carried by the items, never from
    the current catalog. Returns None (and changes nothing) for an empty
    item list.
    """
    lines = [_as_sale_item(i) for i in items]
    if not lines:
        return None

    total = sum((line.line_total for line in lines), 0.0)
    with shop.lock:
        sale = Sale(
            id=shop.sales.new_id(),
            date=shop.sales.now(),
            items=lines,
            total=total,
            customer_id=customer_id,
            payment_method=payment_method,
            note=note,
        )

        # stock first, then the ledger
        shop.catalog.apply_sale_decrement(sale.items)
        shop.sales.prepend(sale)
    logger.info("Recorded sale %s: %d line(s), total %.2f", sale.id, len(lines), total)
    return sale


def checkout(
    shop: Shop,
    cart: Cart,
    customer_name: Optional[str] = None,
    customer_phone: Optional[str] = None,
    payment_method: PaymentMethod = PaymentMethod.CASH,
    note: Optional[str] = None,
) -> Sale:
    with shop.lock, cart.lock:
        items = cart.to_sale_items()
        if not items:
            raise EmptyCartError("Cart is empty")

        # the customer must exist before the sale can reference it
        customer_id = None
        if customer_name:
            customer_id = shop.customers.add_customer(customer_name, customer_phone).id

        sale = create_sale(shop, items, customer_id, payment_method, note)
        cart.clear()
    return sale
