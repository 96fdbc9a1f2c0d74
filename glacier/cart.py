import threading
from typing import Optional

from glacier.models import CartLine, Product, SaleItem


class Cart:
    """In-progress sale. Never persisted."""

    def __init__(self) -> None:
        self._lines: list[CartLine] = []
        self.lock = threading.RLock()

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def add(self, product: Optional[Product]) -> Optional[CartLine]:
        """Add one unit of ``product``, merging into its existing line."""
        if product is None or product.stock <= 0:
            return None

        with self.lock:
            for i, line in enumerate(self._lines):
                if line.product_id == product.id:
                    bumped = line.model_copy(update={"quantity": line.quantity + 1})
                    self._lines[i] = bumped
                    return bumped

            line = CartLine(product_id=product.id, name=product.name, price=product.price, quantity=1)
            self._lines.append(line)
            return line

    def set_quantity(self, product_id: str, quantity: int) -> Optional[CartLine]:
        with self.lock:
            if quantity <= 0:
                self._lines = [line for line in self._lines if line.product_id != product_id]
                return None
            for i, line in enumerate(self._lines):
                if line.product_id == product_id:
                    self._lines[i] = line.model_copy(update={"quantity": quantity})
                    return self._lines[i]
            return None

    def total(self) -> float:
        return sum((line.price * line.quantity for line in self._lines), 0.0)

    def to_sale_items(self) -> list[SaleItem]:
        with self.lock:
            return [SaleItem(**line.model_dump()) for line in self._lines]

    def clear(self) -> None:
        with self.lock:
            self._lines = []
