import json
import logging
import threading
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Callable, Generic, Iterable, Iterator, Mapping, Optional, TypeVar

from pydantic import BaseModel

from glacier.ids import IdGenerator, UuidIdGenerator
from glacier.models import Customer, Expense, Product, Sale, SaleItem
from glacier.seed import default_catalog
from glacier.storage import (
    CUSTOMERS_KEY,
    EXPENSES_KEY,
    PRODUCTS_KEY,
    SALES_KEY,
    CorruptSnapshotError,
    KeyValueStorage,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
M = TypeVar("M", bound=BaseModel)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SnapshotStore(Generic[M]):
    """
    Owns one ordered collection. Every mutation replaces the whole list and
    persists it under ``key``.
    """

    key: str
    model: type[M]

    def __init__(
        self,
        storage: KeyValueStorage,
        ids: IdGenerator,
        clock: Clock,
        lock=None,
    ) -> None:
        self._storage = storage
        self._ids = ids
        self._clock = clock
        self._lock = lock or threading.RLock()
        self._records: list[M] = []
        self.reload()

    def _initial(self) -> list[M]:
        return []

    # ── persistence ───────────────────────────────────────────────────────────

    def reload(self) -> None:
        with self._lock:
            self._records = self._load()

    def _load(self) -> list[M]:
        try:
            raw = self._storage.get(self.key)
            if raw is None:
                return self._initial()
            return [self.model.model_validate(r) for r in json.loads(raw)]
        except (ValueError, TypeError) as exc:
            # covers UnicodeDecodeError, JSONDecodeError and ValidationError
            logger.error("Cannot load '%s' snapshot: %s", self.key, exc)
            raise CorruptSnapshotError(self.key, str(exc)) from exc

    def _replace(self, records: list[M]) -> None:
        # callers hold self._lock; memory only changes once the write succeeded
        payload = json.dumps([r.model_dump(mode="json") for r in records])
        self._storage.set(self.key, payload)
        self._records = records
        logger.debug("Persisted %d %s", len(records), self.key)

    # ── reads ─────────────────────────────────────────────────────────────────

    def snapshot(self) -> list[M]:
        return list(self._records)

    def __iter__(self) -> Iterator[M]:
        return iter(list(self._records))

    def __len__(self) -> int:
        return len(self._records)


class CatalogStore(SnapshotStore[Product]):
    key = PRODUCTS_KEY
    model = Product

    def _initial(self) -> list[Product]:
        return default_catalog()

    def get(self, product_id: str) -> Optional[Product]:
        return next((p for p in self._records if p.id == product_id), None)

    def add_product(self, name: Optional[str], price: Optional[float], stock: Optional[int]) -> Optional[Product]:
        if name is None or price is None or stock is None:
            return None
        with self._lock:
            product = Product(id=self._ids("P"), name=name, price=price, stock=stock)
            self._replace([*self._records, product])
        logger.info("Added product %s (%s)", product.id, product.name)
        return product

    def update_product(self, product_id: str, fields: Mapping[str, Any]) -> Optional[Product]:
        """Shallow-merge ``fields`` onto the product. The id itself cannot change."""
        with self._lock:
            current = self.get(product_id)
            if current is None:
                return None
            patch = {k: v for k, v in fields.items() if k != "id"}
            updated = Product.model_validate({**current.model_dump(), **patch})
            self._replace([updated if p.id == product_id else p for p in self._records])
        return updated

    def delete_product(self, product_id: str) -> bool:
        with self._lock:
            remaining = [p for p in self._records if p.id != product_id]
            if len(remaining) == len(self._records):
                return False
            self._replace(remaining)
        logger.info("Deleted product %s", product_id)
        return True

    def apply_sale_decrement(self, items: Iterable[SaleItem]) -> None:
        sold: dict[str, int] = defaultdict(int)
        for item in items:
            sold[item.product_id] += item.quantity

        with self._lock:
            if not any(p.id in sold for p in self._records):
                return
            # clamped at zero: overselling is allowed, negative stock is not
            self._replace([
                p.model_copy(update={"stock": max(0, p.stock - sold[p.id])}) if p.id in sold else p
                for p in self._records
            ])


class CustomerStore(SnapshotStore[Customer]):
    key = CUSTOMERS_KEY
    model = Customer

    def get(self, customer_id: str) -> Optional[Customer]:
        return next((c for c in self._records if c.id == customer_id), None)

    def add_customer(self, name: str, phone: Optional[str] = None) -> Customer:
        with self._lock:
            customer = Customer(id=self._ids("C"), name=name, phone=phone)
            self._replace([*self._records, customer])
        return customer


class SalesLedger(SnapshotStore[Sale]):
    """Completed sales, newest first."""

    key = SALES_KEY
    model = Sale

    def new_id(self) -> str:
        return self._ids("S")

    def now(self) -> datetime:
        return self._clock()

    def prepend(self, sale: Sale) -> None:
        with self._lock:
            self._replace([sale, *self._records])


class ExpenseLedger(SnapshotStore[Expense]):
    key = EXPENSES_KEY
    model = Expense

    def add_expense(self, description: str, amount: float) -> Expense:
        with self._lock:
            expense = Expense(
                id=self._ids("E"),
                date=self._clock(),
                description=description,
                amount=amount,
            )
            self._replace([expense, *self._records])
        logger.info("Recorded expense %s: %.2f", expense.id, expense.amount)
        return expense


class Shop:
    """
    The four stores of one shop, opened together from the same storage.

    ``lock`` is shared by all four stores; hold it to make several store
    operations one unit (a checkout touches catalog, customers and sales).
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        ids: Optional[IdGenerator] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.storage = storage
        self.ids = ids or UuidIdGenerator()
        self.clock = clock or utc_now
        self.lock = threading.RLock()
        self.catalog = CatalogStore(storage, self.ids, self.clock, self.lock)
        self.customers = CustomerStore(storage, self.ids, self.clock, self.lock)
        self.sales = SalesLedger(storage, self.ids, self.clock, self.lock)
        self.expenses = ExpenseLedger(storage, self.ids, self.clock, self.lock)

    def stores(self) -> tuple[SnapshotStore, ...]:
        return (self.catalog, self.customers, self.sales, self.expenses)

    def reset(self, confirmed: bool) -> bool:
        """Erase every persisted key and reload from the seeded state."""
        if not confirmed:
            return False
        with self.lock:
            self.storage.clear()
            for store in self.stores():
                store.reload()
        logger.warning("Shop data reset to the seed catalog")
        return True
