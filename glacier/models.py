from pydantic import BaseModel, Field
from enum import Enum
from datetime import datetime
from typing import Optional


class PaymentMethod(str, Enum):
    CASH = "Cash"
    CARD = "Card"
    MOBILE_MONEY = "Mobile Money"
    TRANSFER = "Transfer"


class Product(BaseModel):
    id: str
    name: str
    price: float = Field(ge=0)
    stock: int = Field(ge=0)


class Customer(BaseModel):
    id: str
    name: str
    phone: Optional[str] = None


class CartLine(BaseModel):
    product_id: str  # reference into the catalog, not owning
    name: str
    price: float = Field(ge=0)  # copied when the line was first added
    quantity: int = Field(gt=0)


class SaleItem(BaseModel):
    """Frozen copy of a cart line, decoupled from later catalog edits."""

    product_id: str
    name: str
    price: float = Field(ge=0)
    quantity: int = Field(gt=0)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class Sale(BaseModel):
    id: str
    date: datetime
    items: list[SaleItem]
    total: float
    customer_id: Optional[str] = None
    payment_method: PaymentMethod
    note: Optional[str] = None


class Expense(BaseModel):
    id: str
    date: datetime
    description: str
    amount: float


# ── Request models ───────────────────────────────────────────────────────────

class ProductIn(BaseModel):
    name: str = Field(..., min_length=1)
    price: float = Field(0.0, ge=0)
    stock: int = Field(0, ge=0)


class ProductPatch(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)


class CustomerIn(BaseModel):
    name: str = Field(..., min_length=1)
    phone: Optional[str] = None


class CartAdd(BaseModel):
    product_id: str


class CartQuantity(BaseModel):
    quantity: int


class CheckoutIn(BaseModel):
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    payment_method: PaymentMethod = PaymentMethod.CASH
    note: Optional[str] = None


class ExpenseIn(BaseModel):
    description: str = Field(..., min_length=1)
    amount: float


# ── Response models ──────────────────────────────────────────────────────────

class CartView(BaseModel):
    lines: list[CartLine]
    total: float
    total_display: str


class DashboardSummary(BaseModel):
    total_revenue: float
    total_revenue_display: str
    total_sales_count: int
    stock_value: float
    stock_value_display: str
    low_stock: list[Product]
