from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse

from glacier.cart import Cart
from glacier.config import Settings, configure_logging
from glacier.currency import format_money
from glacier.dashboard import filter_sales, summarize
from glacier.engine import EmptyCartError, checkout
from glacier.export import to_csv
from glacier.models import (
    CartAdd,
    CartQuantity,
    CartView,
    CheckoutIn,
    CustomerIn,
    ExpenseIn,
    ProductIn,
    ProductPatch,
)
from glacier.store import Shop


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    shop = Shop(settings.open_storage())
    if settings.seed_demo and len(shop.sales) == 0:
        from scripts.seed_data import seed
        seed(shop)
    app.state.shop = shop
    app.state.cart = Cart()
    yield


app = FastAPI(
    title="Glacier POS",
    version="1.0.0",
    description="Point of sale and stock tracker for a single ice-cream shop",
    lifespan=lifespan,
)


def get_shop(request: Request) -> Shop:
    return request.app.state.shop


def get_cart(request: Request) -> Cart:
    return request.app.state.cart


def _cart_view(cart: Cart) -> dict:
    total = cart.total()
    return CartView(lines=cart.lines, total=total, total_display=format_money(total)).model_dump()


# ── Products ─────────────────────────────────────────────────────────────────

@app.get("/api/v1/products", summary="List the catalog")
def list_products(shop: Shop = Depends(get_shop)):
    return {"products": [p.model_dump() for p in shop.catalog]}


@app.post("/api/v1/products", status_code=201, summary="Add a product")
def add_product(payload: ProductIn, shop: Shop = Depends(get_shop)):
    product = shop.catalog.add_product(payload.name, payload.price, payload.stock)
    return product.model_dump()


@app.patch("/api/v1/products/{product_id}", summary="Update name, price or stock")
def update_product(product_id: str, payload: ProductPatch, shop: Shop = Depends(get_shop)):
    product = shop.catalog.update_product(product_id, payload.model_dump(exclude_none=True))
    if product is None:
        raise HTTPException(404, f"Product '{product_id}' not found")
    return product.model_dump()


@app.delete("/api/v1/products/{product_id}", summary="Delete a product")
def delete_product(
    product_id: str,
    confirm: bool = Query(False, description="Must be true to delete"),
    shop: Shop = Depends(get_shop),
):
    if not confirm:
        raise HTTPException(400, "Deletion must be confirmed with confirm=true")
    if not shop.catalog.delete_product(product_id):
        raise HTTPException(404, f"Product '{product_id}' not found")
    return {"status": "deleted", "id": product_id}


# ── Customers ────────────────────────────────────────────────────────────────

@app.get("/api/v1/customers", summary="List customers")
def list_customers(shop: Shop = Depends(get_shop)):
    return {"customers": [c.model_dump() for c in shop.customers]}


@app.post("/api/v1/customers", status_code=201, summary="Add a customer")
def add_customer(payload: CustomerIn, shop: Shop = Depends(get_shop)):
    return shop.customers.add_customer(payload.name, payload.phone).model_dump()


# ── Cart / checkout ──────────────────────────────────────────────────────────

@app.get("/api/v1/cart", summary="Current cart")
def get_cart_view(cart: Cart = Depends(get_cart)):
    return _cart_view(cart)


@app.post("/api/v1/cart/items", summary="Add one unit of a product to the cart")
def add_to_cart(payload: CartAdd, shop: Shop = Depends(get_shop), cart: Cart = Depends(get_cart)):
    product = shop.catalog.get(payload.product_id)
    if product is None:
        raise HTTPException(404, f"Product '{payload.product_id}' not found")
    if cart.add(product) is None:
        raise HTTPException(400, f"Product '{product.name}' is out of stock")
    return _cart_view(cart)


@app.put("/api/v1/cart/items/{product_id}", summary="Set a cart line's quantity")
def set_cart_quantity(product_id: str, payload: CartQuantity, cart: Cart = Depends(get_cart)):
    cart.set_quantity(product_id, payload.quantity)
    return _cart_view(cart)


@app.post("/api/v1/cart/checkout", status_code=201, summary="Turn the cart into a sale")
def checkout_cart(payload: CheckoutIn, shop: Shop = Depends(get_shop), cart: Cart = Depends(get_cart)):
    try:
        sale = checkout(
            shop,
            cart,
            customer_name=payload.customer_name,
            customer_phone=payload.customer_phone,
            payment_method=payload.payment_method,
            note=payload.note,
        )
    except EmptyCartError as exc:
        raise HTTPException(400, str(exc))
    return sale.model_dump()


# ── Sales / expenses ─────────────────────────────────────────────────────────

@app.get("/api/v1/sales", summary="Sales history, newest first")
def list_sales(
    q: str = Query("", description="Filter by product name or payment method"),
    shop: Shop = Depends(get_shop),
):
    return {"sales": [s.model_dump() for s in filter_sales(shop.sales, q)]}


@app.get("/api/v1/expenses", summary="Expenses, newest first")
def list_expenses(shop: Shop = Depends(get_shop)):
    return {"expenses": [e.model_dump() for e in shop.expenses]}


@app.post("/api/v1/expenses", status_code=201, summary="Record an expense")
def add_expense(payload: ExpenseIn, shop: Shop = Depends(get_shop)):
    return shop.expenses.add_expense(payload.description, payload.amount).model_dump()


@app.get("/api/v1/dashboard", summary="Revenue, sales count, stock value and low stock")
def dashboard(shop: Shop = Depends(get_shop)):
    return summarize(shop).model_dump()


# ── Export ───────────────────────────────────────────────────────────────────

@app.get("/api/v1/export/products.csv", response_class=PlainTextResponse)
def export_products(shop: Shop = Depends(get_shop)):
    return PlainTextResponse(to_csv(shop.catalog), media_type="text/csv")


@app.get("/api/v1/export/sales.csv", response_class=PlainTextResponse)
def export_sales(shop: Shop = Depends(get_shop)):
    return PlainTextResponse(to_csv(shop.sales), media_type="text/csv")


# ── Admin ────────────────────────────────────────────────────────────────────

@app.post("/api/v1/admin/reset", summary="Erase all data and restore the seed catalog")
def reset(
    confirm: bool = Query(False, description="Must be true to reset"),
    shop: Shop = Depends(get_shop),
    cart: Cart = Depends(get_cart),
):
    if not shop.reset(confirm):
        raise HTTPException(400, "Reset must be confirmed with confirm=true")
    cart.clear()
    return {"status": "reset", "products": len(shop.catalog)}


@app.post("/api/v1/admin/seed", summary="Record demo sales and expenses")
def reseed(shop: Shop = Depends(get_shop)):
    from scripts.seed_data import seed
    recorded = seed(shop)
    return {
        "status": "seeded",
        "sales": recorded,
        "expenses": len(shop.expenses),
    }


def run() -> None:
    """Serve the API with uvicorn (``glacier-pos`` or ``python -m glacier.main``)."""
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
