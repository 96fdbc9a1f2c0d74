from decimal import ROUND_HALF_UP, Decimal

CURRENCY_SYMBOL = "€"
_TWO_DP = Decimal("0.01")


def round_money(amount: float) -> Decimal:
    """Display rounding only; stored totals keep full float precision."""
    return Decimal(str(amount)).quantize(_TWO_DP, rounding=ROUND_HALF_UP)


def format_money(amount: float) -> str:
    return f"{CURRENCY_SYMBOL}{round_money(amount)}"
