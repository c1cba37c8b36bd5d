# utils/formatting.py
import os
from decimal import Decimal, ROUND_HALF_UP

CURRENCY = os.getenv("CURRENCY", "FCFA")

CENT = Decimal("0.01")


def to_decimal(value) -> Decimal:
     """Coerce a Numeric column value (Decimal, int, float or None) to Decimal."""
     if value is None:
          return Decimal("0")
     if isinstance(value, Decimal):
          return value
     return Decimal(str(value))


def quantize_money(value: Decimal) -> Decimal:
     return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(amount, currency: str = CURRENCY) -> str:
     """100000 -> '100,000 FCFA'; cents are kept only when non-zero."""
     text = f"{quantize_money(amount):,.2f}"
     if text.endswith(".00"):
          text = text[:-3]
     return f"{text} {currency}"
