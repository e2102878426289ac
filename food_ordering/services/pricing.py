"""
Pricing Engine

Pure computation of cart totals from cart lines:

    subtotal    = Σ (unit_price + Σ option prices) × qty   (no rounding)
    tax         = subtotal × tax_rate, rounded half-up to cents
    deliveryFee = flat fee when subtotal > 0, else 0
    total       = subtotal + tax + deliveryFee, rounded half-up to cents

Arithmetic runs on ``Decimal`` built from the string form of each float so
that half-up rounding behaves as written instead of following binary
floating point artefacts.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from food_ordering.models import CartLine, Totals

CENTS = Decimal("0.01")

DEFAULT_TAX_RATE = 0.09
DEFAULT_DELIVERY_FEE = 2.00


def _dec(value: float) -> Decimal:
    return Decimal(str(value))


def _round_cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def line_amount(line: CartLine) -> Decimal:
    """(unit price + option prices) × qty for a single line."""
    options = sum((_dec(o.price) for o in line.options), Decimal(0))
    return (_dec(line.unit_price) + options) * line.qty


def compute_totals(
    lines: Iterable[CartLine],
    tax_rate: float = DEFAULT_TAX_RATE,
    delivery_fee: float = DEFAULT_DELIVERY_FEE,
) -> Totals:
    """
    Compute the totals of a sequence of cart lines.

    Args:
        lines: Cart lines in any order
        tax_rate: Tax rate as decimal
        delivery_fee: Flat fee charged when the subtotal is positive

    Returns:
        Totals: All-zero for an empty sequence
    """
    subtotal = sum((line_amount(line) for line in lines), Decimal(0))
    tax = _round_cents(subtotal * _dec(tax_rate))
    fee = _dec(delivery_fee) if subtotal > 0 else Decimal(0)
    total = _round_cents(subtotal + tax + fee)

    return Totals(
        subtotal=float(subtotal),
        tax=float(tax),
        delivery_fee=float(fee),
        total=float(total),
    )
