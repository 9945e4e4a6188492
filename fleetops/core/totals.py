"""
Derived totals for trip items and routes
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Optional

TWO_PLACES = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Coerce a number (or None) to Decimal without float artifacts"""
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def line_total(quantity: Any, rate: Any) -> Decimal:
    """Item total = quantity x rate, rounded to paise"""
    return (to_decimal(quantity) * to_decimal(rate)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def is_valid_item(customer_name: Optional[str], receiver_name: Optional[str]) -> bool:
    """Rows with neither a customer nor a receiver are blank form rows"""
    return bool((customer_name or "").strip() or (receiver_name or "").strip())


@dataclass
class RouteTotals:
    total_weight: Decimal
    total_fare: Decimal


def route_totals(items: Iterable[Any]) -> RouteTotals:
    """
    Sum weight and fare over items.
    Accepts ORM rows or schema objects exposing total_weight,
    total_quantity and fare_per_piece.
    """
    total_weight = Decimal("0")
    total_fare = Decimal("0")
    for item in items:
        total_weight += to_decimal(item.total_weight)
        total_fare += line_total(item.total_quantity, item.fare_per_piece)
    return RouteTotals(
        total_weight=total_weight.quantize(TWO_PLACES, rounding=ROUND_HALF_UP),
        total_fare=total_fare.quantize(TWO_PLACES, rounding=ROUND_HALF_UP),
    )
