"""Format a :class:`StatisticsReport` into its flat, display-ready shape.

Currency values become strings in major units rounded to two decimals
(``ROUND_HALF_UP``). Rounding happens once, on the exact minor-unit value.
Dates become locale date strings.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction
from typing import Any

from .config import DEFAULT_LOCALE
from .models import OrderRecord, StatisticsReport

_CENT = Decimal("0.01")


def _two_decimals(value: Decimal) -> str:
    return str(value.quantize(_CENT, rounding=ROUND_HALF_UP))


def to_major_units(minor: int | Fraction) -> str:
    """``1234`` → ``"12.34"``; exact fractions are rounded only at the end."""

    frac = Fraction(minor)
    return _two_decimals(Decimal(frac.numerator) / Decimal(frac.denominator * 100))


def format_ratio(value: Fraction) -> str:
    return _two_decimals(Decimal(value.numerator) / Decimal(value.denominator))


def format_date(dt: datetime, locale: str = DEFAULT_LOCALE, *, tz: tzinfo | None = None) -> str:
    """Render a calendar date the way the locale writes it.

    ``pt-BR`` → ``DD/MM/YYYY``; ``en-US`` → ``M/D/YYYY``; anything else falls
    back to ISO ``YYYY-MM-DD``.
    """

    if tz is not None and dt.tzinfo is not None:
        dt = dt.astimezone(tz)
    key = locale.strip().replace("_", "-").lower()
    if key == "pt-br":
        return f"{dt.day:02d}/{dt.month:02d}/{dt.year:04d}"
    if key == "en-us":
        return f"{dt.month}/{dt.day}/{dt.year:04d}"
    return dt.date().isoformat()


def _order_summary(order: OrderRecord, locale: str, tz: tzinfo | None) -> dict[str, str]:
    return {"value": to_major_units(order.value), "date": format_date(order.created_at, locale, tz=tz)}


def format_report(
    report: StatisticsReport, *, locale: str = DEFAULT_LOCALE, tz: tzinfo | None = None
) -> dict[str, Any]:
    """Return the flat output mapping (camelCase keys, JSON-serializable)."""

    return {
        "year": report.target_year,
        "totalSpent": to_major_units(report.total_spent),
        "numberOfOrders": report.number_of_orders,
        "averagePerOrder": to_major_units(report.average_per_order),
        "mostExpensive": _order_summary(report.most_expensive, locale, tz),
        "cheapest": _order_summary(report.cheapest, locale, tz),
        "ordersByMonth": {str(m): c for m, c in report.orders_by_month.items()},
        "averageOrdersPerMonth": format_ratio(report.average_orders_per_month),
        "monthWithMostOrders": {
            "month": report.month_with_most_orders.month,
            "count": report.month_with_most_orders.count,
        },
        "monthWithLeastOrders": {
            "month": report.month_with_least_orders.month,
            "count": report.month_with_least_orders.count,
        },
        "averageDailySpending": to_major_units(report.average_daily_spending),
    }


__all__ = ["format_date", "format_ratio", "format_report", "to_major_units"]
