"""Data models and type aliases for ``order_analysis``.

Three layers:

- ``RawOrder``: pydantic model of one element of the orders API response. Only
  the fields the analysis reads are declared; everything else is tolerated.
- ``OrderRecord``: the normalized, immutable record the aggregator works on.
- ``StatisticsReport``: the read-only snapshot derived from one year's orders.

Monetary values are integers in minor currency units (100 = one major unit)
throughout. Averages are kept as exact :class:`~fractions.Fraction` values in
minor units; conversion to major units and rounding happens only when a report
is formatted (see :mod:`order_analysis.report`).
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from fractions import Fraction
from types import MappingProxyType
from typing import Any, NamedTuple, TypeAlias

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr, field_validator

# Lifecycle status of an order that was delivered and paid.
CONCLUDED_STATUS = "CONCLUDED"

# ---------------------------------------------------------------------------
# API-shaped input
# ---------------------------------------------------------------------------


class _Amount(BaseModel):
    model_config = ConfigDict(extra="allow")
    value: StrictInt


class _Payments(BaseModel):
    model_config = ConfigDict(extra="allow")
    total: _Amount


class RawOrder(BaseModel):
    """One order as returned by the orders history endpoint.

    Requires ``payments.total.value`` (integer minor units), ``createdAt``
    (ISO-8601 timestamp or date) and ``lastStatus``. Extra keys are allowed.
    """

    model_config = ConfigDict(extra="allow")

    payments: _Payments
    createdAt: datetime
    lastStatus: StrictStr

    @field_validator("createdAt", mode="before")
    @classmethod
    def _parse_timestamp(cls, v: Any) -> Any:
        # fromisoformat accepts date-only values and a trailing ``Z``.
        if isinstance(v, str):
            return datetime.fromisoformat(v.strip())
        return v


# ---------------------------------------------------------------------------
# Normalized records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OrderRecord:
    """A normalized order: total paid, creation time and last status."""

    value: int
    created_at: datetime
    last_status: str

    @classmethod
    def from_raw(cls, raw: RawOrder) -> OrderRecord:
        return cls(
            value=raw.payments.total.value,
            created_at=raw.createdAt,
            last_status=raw.lastStatus,
        )


Page: TypeAlias = Sequence[OrderRecord]
"""One batch of the paginated history, in the order the API returned it."""

PageFetcher: TypeAlias = Callable[[int], Page]
"""Fetch capability: zero-based page index in, that page's records out.

Contract: successive pages are in non-increasing ``created_at`` order, so the
first record older than the target year marks the end of the year.
"""


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


class MonthCount(NamedTuple):
    """A month number (1-12) and how many orders fell in it."""

    month: int
    count: int


@dataclass(frozen=True, slots=True)
class StatisticsReport:
    """Statistics for one target year's concluded orders.

    Attributes
    ----------
    target_year:
        The calendar year the orders were restricted to.
    total_spent:
        Sum of order values, minor units.
    number_of_orders:
        Count of included orders.
    average_per_order:
        ``total_spent / number_of_orders`` in minor units, exact.
    most_expensive / cheapest:
        First order (in fetch order) holding the maximum / minimum value.
    orders_by_month:
        Read-only month → count mapping in order of first occurrence. Months
        without orders are absent.
    average_orders_per_month:
        Mean count over the months present (not over 12).
    month_with_most_orders / month_with_least_orders:
        First month (in ``orders_by_month`` order) with the max / min count.
    average_daily_spending:
        ``total_spent / 365`` in minor units, exact.
    """

    target_year: int
    total_spent: int
    number_of_orders: int
    average_per_order: Fraction
    most_expensive: OrderRecord
    cheapest: OrderRecord
    orders_by_month: Mapping[int, int]
    average_orders_per_month: Fraction
    month_with_most_orders: MonthCount
    month_with_least_orders: MonthCount
    average_daily_spending: Fraction

    def __post_init__(self) -> None:
        # Freeze the month mapping so the snapshot can't be edited in place.
        if not isinstance(self.orders_by_month, MappingProxyType):
            object.__setattr__(
                self, "orders_by_month", MappingProxyType(dict(self.orders_by_month))
            )


__all__ = [
    "CONCLUDED_STATUS",
    "MonthCount",
    "OrderRecord",
    "Page",
    "PageFetcher",
    "RawOrder",
    "StatisticsReport",
]
