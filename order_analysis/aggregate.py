"""Year aggregation: paginate the order history and derive yearly statistics.

Public API:
    - :func:`analyze_year` (entry point for one analysis run)
    - :func:`collect_year_orders` (pagination loop over a fetch capability)
    - :func:`filter_year_orders` (year + concluded-status predicate)
    - :func:`compute_statistics` (report derivation)

Pagination relies on the fetcher returning orders newest first. The loop stops
after the first page containing an order older than the target year; that page
is still filtered before stopping. An empty page also stops the loop, which
covers accounts with no orders at all or none before the target year.

Ties are resolved first-encountered-wins in fetch order, both for the most and
least expensive order and for the busiest and quietest month.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime, tzinfo
from fractions import Fraction

from .client import OrdersClient
from .config import Settings
from .errors import AuthError, EmptyResultError
from .logging_setup import get_logger
from .models import (
    CONCLUDED_STATUS,
    MonthCount,
    OrderRecord,
    PageFetcher,
    StatisticsReport,
)

# Fixed divisor for the daily average (not leap-year aware, not year-to-date).
DAYS_IN_YEAR: int = 365

_logger = get_logger("order_analysis.aggregate")


def _local(dt: datetime, tz: tzinfo | None) -> datetime:
    # Naive timestamps are taken as already local.
    if tz is not None and dt.tzinfo is not None:
        return dt.astimezone(tz)
    return dt


def _is_year_order(record: OrderRecord, target_year: int, tz: tzinfo | None) -> bool:
    return (
        _local(record.created_at, tz).year == target_year
        and record.last_status == CONCLUDED_STATUS
    )


def filter_year_orders(
    records: Iterable[OrderRecord], target_year: int, *, tz: tzinfo | None = None
) -> list[OrderRecord]:
    """Keep concluded orders created in ``target_year``, preserving order."""

    return [r for r in records if _is_year_order(r, target_year, tz)]


def collect_year_orders(
    fetch_page: PageFetcher, target_year: int, *, tz: tzinfo | None = None
) -> list[OrderRecord]:
    """Fetch pages 0, 1, 2, ... and accumulate the target year's concluded orders.

    Stops after the first page holding an order from before ``target_year``,
    or at the first empty page. Pages are fetched strictly one at a time.
    Exceptions from ``fetch_page`` propagate and abort the run.
    """

    has_older_year_order = False
    accumulated: list[OrderRecord] = []
    page = 0

    while not has_older_year_order:
        records = fetch_page(page)
        if not records:
            _logger.debug("page=%d empty; no more orders", page)
            break

        if any(_local(r.created_at, tz).year < target_year for r in records):
            has_older_year_order = True

        kept = filter_year_orders(records, target_year, tz=tz)
        accumulated.extend(kept)
        _logger.debug(
            "page=%d records=%d kept=%d reached_older_year=%s",
            page,
            len(records),
            len(kept),
            has_older_year_order,
        )
        page += 1

    _logger.info(
        "collected %d concluded orders for %d across %d page(s)",
        len(accumulated),
        target_year,
        page,
    )
    return accumulated


def compute_statistics(
    orders: Sequence[OrderRecord],
    target_year: int | None = None,
    *,
    tz: tzinfo | None = None,
) -> StatisticsReport:
    """Derive a :class:`StatisticsReport` from a finalized yearly order set.

    Raises :class:`EmptyResultError` when ``orders`` is empty. When
    ``target_year`` is omitted it is taken from the first order.
    """

    if not orders:
        raise EmptyResultError(target_year)

    if target_year is None:
        target_year = _local(orders[0].created_at, tz).year

    total_spent = sum(o.value for o in orders)
    number_of_orders = len(orders)

    # max/min return the first extremal element, which gives fetch-order ties.
    most_expensive = max(orders, key=lambda o: o.value)
    cheapest = min(orders, key=lambda o: o.value)

    orders_by_month: dict[int, int] = {}
    for o in orders:
        month = _local(o.created_at, tz).month
        orders_by_month[month] = orders_by_month.get(month, 0) + 1

    busiest = max(orders_by_month.items(), key=lambda kv: kv[1])
    quietest = min(orders_by_month.items(), key=lambda kv: kv[1])

    return StatisticsReport(
        target_year=target_year,
        total_spent=total_spent,
        number_of_orders=number_of_orders,
        average_per_order=Fraction(total_spent, number_of_orders),
        most_expensive=most_expensive,
        cheapest=cheapest,
        orders_by_month=orders_by_month,
        average_orders_per_month=Fraction(sum(orders_by_month.values()), len(orders_by_month)),
        month_with_most_orders=MonthCount(*busiest),
        month_with_least_orders=MonthCount(*quietest),
        average_daily_spending=Fraction(total_spent, DAYS_IN_YEAR),
    )


def analyze_year(
    credential: str | None,
    target_year: int,
    *,
    fetch_page: PageFetcher | None = None,
    settings: Settings | None = None,
) -> StatisticsReport:
    """Run one analysis: fetch the year's orders and compute statistics.

    The credential is checked before anything else; a blank one raises
    :class:`AuthError` without any request. When ``fetch_page`` is given it is
    used instead of an HTTP :class:`OrdersClient` (the credential is still
    required). Nothing is kept between runs.
    """

    if credential is None or not credential.strip():
        raise AuthError("bearer credential is missing or blank")

    settings = settings or Settings()
    tz = settings.timezone

    if fetch_page is not None:
        orders = collect_year_orders(fetch_page, target_year, tz=tz)
    else:
        with OrdersClient(credential, settings=settings) as client:
            orders = collect_year_orders(client.fetch_page, target_year, tz=tz)

    return compute_statistics(orders, target_year, tz=tz)


__all__ = [
    "DAYS_IN_YEAR",
    "analyze_year",
    "collect_year_orders",
    "compute_statistics",
    "filter_year_orders",
]
