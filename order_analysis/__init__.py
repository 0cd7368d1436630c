"""Public interface for the ``order_analysis`` package.

Re-exports the analysis API, the page fetcher, the error taxonomy and the
public models. No runtime logic here.
"""

from .aggregate import (
    analyze_year,
    collect_year_orders,
    compute_statistics,
    filter_year_orders,
)
from .client import OrdersClient, fetch_orders_page, normalize_order
from .config import Settings, load_settings
from .errors import (
    AuthError,
    EmptyResultError,
    OrderAnalysisError,
    ResponseShapeError,
    TransportError,
)
from .models import (
    CONCLUDED_STATUS,
    MonthCount,
    OrderRecord,
    Page,
    PageFetcher,
    RawOrder,
    StatisticsReport,
)
from .report import format_report

__all__ = [
    # API
    "analyze_year",
    "collect_year_orders",
    "compute_statistics",
    "filter_year_orders",
    "format_report",
    # Page fetcher
    "OrdersClient",
    "fetch_orders_page",
    "normalize_order",
    # Config
    "Settings",
    "load_settings",
    # Errors
    "OrderAnalysisError",
    "AuthError",
    "TransportError",
    "ResponseShapeError",
    "EmptyResultError",
    # Models / types
    "CONCLUDED_STATUS",
    "MonthCount",
    "OrderRecord",
    "Page",
    "PageFetcher",
    "RawOrder",
    "StatisticsReport",
]
