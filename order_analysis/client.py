"""Thin client for the paginated orders history endpoint.

``GET {base_url}/v4/customers/me/orders?page=<n>&size=25`` with a bearer
credential in the ``authorization`` header. Each response is a JSON array of
orders; every element is validated as :class:`~order_analysis.models.RawOrder`
and projected to an :class:`~order_analysis.models.OrderRecord`.

The endpoint returns orders newest first. Callers (the year aggregator) rely on
that ordering to detect the end of a year.

No retries and no caching: one request per call. Transport and HTTP failures
raise :class:`~order_analysis.errors.TransportError`; unparsable or mis-shaped
bodies raise :class:`~order_analysis.errors.ResponseShapeError`.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from .config import PAGE_SIZE, Settings
from .errors import AuthError, ResponseShapeError, TransportError
from .logging_setup import get_logger
from .models import OrderRecord, RawOrder

_logger = get_logger("order_analysis.client")


def normalize_order(raw: Any) -> OrderRecord:
    """Validate one API element and project it to an ``OrderRecord``.

    Raises ``pydantic.ValidationError`` when required fields are missing or
    have the wrong type.
    """

    return OrderRecord.from_raw(RawOrder.model_validate(raw))


def normalize_page(payload: Any, *, page: int) -> list[OrderRecord]:
    """Normalize a decoded page body (expected: JSON array of orders)."""

    if not isinstance(payload, list):
        raise ResponseShapeError(
            f"orders page {page}: expected a JSON array, got {type(payload).__name__}",
            page=page,
        )
    records: list[OrderRecord] = []
    for pos, item in enumerate(payload):
        try:
            records.append(normalize_order(item))
        except ValidationError as e:
            raise ResponseShapeError(
                f"orders page {page}: element {pos} is not a valid order: {e}", page=page
            ) from e
    return records


def _require_credential(credential: str | None) -> str:
    if credential is None or not credential.strip():
        raise AuthError("bearer credential is missing or blank")
    return credential.strip()


class OrdersClient:
    """Page fetcher bound to one credential and one ``httpx.Client``.

    Use as a context manager, or call :meth:`close`. An injected
    ``http_client`` is left open for its owner to close.
    """

    def __init__(
        self,
        credential: str | None,
        *,
        settings: Settings | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._credential = _require_credential(credential)
        self._settings = settings or Settings()
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(timeout=self._settings.http_timeout)

    def __enter__(self) -> OrdersClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def _headers(self) -> dict[str, str]:
        return {
            "authorization": f"Bearer {self._credential}",
            "accept": "application/json",
        }

    def fetch_page(self, page: int) -> list[OrderRecord]:
        """Fetch and normalize one zero-based page of orders."""

        if page < 0:
            raise ValueError(f"page must be >= 0, got {page}")

        try:
            resp = self._http.get(
                self._settings.orders_url,
                params={"page": page, "size": PAGE_SIZE},
                headers=self._headers(),
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"orders page {page}: HTTP {e.response.status_code} {e.response.reason_phrase}",
                page=page,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"orders page {page}: request failed: {e!r}", page=page) from e

        try:
            payload = resp.json()
        except ValueError as e:
            raise ResponseShapeError(f"orders page {page}: body is not valid JSON", page=page) from e

        records = normalize_page(payload, page=page)
        _logger.debug("fetched orders page=%d records=%d", page, len(records))
        return records


def fetch_orders_page(
    page: int,
    credential: str | None,
    *,
    settings: Settings | None = None,
    http_client: httpx.Client | None = None,
) -> list[OrderRecord]:
    """One-shot helper: fetch a single page with a short-lived client."""

    with OrdersClient(credential, settings=settings, http_client=http_client) as client:
        return client.fetch_page(page)


__all__ = ["OrdersClient", "fetch_orders_page", "normalize_order", "normalize_page"]
