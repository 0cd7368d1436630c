"""Error taxonomy for an analysis run.

Every failure aborts the run; there is no partial report. Each class carries a
``user_message`` that the CLI shows in place of the technical detail, which is
logged instead.
"""

from __future__ import annotations


class OrderAnalysisError(Exception):
    """Base class for all failures surfaced by ``analyze_year``."""

    user_message: str = "Failed to analyze orders."


class AuthError(OrderAnalysisError):
    """The bearer credential is missing or blank (no request was sent)."""

    user_message = "Please provide a valid authorization token."


class TransportError(OrderAnalysisError):
    """A page request failed at the network or HTTP level."""

    user_message = "Failed to fetch orders. Check that the token is correct."

    def __init__(self, message: str, *, page: int | None = None) -> None:
        super().__init__(message)
        self.page = page


class ResponseShapeError(TransportError):
    """A page response could not be parsed as a list of orders."""


class EmptyResultError(OrderAnalysisError):
    """No concluded orders exist for the target year."""

    user_message = "No orders found for this year."

    def __init__(self, target_year: int | None = None) -> None:
        detail = "no concluded orders to summarize"
        if target_year is not None:
            detail = f"no concluded orders found for {target_year}"
        super().__init__(detail)
        self.target_year = target_year


__all__ = [
    "AuthError",
    "EmptyResultError",
    "OrderAnalysisError",
    "ResponseShapeError",
    "TransportError",
]
