"""End-to-end: ``analyze_year`` over the HTTP client against a fake orders API.

The fake serves reverse-chronological pages of 25 from an in-memory history,
so pagination, normalization, filtering and statistics run exactly as they
would against the live endpoint.
"""

from __future__ import annotations

from datetime import date, timedelta

import httpx
import pytest

import order_analysis.client as client_mod
from order_analysis import Settings, TransportError, analyze_year, format_report
from tests.helpers.pages import raw_order


def _history() -> list[dict]:
    # One order every 5 days from 2025-12-30 back to early 2024, newest first.
    out = []
    day = date(2025, 12, 30)
    i = 0
    while day >= date(2024, 3, 1):
        status = "CANCELLED" if i % 10 == 9 else "CONCLUDED"
        out.append(raw_order(1000 + i, f"{day.isoformat()}T19:30:00.000Z", status))
        day -= timedelta(days=5)
        i += 1
    return out


def _install_fake_api(monkeypatch: pytest.MonkeyPatch, handler) -> httpx.Client:
    http = httpx.Client(transport=httpx.MockTransport(handler))
    monkeypatch.setattr(client_mod.httpx, "Client", lambda **kwargs: http)
    return http


def test_analyze_year_against_paginated_api(monkeypatch):
    history = _history()
    pages_requested: list[int] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["authorization"] == "Bearer tkn"
        page = int(request.url.params["page"])
        size = int(request.url.params["size"])
        pages_requested.append(page)
        return httpx.Response(200, json=history[page * size : (page + 1) * size])

    http = _install_fake_api(monkeypatch, _handler)

    report = analyze_year("tkn", 2025, settings=Settings(api_base_url="https://orders.test"))

    in_year = [
        o for o in history if o["createdAt"].startswith("2025") and o["lastStatus"] == "CONCLUDED"
    ]
    assert report.number_of_orders == len(in_year)
    assert report.total_spent == sum(o["payments"]["total"]["value"] for o in in_year)
    assert sum(report.orders_by_month.values()) == report.number_of_orders
    # 73 orders fall in 2025; the first 2024 order sits on page 2 (index 73).
    assert pages_requested == [0, 1, 2]
    assert list(report.orders_by_month)[0] == 12
    assert http.is_closed

    out = format_report(report)
    assert out["cheapest"]["date"] == "30/12/2025"


def test_http_failure_mid_run_aborts(monkeypatch):
    history = _history()

    def _handler(request: httpx.Request) -> httpx.Response:
        page = int(request.url.params["page"])
        if page == 1:
            return httpx.Response(503)
        return httpx.Response(200, json=history[:25])

    http = _install_fake_api(monkeypatch, _handler)

    with pytest.raises(TransportError) as excinfo:
        analyze_year("tkn", 2025, settings=Settings(api_base_url="https://orders.test"))
    assert excinfo.value.page == 1
    assert http.is_closed
