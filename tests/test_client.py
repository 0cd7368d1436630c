from __future__ import annotations

import json
from datetime import UTC, datetime

import httpx
import pytest

from order_analysis import (
    AuthError,
    OrdersClient,
    ResponseShapeError,
    Settings,
    TransportError,
    fetch_orders_page,
)
from order_analysis.models import OrderRecord
from tests.helpers.pages import raw_order

_SETTINGS = Settings(api_base_url="https://orders.test/")


def _mk_http(handler, requests_out: list[httpx.Request] | None = None) -> httpx.Client:
    def _record(request: httpx.Request) -> httpx.Response:
        if requests_out is not None:
            requests_out.append(request)
        return handler(request)

    return httpx.Client(transport=httpx.MockTransport(_record))


def test_fetch_page_sends_bearer_and_paging_params():
    seen: list[httpx.Request] = []
    http = _mk_http(lambda req: httpx.Response(200, json=[]), seen)

    with OrdersClient("  secret-token ", settings=_SETTINGS, http_client=http) as client:
        client.fetch_page(3)

    (req,) = seen
    assert req.method == "GET"
    assert req.url.path == "/v4/customers/me/orders"
    assert req.url.params["page"] == "3"
    assert req.url.params["size"] == "25"
    assert req.headers["authorization"] == "Bearer secret-token"


def test_fetch_page_normalizes_orders():
    body = [
        raw_order(4590, "2025-02-14T20:31:07.123Z"),
        raw_order(1200, "2025-02-10", status="CANCELLED"),
    ]
    http = _mk_http(lambda req: httpx.Response(200, json=body))

    records = fetch_orders_page(0, "token", settings=_SETTINGS, http_client=http)

    assert records == [
        OrderRecord(
            value=4590,
            created_at=datetime(2025, 2, 14, 20, 31, 7, 123000, tzinfo=UTC),
            last_status="CONCLUDED",
        ),
        OrderRecord(value=1200, created_at=datetime(2025, 2, 10), last_status="CANCELLED"),
    ]


@pytest.mark.parametrize("status", [401, 403, 500])
def test_http_error_status_raises_transport_error(status):
    http = _mk_http(lambda req: httpx.Response(status, json={"message": "nope"}))

    with pytest.raises(TransportError) as excinfo:
        fetch_orders_page(2, "token", settings=_SETTINGS, http_client=http)

    assert not isinstance(excinfo.value, ResponseShapeError)
    assert excinfo.value.page == 2
    assert str(status) in str(excinfo.value)


def test_network_failure_raises_transport_error():
    def _boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    http = _mk_http(_boom)

    with pytest.raises(TransportError) as excinfo:
        fetch_orders_page(0, "token", settings=_SETTINGS, http_client=http)
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_non_json_body_raises_shape_error():
    http = _mk_http(lambda req: httpx.Response(200, text="<html>login</html>"))

    with pytest.raises(ResponseShapeError):
        fetch_orders_page(0, "token", settings=_SETTINGS, http_client=http)


def test_non_array_body_raises_shape_error():
    http = _mk_http(lambda req: httpx.Response(200, json={"orders": []}))

    with pytest.raises(ResponseShapeError, match="expected a JSON array"):
        fetch_orders_page(0, "token", settings=_SETTINGS, http_client=http)


@pytest.mark.parametrize(
    "element",
    [
        {"createdAt": "2025-01-01", "lastStatus": "CONCLUDED"},
        raw_order("12.50", "2025-01-01"),
        raw_order(1250, "not-a-date"),
        raw_order(1250, "2025-01-01", status=None),
    ],
)
def test_malformed_order_raises_shape_error(element):
    http = _mk_http(lambda req: httpx.Response(200, content=json.dumps([element])))

    with pytest.raises(ResponseShapeError, match="element 0"):
        fetch_orders_page(0, "token", settings=_SETTINGS, http_client=http)


@pytest.mark.parametrize("credential", [None, "", "  "])
def test_blank_credential_is_rejected_before_request(credential):
    seen: list[httpx.Request] = []
    http = _mk_http(lambda req: httpx.Response(200, json=[]), seen)

    with pytest.raises(AuthError):
        OrdersClient(credential, settings=_SETTINGS, http_client=http)
    assert seen == []


def test_injected_http_client_is_left_open():
    http = _mk_http(lambda req: httpx.Response(200, json=[]))

    with OrdersClient("token", settings=_SETTINGS, http_client=http) as client:
        client.fetch_page(0)

    assert not http.is_closed


def test_negative_page_is_rejected():
    http = _mk_http(lambda req: httpx.Response(200, json=[]))

    with pytest.raises(ValueError):
        OrdersClient("token", settings=_SETTINGS, http_client=http).fetch_page(-1)
