from datetime import datetime, timezone

import pytest
import requests

from stock_ledger.data_service import DataServiceClient, DataServiceError


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload if payload is not None else []
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")

    def json(self):
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse()
        self.error = error
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def make_client(session):
    return DataServiceClient(
        base_url="https://data.example.com/", api_key="anon-key", timeout=5, session=session
    )


def test_client_requires_base_url(monkeypatch):
    monkeypatch.setattr("stock_ledger.settings.DATA_SERVICE_URL", None)

    with pytest.raises(ValueError):
        DataServiceClient(session=FakeSession())


def test_fetch_products_orders_by_name_with_auth_headers():
    session = FakeSession(FakeResponse([{"id": "p1", "name": "Widget"}]))

    rows = make_client(session).fetch_products()

    [call] = session.calls
    assert rows == [{"id": "p1", "name": "Widget"}]
    assert call["url"] == "https://data.example.com/rest/v1/products"
    assert call["params"] == {"select": "*", "order": "name.asc"}
    assert call["headers"]["apikey"] == "anon-key"
    assert call["headers"]["Authorization"] == "Bearer anon-key"
    assert call["timeout"] == 5


def test_fetch_transactions_builds_filters_and_flattens_product():
    payload = [
        {"id": "t1", "type": "sale", "quantity": 2, "products": {"name": "Widget", "sku": "W1"}},
        {"id": "t2", "type": "purchase", "quantity": 5, "products": None},
    ]
    session = FakeSession(FakeResponse(payload))
    since = datetime(2024, 5, 1, tzinfo=timezone.utc)

    rows = make_client(session).fetch_transactions(since=since, limit=10, ascending=False)

    params = session.calls[0]["params"]
    assert params["order"] == "created_at.desc"
    assert params["created_at"] == "gte.2024-05-01T00:00:00+00:00"
    assert params["limit"] == 10
    assert "products(name,sku)" in params["select"]
    assert rows[0]["product_name"] == "Widget"
    assert rows[0]["product_sku"] == "W1"
    assert "products" not in rows[0]
    assert rows[1]["product_name"] is None


def test_http_error_raises_data_service_error():
    session = FakeSession(FakeResponse(status_code=401))

    with pytest.raises(DataServiceError) as exc_info:
        make_client(session).fetch_suppliers()

    assert exc_info.value.table == "suppliers"
    assert "401" in str(exc_info.value)


def test_network_error_raises_data_service_error():
    session = FakeSession(error=requests.exceptions.ConnectionError("unreachable"))

    with pytest.raises(DataServiceError, match="transactions"):
        make_client(session).fetch_transactions()
