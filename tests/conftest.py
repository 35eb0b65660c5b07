"""
Pytest configuration and shared fixtures for the stock ledger tests.
"""
from datetime import datetime, timedelta, timezone

import pytest

from stock_ledger import settings
from stock_ledger.aggregator import StockLedgerAggregator
from stock_ledger.schemas import Product, Supplier, Transaction


AS_OF = datetime(2024, 5, 31, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def as_of():
    """A fixed 'now' so window boundaries never depend on the wall clock."""
    return AS_OF


@pytest.fixture
def aggregator():
    return StockLedgerAggregator()


@pytest.fixture
def make_product():
    counter = {"n": 0}

    def _make(current_stock=10, minimum_stock=5, **overrides):
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "id": f"p{n}",
            "name": f"Product {n}",
            "sku": f"SKU-{n:03d}",
            "current_stock": current_stock,
            "minimum_stock": minimum_stock,
        }
        fields.update(overrides)
        return Product(**fields)

    return _make


@pytest.fixture
def make_transaction():
    counter = {"n": 0}

    def _make(type="sale", quantity=1, created_at=AS_OF - timedelta(days=1), **overrides):
        counter["n"] += 1
        fields = {
            "id": f"t{counter['n']}",
            "type": type,
            "product_id": "p1",
            "quantity": quantity,
            "created_at": created_at,
        }
        fields.update(overrides)
        return Transaction(**fields)

    return _make


@pytest.fixture
def suppliers():
    return [
        Supplier(id="s1", name="Acme Supply"),
        Supplier(id="s2", name="Northwind", email="orders@northwind.example"),
    ]


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Points INPUT_DIR/OUTPUT_DIR at a temp folder and disables the webhook."""
    input_dir = tmp_path / "input"
    output_dir = tmp_path / "output"
    input_dir.mkdir()
    monkeypatch.setattr(settings, "INPUT_DIR", input_dir)
    monkeypatch.setattr(settings, "OUTPUT_DIR", output_dir)
    monkeypatch.setattr(settings, "SAVE_JSON_OUTPUT", True)
    monkeypatch.setattr(settings, "WEBHOOK_URL", None)
    return tmp_path
