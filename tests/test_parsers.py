from datetime import datetime, timezone

import numpy as np
import pandas as pd
import pytest
from pydantic import ValidationError

from stock_ledger import parsers
from stock_ledger.schemas import TransactionType


def test_parse_products_normalizes_csv_cells():
    df = pd.DataFrame(
        {
            "id": [1, 2],
            "name": ["Widget", "Gadget"],
            "sku": [1001, 2002],
            "description": ["Blue", np.nan],
            "current_stock": [5, np.nan],
            "minimum_stock": [5, 3],
            "category_id": [np.nan, 7.0],
        }
    )

    widget, gadget = parsers.parse_products(df)

    assert (widget.id, widget.sku, widget.description) == ("1", "1001", "Blue")
    assert widget.current_stock == 5
    assert gadget.description is None
    assert gadget.current_stock == 0
    assert gadget.category_id == "7"
    assert widget.category_id is None


def test_parse_products_keeps_negative_stock():
    df = pd.DataFrame([{"id": "p1", "name": "Widget", "sku": "W1", "current_stock": -2, "minimum_stock": 0}])

    [product] = parsers.parse_products(df)

    assert product.current_stock == -2


def test_parse_products_from_text_cells():
    df = pd.DataFrame(
        [
            {"id": "p1", "name": "NA", "sku": "00123",
             "current_stock": "4.0", "minimum_stock": "5"},
        ],
        dtype=str,
    )

    [product] = parsers.parse_products(df)

    assert (product.name, product.sku) == ("NA", "00123")
    assert (product.current_stock, product.minimum_stock) == (4, 5)


def test_parse_products_rejects_non_numeric_stock():
    df = pd.DataFrame([{"id": "p1", "name": "Widget", "sku": "W1", "current_stock": "lots", "minimum_stock": "5"}])

    with pytest.raises(ValidationError):
        parsers.parse_products(df)


def test_parse_products_empty_frame():

    assert parsers.parse_products(pd.DataFrame()) == []


def test_parse_suppliers_optional_columns():
    df = pd.DataFrame([{"id": "s1", "name": "Acme", "email": np.nan}])

    [supplier] = parsers.parse_suppliers(df)

    assert supplier.email is None
    assert supplier.phone is None


def test_parse_transactions_keeps_row_order_and_types():
    df = pd.DataFrame(
        [
            {"id": "t2", "type": "sale", "product_id": "p1", "quantity": 4.0,
             "unit_price": np.nan, "created_at": "2024-05-02T10:00:00Z"},
            {"id": "t1", "type": "purchase", "product_id": "p1", "quantity": 10.0,
             "unit_price": 2.5, "created_at": "2024-05-01T10:00:00"},
        ]
    )

    sale, purchase = parsers.parse_transactions(df)

    assert [sale.id, purchase.id] == ["t2", "t1"]
    assert sale.type is TransactionType.SALE
    assert sale.quantity == 4
    assert sale.unit_price is None
    assert purchase.unit_price == 2.5
    # Naive timestamps are read as UTC
    assert purchase.created_at == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "overrides",
    [{"quantity": 0}, {"quantity": -3}, {"type": "refund"}, {"unit_price": -1.0}],
)
def test_parse_transactions_rejects_invalid_rows(overrides):
    row = {"id": "t1", "type": "sale", "product_id": "p1", "quantity": 1,
           "created_at": "2024-05-01T10:00:00Z"}
    row.update(overrides)

    with pytest.raises(ValidationError):
        parsers.parse_transactions(pd.DataFrame([row]))
