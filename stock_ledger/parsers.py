import pandas as pd
from typing import Any

from .schemas import Product, Supplier, Transaction

PRODUCT_TEXT_COLUMNS = ["id", "name", "sku", "description", "category_id"]
SUPPLIER_TEXT_COLUMNS = ["id", "name", "email", "phone", "address", "notes"]
TRANSACTION_TEXT_COLUMNS = ["id", "product_id", "notes", "product_name", "product_sku"]

PRODUCT_NUMERIC_COLUMNS = ["current_stock", "minimum_stock"]
TRANSACTION_NUMERIC_COLUMNS = ["quantity", "unit_price"]

# Stock levels the data service may leave empty; they count as 0.
STOCK_DEFAULTS = {"current_stock": 0, "minimum_stock": 0}

# Options for reading the CSV exports: every cell is kept as text (so SKUs
# like '00123' keep their zeros) and only an empty cell counts as missing
# (so a product named 'NA' stays 'NA').
CSV_READ_OPTIONS = {"dtype": str, "keep_default_na": False, "na_values": [""]}


def _to_text(value: Any) -> str | None:
    """Normalizes an id/label cell: NaN -> None, 1001.0 -> '1001'."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _to_number(value: Any) -> Any:
    """'4' -> 4, '4.0' -> 4, '2.5' -> 2.5. Unparseable text is left for validation to reject."""
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _to_records(
    df: pd.DataFrame,
    text_columns: list[str],
    numeric_columns: list[str] | None = None,
    defaults: dict[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """
    Cleans a raw table into plain dicts ready for the Pydantic models.
    - Text columns are stringified (JSON rows may carry numeric ids).
    - Numeric columns read as text are converted back to numbers.
    - Default-valued columns have their gaps filled.
    - Every remaining NaN becomes None.
    """
    if df is None or df.empty:
        return []

    df = df.copy()
    for column in text_columns:
        if column in df.columns:
            df[column] = df[column].map(_to_text)

    df = df.astype(object)
    for column, default in (defaults or {}).items():
        if column in df.columns:
            df[column] = df[column].fillna(default)

    for column in numeric_columns or []:
        if column in df.columns:
            df[column] = df[column].map(_to_number)

    df = df.where(pd.notna(df), None)
    return [{str(k): v for k, v in row.items()} for row in df.to_dict("records")]


def parse_products(df: pd.DataFrame) -> list[Product]:
    """Validates the products table. Raises pydantic.ValidationError on bad rows."""
    return [
        Product(**row)
        for row in _to_records(
            df, PRODUCT_TEXT_COLUMNS, PRODUCT_NUMERIC_COLUMNS, STOCK_DEFAULTS
        )
    ]


def parse_suppliers(df: pd.DataFrame) -> list[Supplier]:
    return [Supplier(**row) for row in _to_records(df, SUPPLIER_TEXT_COLUMNS)]


def parse_transactions(df: pd.DataFrame) -> list[Transaction]:
    """
    Validates the transactions table. Row order is kept exactly as given,
    since the trend series relies on the source's ascending `created_at` order.
    """
    return [
        Transaction(**row)
        for row in _to_records(df, TRANSACTION_TEXT_COLUMNS, TRANSACTION_NUMERIC_COLUMNS)
    ]
