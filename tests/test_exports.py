from datetime import datetime, timezone

from stock_ledger.exports import (
    DETAILED_STOCK_COLUMNS,
    STOCK_REPORT_COLUMNS,
    TRANSACTION_REPORT_COLUMNS,
)


def test_stock_report_columns(aggregator, make_product):
    products = [make_product(name="Widget", sku="W1", current_stock=3, minimum_stock=5)]

    csv_text = aggregator.export_csv(products, STOCK_REPORT_COLUMNS)

    assert csv_text == "Name,SKU,Current Stock,Minimum Stock\nWidget,W1,3,5"


def test_detailed_stock_list_fills_description_and_status(aggregator, make_product):
    products = aggregator.classify([
        make_product(name="Widget", sku="W1", current_stock=3, minimum_stock=5),
        make_product(name="Gadget", sku="G1", current_stock=9, minimum_stock=5, description="Large"),
    ])

    lines = aggregator.export_csv(products, DETAILED_STOCK_COLUMNS).split("\n")

    assert lines == [
        "Name,SKU,Description,Current Stock,Minimum Stock,Status",
        "Widget,W1,N/A,3,5,Low Stock",
        "Gadget,G1,Large,9,5,In Stock",
    ]


def test_transaction_report_columns(aggregator, make_transaction):
    transaction = make_transaction(
        type="damage",
        quantity=2,
        created_at=datetime(2024, 5, 3, 8, 15, 0, tzinfo=timezone.utc),
        product_name="Widget",
        product_sku="W1",
    )

    csv_text = aggregator.export_csv([transaction], TRANSACTION_REPORT_COLUMNS)

    assert csv_text == "Date,Type,Product,SKU,Quantity\n2024-05-03 08:15:00,damage,Widget,W1,2"
