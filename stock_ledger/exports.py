from . import settings
from .schemas import ColumnSpec

# Column layouts for the CSV downloads. Each extract receives one record.

STOCK_REPORT_COLUMNS = [
    ColumnSpec(header="Name", extract=lambda p: p.name),
    ColumnSpec(header="SKU", extract=lambda p: p.sku),
    ColumnSpec(header="Current Stock", extract=lambda p: p.current_stock),
    ColumnSpec(header="Minimum Stock", extract=lambda p: p.minimum_stock),
]

# Expects classified products (needs `status`).
DETAILED_STOCK_COLUMNS = [
    ColumnSpec(header="Name", extract=lambda p: p.name),
    ColumnSpec(header="SKU", extract=lambda p: p.sku),
    ColumnSpec(header="Description", extract=lambda p: p.description or "N/A"),
    ColumnSpec(header="Current Stock", extract=lambda p: p.current_stock),
    ColumnSpec(header="Minimum Stock", extract=lambda p: p.minimum_stock),
    ColumnSpec(header="Status", extract=lambda p: p.status),
]

TRANSACTION_REPORT_COLUMNS = [
    ColumnSpec(
        header="Date",
        extract=lambda t: t.created_at.strftime(settings.EXPORT_TIMESTAMP_FORMAT),
    ),
    ColumnSpec(header="Type", extract=lambda t: t.type.value),
    ColumnSpec(header="Product", extract=lambda t: t.product_name),
    ColumnSpec(header="SKU", extract=lambda t: t.product_sku),
    ColumnSpec(header="Quantity", extract=lambda t: t.quantity),
]
