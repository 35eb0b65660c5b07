import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Optional, Sequence

import pandas as pd

from . import settings
from .schemas import (
    ClassifiedProduct,
    ColumnSpec,
    DailyMovement,
    Product,
    StockSummary,
    Supplier,
    Transaction,
    TransactionType,
    TrendPoint,
)

logger = logging.getLogger(__name__)

# Per-day chart series, keyed by the transaction type they total.
MOVEMENT_COLUMNS = {
    TransactionType.SALE.value: "sales",
    TransactionType.PURCHASE.value: "purchases",
    TransactionType.DAMAGE.value: "damages",
}


def as_utc(moment: datetime) -> datetime:
    """Naive datetimes are taken to be UTC, so they compare with ledger timestamps."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class StockLedgerAggregator:
    """
    Turns already-fetched products, suppliers and transactions into the
    dashboard's derived views.

    The aggregator is stateless: it keeps formatting options only and never
    caches inputs or results, so callers must re-fetch after any mutation and
    call it again. Every "now" is passed in as `as_of`.
    """

    def __init__(
        self,
        window_days: int = settings.MONTHLY_WINDOW_DAYS,
        label_format: str = settings.TREND_LABEL_FORMAT,
        movement_label_format: str = settings.MOVEMENT_LABEL_FORMAT,
        delimiter: str = settings.CSV_DELIMITER,
    ):
        self.window_days = window_days
        self.label_format = label_format
        self.movement_label_format = movement_label_format
        self.delimiter = delimiter

    # --- Classification ---

    def classify(self, products: Iterable[Product]) -> list[ClassifiedProduct]:
        """Flags every product whose stock is at or below its minimum. Order is preserved."""
        return [
            ClassifiedProduct(
                **product.model_dump(),
                is_low_stock=product.current_stock <= product.minimum_stock,
            )
            for product in products
        ]

    def low_stock(self, products: Iterable[Product]) -> list[ClassifiedProduct]:
        return [item for item in self.classify(products) if item.is_low_stock]

    # --- Summary ---

    def summarize(
        self,
        products: Sequence[Product],
        suppliers: Sequence[Supplier],
        transactions: Iterable[Transaction],
        as_of: datetime,
    ) -> StockSummary:
        """
        Headline counts. Every existing supplier counts as active, and the
        monthly window is [as_of - window_days, as_of).
        """
        as_of = as_utc(as_of)
        window_start = as_of - timedelta(days=self.window_days)

        monthly = sum(
            1 for t in transactions if window_start <= t.created_at < as_of
        )

        return StockSummary(
            total_products=len(products),
            low_stock_items=len(self.low_stock(products)),
            active_suppliers=len(suppliers),
            monthly_transactions=monthly,
        )

    # --- Trend ---

    def trend(
        self, transactions: Iterable[Transaction], limit: Optional[int] = None
    ) -> list[TrendPoint]:
        """
        One signed point per transaction: purchases add, every other type subtracts.

        Transactions must already be sorted ascending by `created_at`; they are
        not re-sorted here. `limit` keeps the most recent `limit` points.
        """
        items = list(transactions)
        if limit is not None:
            items = items[-limit:] if limit > 0 else []

        return [
            TrendPoint(
                label=t.created_at.strftime(self.label_format),
                value=t.quantity if t.type == TransactionType.PURCHASE else -t.quantity,
            )
            for t in items
        ]

    def recent(
        self, points: Sequence[TrendPoint], count: int = settings.RECENT_POINTS
    ) -> list[TrendPoint]:
        return list(points[-count:]) if count > 0 else []

    # --- Reporting windows ---

    def window_start(self, time_range: str, as_of: datetime) -> datetime:
        as_of = as_utc(as_of)
        if time_range == "7days":
            return as_of - timedelta(days=7)
        if time_range == "30days":
            return as_of - timedelta(days=30)
        if time_range == "month":
            return as_of.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        raise ValueError(
            f"Unknown time range '{time_range}'. "
            f"Expected one of: {', '.join(settings.REPORT_TIME_RANGES)}"
        )

    def in_window(
        self, transactions: Iterable[Transaction], start: datetime, as_of: datetime
    ) -> list[Transaction]:
        start, as_of = as_utc(start), as_utc(as_of)
        return [t for t in transactions if start <= t.created_at < as_of]

    def daily_movements(self, transactions: Iterable[Transaction]) -> list[DailyMovement]:
        """
        Totals sales, purchases and damages per calendar day, in the order the
        days first appear. Transfers open a day but add nothing to it.
        """
        rows = [
            {
                "date": t.created_at.strftime(self.movement_label_format),
                "type": t.type.value,
                "quantity": t.quantity,
            }
            for t in transactions
        ]
        if not rows:
            return []

        df = pd.DataFrame(rows)
        for tx_type, column in MOVEMENT_COLUMNS.items():
            df[column] = df["quantity"].where(df["type"] == tx_type, 0)

        columns = list(MOVEMENT_COLUMNS.values())
        grouped = df.groupby("date", sort=False)[columns].sum().reset_index()

        return [
            DailyMovement(
                date=row["date"], **{column: int(row[column]) for column in columns}
            )
            for row in grouped.to_dict("records")
        ]

    # --- Export ---

    def export_csv(self, rows: Iterable[Any], columns: Sequence[ColumnSpec]) -> str:
        """
        Renders rows as CSV text: a header line, then one line per row.

        Values are joined as-is with no quoting, so a value containing the
        delimiter or a newline produces a malformed line. None renders empty.
        """
        lines = [self.delimiter.join(column.header for column in columns)]
        for row in rows:
            lines.append(
                self.delimiter.join(_stringify(column.extract(row)) for column in columns)
            )

        logger.debug(f"Exported {len(lines) - 1} rows over {len(columns)} columns.")
        return "\n".join(lines)


def _stringify(value: Any) -> str:
    return "" if value is None else str(value)
