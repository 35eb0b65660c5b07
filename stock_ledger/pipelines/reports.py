import logging
from typing import Any
import pandas as pd
from pydantic import ValidationError

from stock_ledger import parsers, settings, data_handler
from stock_ledger.exports import TRANSACTION_REPORT_COLUMNS
from stock_ledger.pipeline import DataPipeline
from stock_ledger.schemas import StockReport

logger = logging.getLogger(__name__)


class ReportsPipeline(DataPipeline):
    """
    Inventory performance over a time range: low stock items, per-day
    sales/purchases/damages and the transaction CSV for that range.
    """

    tables = ("products", "transactions")

    def __init__(self, time_range: str = settings.DEFAULT_TIME_RANGE, **kwargs):
        super().__init__("reports", **kwargs)
        # Fails fast on an unknown range
        self.window_start = self.aggregator.window_start(time_range, self.as_of)
        self.time_range = time_range

    def extract(self) -> dict[str, pd.DataFrame] | None:
        logger.info(
            f"--- Starting Reports Extraction ({settings.REPORT_TIME_RANGES[self.time_range]}) ---"
        )

        products = self.read_table(
            "products",
            settings.PRODUCTS_FILENAME_PREFIX,
            lambda: self.client.fetch_products(),
        )
        if products is None:
            logger.error("  > ERROR: Products are required for the reports.")
            return None

        transactions = self.read_table(
            "transactions",
            settings.TRANSACTIONS_FILENAME_PREFIX,
            lambda: self.client.fetch_transactions(since=self.window_start),
        )

        return {
            "products": products,
            "transactions": transactions if transactions is not None else pd.DataFrame(),
        }

    def transform(self, raw_data: dict[str, pd.DataFrame]) -> StockReport | None:
        logger.info("\n--- Validating Tables ---")
        try:
            products = parsers.parse_products(raw_data["products"])
            transactions = parsers.parse_transactions(raw_data["transactions"])
        except ValidationError as e:
            logger.error("❌ Data validation failed!")
            logger.error(e)
            return None

        # Lowest stock first, as on the reports screen
        products = sorted(products, key=lambda p: p.current_stock)
        transactions = sorted(transactions, key=lambda t: t.created_at)
        in_range = self.aggregator.in_window(transactions, self.window_start, self.as_of)
        logger.info(
            f"  > {len(in_range)} of {len(transactions)} transactions since "
            f"{self.window_start.isoformat()}"
        )

        return StockReport(
            time_range=self.time_range,
            window_start=self.window_start,
            as_of=self.as_of,
            total_products=len(products),
            low_stock=self.aggregator.low_stock(products),
            transactions=in_range,
            movements=self.aggregator.daily_movements(in_range),
        )

    def save(self, report: StockReport):
        if not report.transactions:
            logger.warning("No transactions in range. Skipping CSV export.")
        else:
            data_handler.save_csv(
                self.aggregator.export_csv(report.transactions, TRANSACTION_REPORT_COLUMNS),
                f"stock_report_{report.time_range}",
            )
        data_handler.save_json(self.build_payload(report), f"reports_{report.time_range}")

    def build_payload(self, report: StockReport) -> dict[str, Any]:
        return {
            "timeRange": report.time_range,
            "windowStart": report.window_start.isoformat(),
            "asOf": report.as_of.isoformat(),
            "totalProducts": report.total_products,
            "lowStockItems": len(report.low_stock),
            "totalTransactions": len(report.transactions),
            "movements": [m.model_dump(mode="json") for m in report.movements],
            "lowStock": [
                p.model_dump(mode="json", by_alias=True) for p in report.low_stock
            ],
        }
