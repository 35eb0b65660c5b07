import logging
from datetime import timedelta
from typing import Any
import pandas as pd
from pydantic import ValidationError

from stock_ledger import parsers, settings, data_handler
from stock_ledger.exports import DETAILED_STOCK_COLUMNS, STOCK_REPORT_COLUMNS
from stock_ledger.pipeline import DataPipeline
from stock_ledger.schemas import DashboardReport

logger = logging.getLogger(__name__)


class DashboardPipeline(DataPipeline):
    tables = ("products", "suppliers", "transactions")

    def __init__(self, **kwargs):
        super().__init__("dashboard", **kwargs)

    def extract(self) -> dict[str, pd.DataFrame] | None:
        logger.info("--- Starting Dashboard Extraction ---")

        products = self.read_table(
            "products",
            settings.PRODUCTS_FILENAME_PREFIX,
            lambda: self.client.fetch_products(),
        )
        if products is None:
            logger.error("  > ERROR: Products are required for the dashboard.")
            return None

        suppliers = self.read_table(
            "suppliers",
            settings.SUPPLIERS_FILENAME_PREFIX,
            lambda: self.client.fetch_suppliers(),
        )
        # Only the monthly window is needed for the summary
        window_start = self.as_of - timedelta(days=self.aggregator.window_days)
        transactions = self.read_table(
            "transactions",
            settings.TRANSACTIONS_FILENAME_PREFIX,
            lambda: self.client.fetch_transactions(since=window_start, ascending=True),
        )

        # The trend covers the newest TREND_LIMIT transactions, whatever their age.
        # A CSV export is read once and serves both views.
        latest = transactions
        if self.client is not None and transactions is not None:
            latest = self.read_table(
                "transactions",
                settings.TRANSACTIONS_FILENAME_PREFIX,
                lambda: self.client.fetch_transactions(
                    limit=settings.TREND_LIMIT, ascending=False
                )[::-1],
            )

        # Missing optional tables count as "no rows", never as None
        return {
            "products": products,
            "suppliers": suppliers if suppliers is not None else pd.DataFrame(),
            "transactions": transactions if transactions is not None else pd.DataFrame(),
            "latest_transactions": latest if latest is not None else pd.DataFrame(),
        }

    def transform(self, raw_data: dict[str, pd.DataFrame]) -> DashboardReport | None:
        logger.info("\n--- Validating Tables ---")
        try:
            products = parsers.parse_products(raw_data["products"])
            suppliers = parsers.parse_suppliers(raw_data["suppliers"])
            transactions = parsers.parse_transactions(raw_data["transactions"])
            latest = parsers.parse_transactions(raw_data["latest_transactions"])
        except ValidationError as e:
            logger.error("❌ Data validation failed!")
            logger.error(e)
            return None
        logger.info(
            f"✅ Validated {len(products)} products, {len(suppliers)} suppliers, "
            f"{len(transactions)} transactions."
        )

        # trend() expects ascending order; sorted() is stable for equal timestamps
        latest = sorted(latest, key=lambda t: t.created_at)

        logger.info("--- Aggregating ---")
        summary = self.aggregator.summarize(products, suppliers, transactions, self.as_of)
        trend = self.aggregator.trend(latest, limit=settings.TREND_LIMIT)

        report = DashboardReport(
            as_of=self.as_of,
            summary=summary,
            products=self.aggregator.classify(products),
            trend=trend,
            recent=self.aggregator.recent(trend),
        )

        logger.info(f"  > Total products: {summary.total_products}")
        logger.info(f"  > Low stock items: {summary.low_stock_items}")
        logger.info(f"  > Active suppliers: {summary.active_suppliers}")
        logger.info(f"  > Transactions (last {self.aggregator.window_days} days): {summary.monthly_transactions}")
        return report

    def save(self, report: DashboardReport):
        data_handler.save_csv(
            self.aggregator.export_csv(report.products, STOCK_REPORT_COLUMNS),
            "stock_report",
        )
        data_handler.save_csv(
            self.aggregator.export_csv(report.products, DETAILED_STOCK_COLUMNS),
            "detailed_stock_list",
        )
        data_handler.save_json(self.build_payload(report), "dashboard_report")

    def build_payload(self, report: DashboardReport) -> dict[str, Any]:
        return {
            "asOf": report.as_of.isoformat(),
            "stockSummary": report.summary.model_dump(mode="json", by_alias=True),
            "stockTrend": [p.model_dump(mode="json", by_alias=True) for p in report.trend],
            "recentTransactions": [
                p.model_dump(mode="json", by_alias=True) for p in report.recent
            ],
            "products": [
                p.model_dump(mode="json", by_alias=True) for p in report.products
            ],
        }
