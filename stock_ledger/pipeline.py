import logging
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Callable, Optional
import pandas as pd

from stock_ledger import settings, data_handler, utils
from stock_ledger.aggregator import StockLedgerAggregator, as_utc
from stock_ledger.data_service import DataServiceClient, DataServiceError
from stock_ledger.parsers import CSV_READ_OPTIONS

logger = logging.getLogger(__name__)


class DataPipeline(ABC):
    """
    Abstract base class for the report pipelines (Dashboard, Reports).
    Follows an Extract -> Transform -> Load (ETL) pattern.

    Tables come from the data service when a client is given, otherwise from
    the newest CSV export of each table in settings.INPUT_DIR. Every run
    fetches afresh; nothing is carried over between runs.
    """

    tables: tuple[str, ...] = ()

    def __init__(
        self,
        report_type: str,
        client: Optional[DataServiceClient] = None,
        as_of: Optional[datetime] = None,
        test_mode: bool = False,
    ):
        self.report_type = report_type
        self.client = client
        # One fixed "now" for the whole run
        self.as_of = as_utc(as_of) if as_of is not None else utils.utc_now()
        self.test_mode = test_mode
        self.aggregator = StockLedgerAggregator()
        # Status summary tracks the data date for each source table
        self.status_summary: dict[str, Optional[date]] = {t: None for t in self.tables}
        # Tables whose read failed during the current run
        self.failed_tables: list[str] = []

    def run(self) -> Any:
        """
        Orchestrates the pipeline execution. Returns the transformed report,
        or None when extraction or transformation failed.
        A table that could not be read (data service error, unreadable CSV)
        fails the whole run: no report is built or saved, and only the status
        summary (with the failed tables) goes to the webhook.
        """
        logger.info(f"🚀 STEP: {self.report_type.upper()} REPORT")
        logger.info("-" * 30)
        self.status_summary = {t: None for t in self.tables}
        self.failed_tables = []

        # --- 1. EXTRACT ---
        raw_data = self.extract()
        if self.failed_tables:
            logger.error(f"❌ Could not read: {', '.join(self.failed_tables)}.")
            raw_data = None
        if not raw_data:
            logger.warning(f"⚠️ No data extracted for {self.report_type}. Sending empty status.")
            self.load(None)
            return None

        # --- 2. TRANSFORM ---
        report = self.transform(raw_data)
        if report is None:
            logger.error(f"❌ Transformation failed for {self.report_type}.")
            return None

        # --- 3. LOAD ---
        self.load(report)

        logger.info(f"✅ {self.report_type.capitalize()} Pipeline Finished.\n")
        logger.info("=" * 60)
        return report

    def read_table(
        self, table: str, prefix: str, fetch: Callable[[], list[dict[str, Any]]]
    ) -> pd.DataFrame | None:
        """
        Reads one source table. `fetch` is only called when a data service
        client is configured; otherwise the latest '<prefix>YYYY-MM-DD.csv' is used.

        Returns None both for a missing CSV export and for a failed read; only
        the failure is recorded in `self.failed_tables`.
        """
        logger.info(f"\n-- Reading Table: {table} --")

        if self.client is not None:
            try:
                rows = fetch()
            except DataServiceError as e:
                logger.error(f"  > ERROR: {e}")
                self.failed_tables.append(table)
                return None
            self.status_summary[table] = self.as_of.date()
            return pd.DataFrame(rows)

        found_file_info = utils.find_latest_report(settings.INPUT_DIR, prefix)
        if not found_file_info:
            logger.warning(f"  > ⚠️  File missing ({prefix}). Skipping.")
            return None

        path, report_date = found_file_info
        logger.info(f"  > Found: {path.name} ({report_date})")
        df = utils.load_csv(path, **CSV_READ_OPTIONS)
        if df is None:
            self.failed_tables.append(table)
            return None
        self.status_summary[table] = report_date
        return df

    @abstractmethod
    def extract(self) -> dict[str, pd.DataFrame] | None:
        """
        Reads the source tables into raw DataFrames keyed by table name.
        Returns None when a required table is unavailable.
        """
        pass

    @abstractmethod
    def transform(self, raw_data: dict[str, pd.DataFrame]) -> Any:
        """
        Validates the raw tables into Pydantic models and aggregates them.
        Returns the report model, or None if validation failed.
        """
        pass

    @abstractmethod
    def save(self, report: Any):
        """Writes the report's CSV/JSON outputs to disk."""
        pass

    @abstractmethod
    def build_payload(self, report: Any) -> dict[str, Any]:
        """The JSON-ready body posted to the webhook."""
        pass

    def load(self, report: Any):
        """
        Saves the report to disk and posts it to the webhook.
        """
        # 1. Print Status Summary
        logger.info("\n--- Final Status Summary ---")
        for table, date_val in self.status_summary.items():
            logger.info(f"{table}: {date_val.isoformat() if date_val else 'No data'}")

        # 2. Save Outputs (CSV/JSON)
        if report is not None:
            self.save(report)
        else:
            logger.warning("No data to save to disk.")

        # 3. Post to Webhook
        payload: dict[str, Any] = {
            "statusSummary": {
                table: date_val.isoformat() if date_val else None
                for table, date_val in self.status_summary.items()
            },
            "failedTables": list(self.failed_tables),
        }
        if report is not None:
            payload.update(self.build_payload(report))

        if not self.test_mode:
            data_handler.post_to_webhook(payload, report_type=self.report_type)
        else:
            logger.info("🧪 Test Mode: Skipping webhook post.")
