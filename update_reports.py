import argparse
import sys

from stock_ledger import settings
from stock_ledger.data_service import DataServiceClient
from stock_ledger.logger import setup_logger
from stock_ledger.pipelines.reports import ReportsPipeline


def run_reports_update(time_range: str = settings.DEFAULT_TIME_RANGE, test_mode: bool = False) -> bool:
    """Builds the inventory performance report for one time range."""
    logger = setup_logger()

    client = DataServiceClient() if settings.DATA_SERVICE_URL else None
    if client is None:
        logger.info(f"DATA_SERVICE_URL not set. Reading CSV exports from {settings.INPUT_DIR}")

    report = ReportsPipeline(time_range=time_range, client=client, test_mode=test_mode).run()
    return report is not None


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Build the inventory performance report.")
    parser.add_argument(
        "--range",
        dest="time_range",
        choices=list(settings.REPORT_TIME_RANGES),
        default=settings.DEFAULT_TIME_RANGE,
        help="Reporting window (default: %(default)s).",
    )
    parser.add_argument("--test", action="store_true", help="Skip the webhook post.")
    args = parser.parse_args()

    sys.exit(0 if run_reports_update(args.time_range, test_mode=args.test) else 1)
