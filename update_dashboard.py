import argparse
import sys

from stock_ledger import settings
from stock_ledger.data_service import DataServiceClient
from stock_ledger.logger import setup_logger
from stock_ledger.pipelines.dashboard import DashboardPipeline


def run_dashboard_update(test_mode: bool = False) -> bool:
    """Refreshes the dashboard outputs. Returns False if the run produced no report."""
    logger = setup_logger()

    # Reads the data service when configured, else the CSV exports in INPUT_DIR
    client = DataServiceClient() if settings.DATA_SERVICE_URL else None
    if client is None:
        logger.info(f"DATA_SERVICE_URL not set. Reading CSV exports from {settings.INPUT_DIR}")

    report = DashboardPipeline(client=client, test_mode=test_mode).run()
    return report is not None


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Build the stock dashboard report.")
    parser.add_argument("--test", action="store_true", help="Skip the webhook post.")
    args = parser.parse_args()

    sys.exit(0 if run_dashboard_update(test_mode=args.test) else 1)
