from stock_ledger import settings
from update_dashboard import run_dashboard_update
from update_reports import run_reports_update


def run_process():
    """Runs the dashboard refresh, then one report per time range."""
    run_dashboard_update()
    for time_range in settings.REPORT_TIME_RANGES:
        run_reports_update(time_range)


if __name__ == "__main__":
    run_process()
