import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")

# --- Path Configuration ---
INPUT_DIR = BASE_DIR / os.getenv("INPUT_DIR", "input")
OUTPUT_DIR = BASE_DIR / os.getenv("OUTPUT_DIR", "output")

# --- Filename Configuration ---
# CSV exports of the data service tables, e.g. products_2024-05-01.csv
PRODUCTS_FILENAME_PREFIX = os.getenv("PRODUCTS_FILENAME_PREFIX", "products_")
SUPPLIERS_FILENAME_PREFIX = os.getenv("SUPPLIERS_FILENAME_PREFIX", "suppliers_")
TRANSACTIONS_FILENAME_PREFIX = os.getenv(
    "TRANSACTIONS_FILENAME_PREFIX", "transactions_"
)
SAVE_JSON_OUTPUT = os.getenv("SAVE_JSON_OUTPUT", "true").lower() in ("1", "true", "yes")

# --- Data Service ---
# When DATA_SERVICE_URL is unset the pipelines read the CSV exports in INPUT_DIR.
DATA_SERVICE_URL = os.getenv("DATA_SERVICE_URL")
DATA_SERVICE_KEY = os.getenv("DATA_SERVICE_KEY")
REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "15"))

# --- Webhook ---
WEBHOOK_URL = os.getenv("WEBHOOK_URL")

# --- Shared Business Logic ---
MONTHLY_WINDOW_DAYS = 30
TREND_LIMIT = 10
RECENT_POINTS = 5

TREND_LABEL_FORMAT = os.getenv("TREND_LABEL_FORMAT", "%m/%d/%Y")
MOVEMENT_LABEL_FORMAT = "%b %d"
EXPORT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
CSV_DELIMITER = ","

# Time ranges offered by the reports view, in display order.
REPORT_TIME_RANGES = {
    "7days": "Last 7 days",
    "30days": "Last 30 days",
    "month": "This month",
}
DEFAULT_TIME_RANGE = "30days"

# --- Logging ---
LOG_DIR = BASE_DIR / os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
