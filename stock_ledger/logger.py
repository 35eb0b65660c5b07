import logging
import sys
from logging.handlers import RotatingFileHandler
from . import settings

def setup_logger(name: str = None, log_level: int | str | None = None) -> logging.Logger:
    """
    Configures console (stdout) and rotating file logging for the stock ledger runs.
    Modules log through `logging.getLogger(__name__)`, so the default (root
    logger) covers the aggregator, the data service client and the pipelines.
    """
    level = log_level if log_level is not None else settings.LOG_LEVEL
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Prevent adding handlers multiple times when several pipelines run in one process
    if logger.hasHandlers():
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    # Console stays readable; the file gets timestamps and origin
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    settings.LOG_DIR.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        settings.LOG_DIR / "stock_ledger.log",
        maxBytes=5 * 1024 * 1024,  # 5 MB
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(file_handler)

    # requests/urllib3 connection chatter stays out of the report log
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return logger
