import logging
import re
from datetime import date, datetime, timezone
from pathlib import Path
import pandas as pd

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """The single 'now' a pipeline run is anchored to."""
    return datetime.now(timezone.utc)


def get_date_suffix_for_filename() -> str:
    """Returns the current date as a YYYY-MM-DD string for filenames."""
    return datetime.now().strftime("%Y-%m-%d")


def find_latest_report(directory: Path, prefix: str) -> tuple[Path, date] | None:
    """
    Finds the newest '<prefix>YYYY-MM-DD.csv' in `directory`.
    Returns the path and the date parsed from its name, or None if nothing matches.
    """
    if not directory.exists():
        return None

    pattern = re.compile(rf"^{re.escape(prefix)}(\d{{4}}-\d{{2}}-\d{{2}})\.csv$")
    candidates = []
    for path in directory.iterdir():
        match = pattern.match(path.name)
        if not match:
            continue
        try:
            report_date = datetime.strptime(match.group(1), "%Y-%m-%d").date()
        except ValueError:
            logger.warning(f"Ignoring {path.name}: invalid date in filename.")
            continue
        candidates.append((report_date, path))

    if not candidates:
        return None

    report_date, path = max(candidates)
    return path, report_date


def load_csv(file_path: Path, skiprows: int = 0, **read_kwargs) -> pd.DataFrame | None:
    """
    CSV loader with an encoding fallback:
    1. UTF-8 with BOM support ('utf-8-sig').
    2. Latin-1, which reads any byte but may misinterpret characters.
    Extra keyword arguments (dtype, na_values, ...) go to both read attempts.
    """
    try:
        return pd.read_csv(
            file_path, encoding="utf-8-sig", skiprows=skiprows, **read_kwargs
        )

    except UnicodeDecodeError:
        logger.info(
            f"UTF-8 decoding failed for {file_path.name}. Retrying with 'latin-1'."
        )
        try:
            return pd.read_csv(
                file_path, encoding="latin-1", skiprows=skiprows, **read_kwargs
            )
        except (OSError, ValueError) as e_latin1:
            logger.error(
                f"Could not read {file_path.name} even with latin-1. Reason: {e_latin1}"
            )
            return None

    except FileNotFoundError:
        logger.info(f"Report not found at {file_path}, skipping.")
        return None

    except (OSError, ValueError) as e_general:
        # pandas raises ParserError / EmptyDataError, both ValueError subclasses
        logger.error(
            f"An unexpected error occurred while reading {file_path.name}. Reason: {e_general}"
        )
        return None
