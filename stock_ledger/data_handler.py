import json
import logging
from pathlib import Path
from typing import Any
import requests

from . import settings
from . import utils

logger = logging.getLogger(__name__)


def save_csv(content: str, filename_base: str) -> Path:
    """Writes already-rendered CSV text to OUTPUT_DIR with a dated filename."""
    settings.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    date_suffix = utils.get_date_suffix_for_filename()

    csv_path = settings.OUTPUT_DIR / f"{filename_base}_{date_suffix}.csv"
    csv_path.write_text(content, encoding="utf-8")
    logger.info(f"✅ CSV saved to: {csv_path}")
    return csv_path


def save_json(payload: dict[str, Any], filename_base: str) -> Path | None:
    """Writes the run's JSON payload, unless disabled with SAVE_JSON_OUTPUT."""
    if not settings.SAVE_JSON_OUTPUT:
        logger.info("Skipping JSON file save as per configuration.")
        return None

    settings.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    date_suffix = utils.get_date_suffix_for_filename()
    json_path = settings.OUTPUT_DIR / f"{filename_base}_{date_suffix}.json"

    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, default=str)
    logger.info(f"✅ JSON output saved to: {json_path}")
    return json_path


def post_to_webhook(payload: dict[str, Any], report_type: str) -> bool:
    """
    Posts a report payload to the webhook. Failures are logged, not raised.
    Returns True when the webhook accepted the post.
    """
    if not settings.WEBHOOK_URL:
        logger.warning("⚠️ WEBHOOK_URL not set. Skipping webhook post.")
        return False

    logger.info(f"🚀 Posting {report_type} report to webhook: {settings.WEBHOOK_URL}")

    body = {"reportType": report_type, **payload}

    try:
        response = requests.post(settings.WEBHOOK_URL, json=body, timeout=settings.REQUEST_TIMEOUT)
        response.raise_for_status()
        logger.info("✅ Report successfully posted to webhook.")
        return True
    except requests.exceptions.RequestException as e:
        logger.error(f"❌ Error posting to webhook: {e}")
        return False
