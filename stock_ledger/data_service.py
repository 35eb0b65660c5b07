import logging
from datetime import datetime
from typing import Any, Optional
import requests

from . import settings

logger = logging.getLogger(__name__)


class DataServiceError(Exception):
    """A query against the data service failed (network error or non-2xx reply)."""

    def __init__(self, table: str, reason: str):
        super().__init__(f"Query on '{table}' failed: {reason}")
        self.table = table
        self.reason = reason


class DataServiceClient:
    """
    Read-only client for the data service's REST interface (PostgREST style:
    GET /rest/v1/<table>?select=...&order=...).

    Every call hits the service; nothing is cached between calls, so a fresh
    fetch always reflects the latest mutations.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: int = settings.REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        base_url = base_url or settings.DATA_SERVICE_URL
        if not base_url:
            raise ValueError("DATA_SERVICE_URL is not set.")

        self.base_url = base_url.rstrip("/")
        self.api_key = api_key or settings.DATA_SERVICE_KEY
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _query(self, table: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        url = f"{self.base_url}/rest/v1/{table}"
        logger.debug(f"GET {url} {params}")
        try:
            response = self.session.get(
                url, params=params, headers=self._headers(), timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise DataServiceError(table, str(e)) from e

        try:
            rows = response.json()
        except ValueError as e:
            raise DataServiceError(table, f"invalid JSON response ({e})") from e

        logger.info(f"  > Fetched {len(rows)} rows from '{table}'.")
        return rows

    def fetch_products(self) -> list[dict[str, Any]]:
        return self._query("products", {"select": "*", "order": "name.asc"})

    def fetch_suppliers(self) -> list[dict[str, Any]]:
        return self._query("suppliers", {"select": "*"})

    def fetch_transactions(
        self,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
        ascending: bool = True,
    ) -> list[dict[str, Any]]:
        """
        Transactions ordered by `created_at`, each with its product's name and
        sku flattened into `product_name` / `product_sku`.
        """
        params: dict[str, Any] = {
            "select": "*,products(name,sku)",
            "order": f"created_at.{'asc' if ascending else 'desc'}",
        }
        if since is not None:
            params["created_at"] = f"gte.{since.isoformat()}"
        if limit is not None:
            params["limit"] = limit

        rows = self._query("transactions", params)
        for row in rows:
            product = row.pop("products", None) or {}
            row["product_name"] = product.get("name")
            row["product_sku"] = product.get("sku")
        return rows
