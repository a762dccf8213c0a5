"""
MongoDB client for one site's point-of-sale store.

Features:
- Timezone-aware reads (instants come back in the dashboard timezone)
- Automatic retry with exponential backoff on driver errors
- Driver errors surface as StoreUnavailable once retries run out
"""
from __future__ import annotations
from typing import Any, Optional
from zoneinfo import ZoneInfo

from loguru import logger
from pymongo import MongoClient
from pymongo.errors import PyMongoError
from tenacity import RetryError, Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from adapters.adapter_types import StoreUnavailable


class MongoStoreClient:
    def __init__(
        self,
        site: str,
        uri: str,
        timezone: str = "Asia/Kolkata",
        timeout_ms: int = 5000,
        retry_attempts: int = 3,
        client: Optional[MongoClient] = None,
    ):
        self.site = site
        self.retry_attempts = max(1, retry_attempts)
        self.client = client or MongoClient(
            uri,
            tz_aware=True,
            tzinfo=ZoneInfo(timezone),
            serverSelectionTimeoutMS=timeout_ms,
            connectTimeoutMS=timeout_ms,
            socketTimeoutMS=timeout_ms,
        )
        # Database named in the URI, else the driver default
        self.db = self.client.get_default_database(default="test")

    def _retrying(self) -> Retrying:
        return Retrying(
            wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
            stop=stop_after_attempt(self.retry_attempts),
            retry=retry_if_exception_type(PyMongoError),
            before_sleep=lambda retry_state: logger.warning(
                f"Retrying {self.site} store query (attempt {retry_state.attempt_number})..."
            ),
        )

    def find(
        self,
        collection: str,
        query: dict,
        projection: Optional[dict] = None,
        sort: Optional[list[tuple[str, int]]] = None,
        limit: int = 0,
    ) -> list[dict[str, Any]]:
        """
        Run a find and materialise the cursor.

        Raises:
            StoreUnavailable: if the query still fails after retries
        """
        try:
            for attempt in self._retrying():
                with attempt:
                    cursor = self.db[collection].find(query, projection)
                    if sort:
                        cursor = cursor.sort(sort)
                    if limit:
                        cursor = cursor.limit(limit)
                    return list(cursor)
        except RetryError as e:
            cause = e.last_attempt.exception()
            logger.error(f"{self.site}: {collection} query failed: {cause}")
            raise StoreUnavailable(self.site, f"{collection} query failed: {cause}") from cause

    def ping(self) -> dict:
        """Check the store answers; never raises."""
        try:
            self.client.admin.command("ping")
            return {"status": "connected", "site": self.site, "database": self.db.name}
        except PyMongoError as e:
            return {"status": "failed", "site": self.site, "error": str(e)}

    def close(self):
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
