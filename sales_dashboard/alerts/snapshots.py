"""
Row snapshot sources for the live sales watch.

- StoreSnapshotSource reads today's bills straight from each site's store
- HttpSnapshotSource asks the dashboard for its reduced background-refresh
  payload (rows only, no page)

Fetch failures are logged and come back as empty snapshots, which the
change detector ignores.
"""
from __future__ import annotations
from datetime import datetime
from typing import Callable, Mapping, Optional, Protocol, Sequence

import requests
from loguru import logger
from pydantic import ValidationError

from adapters.adapter_types import SiteRow, StoreUnavailable
from ..window import today_bounds

REFRESH_HEADER = "X-Background-Refresh"

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "sales-dashboard/1.0",
    REFRESH_HEADER: "1",
}


class SnapshotSource(Protocol):
    def fetch(self, sites: Sequence[str]) -> dict[str, list[SiteRow]]: ...


class RowStore(Protocol):
    site: str

    def query_site_rows(self, start: datetime, end: datetime) -> list[SiteRow]: ...


def is_background_refresh(headers: Mapping[str, str]) -> bool:
    """True when a request carries the background-refresh marker header."""
    for key, value in headers.items():
        if key.lower() == REFRESH_HEADER.lower():
            return value.strip().lower() in ("1", "true", "yes")
    return False


def build_refresh_payload(snapshots: Mapping[str, Sequence[SiteRow]]) -> dict:
    """Reduced payload returned to background-refresh requests."""
    return {"sites": {site: [r.model_dump() for r in rows] for site, rows in snapshots.items()}}


def parse_refresh_payload(payload: dict) -> dict[str, list[SiteRow]]:
    sites = payload.get("sites") or {}
    return {site: [SiteRow.model_validate(r) for r in rows or []] for site, rows in sites.items()}


class StoreSnapshotSource:
    """Today's bills per site, newest first, read from the stores."""

    def __init__(self, stores: Mapping[str, RowStore], clock: Callable[[], datetime]):
        self.stores = dict(stores)
        self.clock = clock

    def fetch(self, sites: Sequence[str]) -> dict[str, list[SiteRow]]:
        start, end = today_bounds(self.clock())
        snapshots = {}
        for site in sites:
            store = self.stores.get(site)
            if store is None:
                logger.warning(f"No store for {site}, skipping")
                snapshots[site] = []
                continue
            try:
                snapshots[site] = list(store.query_site_rows(start, end))
            except StoreUnavailable as e:
                logger.warning(f"Poll of {site} failed: {e}")
                snapshots[site] = []
        return snapshots


class HttpSnapshotSource:
    """Polls the dashboard endpoint with the background-refresh marker."""

    def __init__(
        self,
        url: str,
        timeout: float = 8.0,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(DEFAULT_HEADERS)

    def fetch(self, sites: Sequence[str]) -> dict[str, list[SiteRow]]:
        empty = {site: [] for site in sites}
        try:
            r = self.session.get(self.url, timeout=self.timeout)
            r.raise_for_status()
            parsed = parse_refresh_payload(r.json())
        except requests.RequestException as e:
            logger.warning(f"Background refresh from {self.url} failed: {e}")
            return empty
        except (ValueError, ValidationError) as e:
            logger.warning(f"Background refresh from {self.url} returned a bad payload: {e}")
            return empty
        return {site: parsed.get(site, []) for site in sites}

    def close(self):
        self.session.close()
