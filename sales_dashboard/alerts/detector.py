"""
Change detection between successive polls of the live bill list.

A row is new when no row of the previous snapshot has the same
(time, amount). Item list and payment mode are not part of the identity,
so two bills shown at the same minute for the same amount look like one.
"""
from __future__ import annotations
from typing import Iterable, Optional, Sequence

from loguru import logger

from adapters.adapter_types import SiteRow
from ..models import AlertEvent


class ChangeDetector:
    """
    Keeps the last non-empty snapshot per site and reports rows that appeared since.

    Every site starts from an empty snapshot, so the first non-empty poll
    reports all of its rows. Call prime() first to start from a known list
    instead.

    Usage:
        detector = ChangeDetector()
        detector.prime("Vikhroli", rows)         # optional baseline
        events = detector.observe("Vikhroli", newer_rows)
    """

    def __init__(self):
        self._snapshots: dict[str, list[SiteRow]] = {}

    def snapshot(self, site: str) -> list[SiteRow]:
        return list(self._snapshots.get(site, []))

    def has_baseline(self, site: str) -> bool:
        return site in self._snapshots

    def prime(self, site: str, rows: Iterable[SiteRow]):
        """Set the baseline snapshot without emitting anything."""
        rows = list(rows)
        if rows:
            self._snapshots[site] = rows

    def reset(self, site: Optional[str] = None):
        if site is None:
            self._snapshots.clear()
        else:
            self._snapshots.pop(site, None)

    def observe(self, site: str, rows: Sequence[SiteRow]) -> list[AlertEvent]:
        """
        Compare `rows` with the stored snapshot and replace it.

        An empty snapshot (failed fetch, nothing sold yet) emits nothing and
        keeps the stored snapshot.
        """
        rows = list(rows)
        if not rows:
            logger.debug(f"{site}: empty snapshot, keeping previous state")
            return []

        previous = self._snapshots.get(site, [])
        self._snapshots[site] = rows

        seen = {r.identity for r in previous}
        events = [
            AlertEvent(
                site=site,
                items=list(r.items),
                amount=r.amount,
                time=r.time,
                payment_mode=r.payment_mode,
            )
            for r in rows
            if r.identity not in seen
        ]
        if events:
            logger.info(f"{site}: {len(events)} new sale(s)")
        return events
