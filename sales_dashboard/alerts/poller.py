"""
Fixed-interval polling loop for the live sales watch.

Each tick fetches every site's snapshot, diffs it in the ChangeDetector
and hands new-sale events to the sinks. run() ticks one after another on a
single thread; a tick that overruns the interval delays the next one
instead of overlapping it. tick() may also be called from another thread
(a forced refresh); a site whose poll is still in flight is skipped.
"""
from __future__ import annotations
import threading
import time
from typing import Callable, Iterable, Optional, Sequence

from loguru import logger

from ..models import AlertEvent
from .announcer import AlertSink
from .detector import ChangeDetector
from .snapshots import SnapshotSource


class PollScheduler:
    """
    Usage:
        scheduler = PollScheduler(detector, source, sinks, sites, interval=10)
        scheduler.prime()        # optional: start from the current lists
        scheduler.run()          # until stop() or Ctrl-C
    """

    def __init__(
        self,
        detector: ChangeDetector,
        source: SnapshotSource,
        sinks: Iterable[AlertSink],
        sites: Sequence[str],
        interval: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if interval <= 0:
            raise ValueError("Poll interval must be positive")
        self.detector = detector
        self.source = source
        self.sinks = list(sinks)
        self.sites = list(sites)
        self.interval = interval
        self.clock = clock
        self.ticks = 0
        self._stop = threading.Event()
        self._in_flight = {site: threading.Lock() for site in self.sites}

    def _fetch(self, sites: Sequence[str]) -> dict:
        try:
            return self.source.fetch(sites)
        except Exception as e:
            # Treated as empty snapshots; the detector keeps its state
            logger.warning(f"Poll failed: {e}")
            return {}

    def prime(self):
        """Seed the detector with the current lists without emitting anything."""
        snapshots = self._fetch(self.sites)
        for site in self.sites:
            self.detector.prime(site, snapshots.get(site, []))
        logger.debug(f"Baseline set for {len(snapshots)} site(s)")

    def tick(self) -> list[AlertEvent]:
        """Run one poll: fetch, diff, replace state, emit."""
        held = []
        for site in self.sites:
            if self._in_flight[site].acquire(blocking=False):
                held.append(site)
            else:
                logger.debug(f"{site}: previous poll still running, skipping")
        if not held:
            return []

        try:
            snapshots = self._fetch(held)
            events = []
            for site in held:
                events.extend(self.detector.observe(site, snapshots.get(site, [])))
        finally:
            for site in held:
                self._in_flight[site].release()

        for event in events:
            self._emit(event)
        self.ticks += 1
        return events

    def _emit(self, event: AlertEvent):
        for sink in self.sinks:
            sink.emit(event)

    def run(self, max_ticks: Optional[int] = None):
        """Poll until stop() is called (or max_ticks ticks have run)."""
        logger.info(f"Watching {', '.join(self.sites)} every {self.interval:g}s")
        self._stop.clear()
        next_due = self.clock()
        while not self._stop.is_set():
            self.tick()
            if max_ticks is not None and self.ticks >= max_ticks:
                break
            next_due += self.interval
            now = self.clock()
            if next_due < now:
                # Overran: skip the missed slots rather than bursting
                next_due = now + self.interval
            self._stop.wait(next_due - now)
        logger.info(f"Stopped watching after {self.ticks} polls")

    def stop(self):
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()
