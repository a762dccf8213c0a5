"""
Live sales watch: polls each site's bill list and announces new sales.
"""

from .detector import ChangeDetector
from .snapshots import (
    REFRESH_HEADER,
    HttpSnapshotSource,
    SnapshotSource,
    StoreSnapshotSource,
    build_refresh_payload,
    is_background_refresh,
    parse_refresh_payload,
)
from .announcer import AlertSink, CommandAlertSink, LogAlertSink, build_sinks, render_announcement
from .poller import PollScheduler

__all__ = [
    "ChangeDetector",
    "REFRESH_HEADER",
    "HttpSnapshotSource",
    "SnapshotSource",
    "StoreSnapshotSource",
    "build_refresh_payload",
    "is_background_refresh",
    "parse_refresh_payload",
    "AlertSink",
    "CommandAlertSink",
    "LogAlertSink",
    "build_sinks",
    "render_announcement",
    "PollScheduler",
]
