"""
Alert sinks for new-sale events.

LogAlertSink writes the announcement to the log; CommandAlertSink hands
it to a text-to-speech command (e.g. `espeak` or `say`) so the counter
hears it.
"""
from __future__ import annotations
import shlex
import subprocess
from typing import Optional, Protocol

from jinja2 import Template
from loguru import logger

from ..models import AlertEvent

ANNOUNCEMENT_TEMPLATE = (
    "New sale at {{ site }}"
    "{% if items %}: {{ items | join(', ') }}{% endif %}"
    " for {{ currency }} {{ '%.0f' | format(amount) }}"
)


def render_announcement(event: AlertEvent, template_str: str = ANNOUNCEMENT_TEMPLATE, currency: str = "rupees") -> str:
    return Template(template_str).render(
        site=event.site,
        items=event.items,
        amount=event.amount,
        time=event.time,
        payment_mode=event.payment_mode,
        currency=currency,
    )


class AlertSink(Protocol):
    def emit(self, event: AlertEvent) -> None: ...


class LogAlertSink:
    def __init__(self, template_str: str = ANNOUNCEMENT_TEMPLATE):
        self.template_str = template_str

    def emit(self, event: AlertEvent) -> None:
        logger.success(f"[{event.time}] {render_announcement(event, self.template_str)}")


class CommandAlertSink:
    """Speaks the announcement by running `command <text>`."""

    def __init__(self, command: str, template_str: str = ANNOUNCEMENT_TEMPLATE, timeout: float = 15.0):
        self.argv = shlex.split(command)
        if not self.argv:
            raise ValueError("Alert command must not be empty")
        self.template_str = template_str
        self.timeout = timeout

    def emit(self, event: AlertEvent) -> None:
        text = render_announcement(event, self.template_str)
        try:
            subprocess.run([*self.argv, text], check=True, timeout=self.timeout, capture_output=True)
        except (OSError, subprocess.SubprocessError) as e:
            # A missing speaker must not stop the watch
            logger.warning(f"Alert command {self.argv[0]} failed: {e}")


def build_sinks(alert_command: Optional[str] = None) -> list[AlertSink]:
    sinks: list[AlertSink] = [LogAlertSink()]
    if alert_command:
        sinks.append(CommandAlertSink(alert_command))
    return sinks
