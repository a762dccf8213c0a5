"""
Configuration management for the sales dashboard.

Loads settings from environment variables (and a local .env file) with
sensible defaults. Business constants (site targets, fixed expenses and the
category margin table) live here and are passed into the aggregation code,
which never reads the environment itself.
"""
from __future__ import annotations
import json
import os
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


# Profit fraction of gross sales per item category.
DEFAULT_MARGIN_TABLE: dict[str, float] = {
    "Cake": 0.45,
    "Pastry": 0.5,
    "Bread": 0.35,
    "Cookies": 0.5,
    "Snacks": 0.4,
    "Chocolates": 0.35,
    "Beverages": 0.3,
    "Other": 0.6,
    "Others": 0.6,
}

DEFAULT_MARGIN = 0.3


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _parse_margin_table() -> dict[str, float]:
    """Merge MARGIN_TABLE (a JSON object) over the built-in table."""
    table = dict(DEFAULT_MARGIN_TABLE)
    raw = os.getenv("MARGIN_TABLE")
    if raw:
        overrides = json.loads(raw)
        table.update({str(k): float(v) for k, v in overrides.items()})
    return table


@dataclass
class SiteConfig:
    """One retail site: its store connection and fixed monthly figures."""

    name: str
    mongo_uri: str = ""
    target: float = 0.0
    fixed_expense: float = 0.0


def _site_from_env(index: int, name: str, target: float, expense: float) -> SiteConfig:
    return SiteConfig(
        name=os.getenv(f"SITE{index}_NAME", name),
        mongo_uri=os.getenv(f"MONGO_URI_{index}", ""),
        target=_env_float(f"SITE{index}_TARGET", target),
        fixed_expense=_env_float(f"SITE{index}_EXPENSE", expense),
    )


def _default_sites() -> list[SiteConfig]:
    return [
        _site_from_env(1, "Bangur Nagar", 1_200_000.0, 250_000.0),
        _site_from_env(2, "Vikhroli", 900_000.0, 200_000.0),
    ]


@dataclass
class DashboardConfig:
    """Configuration settings for the dashboard and the live sales watch."""

    sites: list[SiteConfig] = field(default_factory=_default_sites)

    # Profit breakdown
    margin_table: dict[str, float] = field(default_factory=_parse_margin_table)
    default_margin: float = field(
        default_factory=lambda: _env_float("DEFAULT_MARGIN", DEFAULT_MARGIN)
    )
    # Category that absorbs the manual bill adjustments
    adjustment_category: str = field(
        default_factory=lambda: os.getenv("ADJUSTMENT_CATEGORY", "Cake")
    )

    # Calendar
    timezone: str = field(default_factory=lambda: os.getenv("DASHBOARD_TZ", "Asia/Kolkata"))

    # Store access
    store_timeout_ms: int = field(
        default_factory=lambda: int(os.getenv("STORE_TIMEOUT_MS", "5000"))
    )
    retry_attempts: int = field(
        default_factory=lambda: int(os.getenv("STORE_RETRY_ATTEMPTS", "3"))
    )
    max_workers: int = field(default_factory=lambda: int(os.getenv("DASHBOARD_WORKERS", "8")))

    # Live sales watch
    poll_interval: float = field(default_factory=lambda: _env_float("POLL_INTERVAL", 10.0))
    refresh_url: Optional[str] = field(default_factory=lambda: os.getenv("REFRESH_URL") or None)
    alert_command: Optional[str] = field(
        default_factory=lambda: os.getenv("ALERT_COMMAND") or None
    )
    # Start the watch from the current bill lists instead of announcing them
    prime_baseline: bool = field(default_factory=lambda: _env_bool("PRIME_BASELINE", True))

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: Optional[str] = field(
        default_factory=lambda: os.getenv("DASHBOARD_LOG_FILE") or None
    )

    @classmethod
    def from_env(cls) -> "DashboardConfig":
        """Create config from environment variables."""
        return cls()

    def margin_for(self, category: str) -> float:
        return self.margin_table.get(category, self.default_margin)

    def site(self, name: str) -> SiteConfig:
        for s in self.sites:
            if s.name == name:
                return s
        raise KeyError(f"Unknown site: {name}")

    @property
    def site_names(self) -> list[str]:
        return [s.name for s in self.sites]

    def validate(self, require_stores: bool = True) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []
        if not self.sites:
            errors.append("At least one site is required")
        names = self.site_names
        if len(set(names)) != len(names):
            errors.append("Site names must be unique")
        for i, s in enumerate(self.sites, start=1):
            if require_stores and not s.mongo_uri:
                errors.append(f"MONGO_URI_{i} is required for site '{s.name}'")
            if s.target < 0:
                errors.append(f"Target for '{s.name}' must not be negative")
            if s.fixed_expense < 0:
                errors.append(f"Fixed expense for '{s.name}' must not be negative")
        for category, margin in self.margin_table.items():
            if not 0 <= margin <= 1:
                errors.append(f"Margin for '{category}' must be between 0 and 1")
        if self.poll_interval <= 0:
            errors.append("POLL_INTERVAL must be positive")
        if self.max_workers < 1:
            errors.append("DASHBOARD_WORKERS must be at least 1")
        return errors
