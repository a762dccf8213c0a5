"""
Sales Dashboard - month-to-date sales, projections and live sale alerts for two sites.

Reads bills, returns and last year's sales from each site's point-of-sale
store and produces one comparable dashboard:

Key Features:
- Per-site and combined daily series (every day of the month present)
- Run-rate month-end projection against each site's target
- Category profit from a configurable margin table, net of fixed expenses and returns
- Payment-mode split and year-over-year comparison
- Live polling of today's bills with spoken/logged new-sale alerts

Usage:
    python -m sales_dashboard --month 2025-08
    python -m sales_dashboard --watch
"""

__version__ = "1.0.0"

from .config import DashboardConfig, SiteConfig
from .dashboard import DashboardService
from .window import InvalidMonthSelector, MonthWindow, resolve_month

__all__ = [
    "DashboardConfig",
    "SiteConfig",
    "DashboardService",
    "InvalidMonthSelector",
    "MonthWindow",
    "resolve_month",
    "__version__",
]
