"""
Command line entry point for the sales dashboard.

Usage:
    # This month's dashboard for both sites
    python -m sales_dashboard

    # A specific month, as JSON for another renderer
    python -m sales_dashboard --month 2025-08 --json

    # Check both stores answer
    python -m sales_dashboard --test

    # Live sales watch (announces new bills every 10 seconds)
    python -m sales_dashboard --watch --interval 10
"""
from __future__ import annotations
import argparse
import sys
from typing import Optional

from loguru import logger

from adapters.adapter_types import StoreUnavailable
from .config import DashboardConfig
from .dashboard import DashboardService
from .models import DashboardResult
from .window import InvalidMonthSelector


def configure_logging(level: str = "INFO", log_file: Optional[str] = None):
    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_file:
        logger.add(log_file, level=level, rotation="1 day", retention="14 days")


def _money(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:,.2f}"


def print_summary(result: DashboardResult):
    print("=" * 60)
    print(f"SALES DASHBOARD {result.month}  (day {result.days_passed} of {result.total_days})")
    print("=" * 60)

    print(f"\n{'Location':<20}{'Today':>18}{'Month':>18}")
    for site in result.sites:
        print(
            f"{site:<20}{_money(result.merged.today_by_site[site]):>18}"
            f"{_money(result.merged.month_by_site[site]):>18}"
        )
    print(f"{'Total':<20}{_money(result.merged.today_total):>18}{_money(result.merged.month_total):>18}")

    print("\nProjection:")
    for p in [*result.projections, result.combined_projection]:
        print(
            f"  {p.label:<18} avg {_money(p.average):>14}  predicted {_money(p.predicted):>16}"
            f"  target {_money(p.target):>16}  {p.status}"
        )

    print("\nNet profit:")
    for n in result.net_profit:
        print(
            f"  {n.site:<18} gross {_money(n.gross_profit):>14}  expense {_money(n.fixed_expense):>14}"
            f"  returns {_money(n.returns_deducted):>12}  net {_money(n.net_profit):>14} ({n.net_percent:.2f}%)"
        )

    print("\nPayment modes:")
    for m in result.merged_payment_modes:
        print(f"  {m.mode:<18} {_money(m.total):>16}")

    yoy = result.year_over_year_comparison
    growth = "n/a" if yoy.growth_percent is None else f"{yoy.growth_percent:+.2f}%"
    print(
        f"\nYear over year: {_money(yoy.current_total)} vs {_money(yoy.previous_total)}"
        f" in {yoy.previous_year} ({growth})"
    )


def watch(config: DashboardConfig, service: DashboardService, interval: Optional[float] = None):
    from .alerts import (
        ChangeDetector,
        HttpSnapshotSource,
        PollScheduler,
        StoreSnapshotSource,
        build_sinks,
    )

    if config.refresh_url:
        source = HttpSnapshotSource(config.refresh_url)
    else:
        source = StoreSnapshotSource(service.stores, service.now)

    scheduler = PollScheduler(
        ChangeDetector(),
        source,
        build_sinks(config.alert_command),
        service.sites,
        interval=interval or config.poll_interval,
    )
    if config.prime_baseline:
        scheduler.prime()
    try:
        scheduler.run()
    finally:
        scheduler.stop()


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Two-site sales dashboard and live sales watch",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--month", help="Month to show (YYYY-MM, default: current month)")
    parser.add_argument("--json", action="store_true", help="Print the dashboard as JSON")
    parser.add_argument("--watch", action="store_true", help="Poll for new bills and announce them")
    parser.add_argument("--interval", type=float, help="Poll interval in seconds (default: POLL_INTERVAL)")
    parser.add_argument("--test", action="store_true", help="Test store connections and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress output except errors")

    args = parser.parse_args(argv)

    config = DashboardConfig.from_env()
    if args.quiet:
        level = "ERROR"
    elif args.verbose:
        level = "DEBUG"
    else:
        level = config.log_level
    configure_logging(level, config.log_file)

    errors = config.validate()
    if errors:
        for err in errors:
            logger.error(f"Configuration error: {err}")
        return 1

    try:
        with DashboardService.from_config(config) as service:
            if args.test:
                ok = True
                for site, store in service.stores.items():
                    result = store.ping()
                    if result["status"] == "connected":
                        print(f"✓ {site}: connected ({result.get('database', '')})")
                    else:
                        ok = False
                        print(f"✗ {site}: {result.get('error', 'unknown error')}")
                return 0 if ok else 1

            if args.watch:
                watch(config, service, args.interval)
                return 0

            result = service.build(args.month)
            if args.json:
                print(result.model_dump_json(indent=2))
            else:
                print_summary(result)
            return 0

    except InvalidMonthSelector as e:
        logger.error(f"Invalid month: {e}")
        print(f"\n✗ {e}")
        return 1

    except StoreUnavailable as e:
        logger.error(f"Store unavailable: {e}")
        print(f"\n✗ Store unavailable: {e}")
        print("\nTroubleshooting:")
        print("  1. Check MONGO_URI_1 / MONGO_URI_2 in your .env file")
        print("  2. Run with --test to ping each store")
        return 1

    except KeyboardInterrupt:
        print("\n\nStopped by user")
        return 130

    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        print(f"\n✗ Unexpected error: {e}")
        return 1
