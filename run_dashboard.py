#!/usr/bin/env python3
"""
Convenience script to show the sales dashboard or run the live sales watch.

Usage:
    # Current month
    python run_dashboard.py

    # A past month as JSON
    python run_dashboard.py --month 2025-08 --json

    # Announce new bills as they come in
    python run_dashboard.py --watch
"""
import sys

# Add project root to path for imports
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent))

from sales_dashboard.cli import main

if __name__ == "__main__":
    sys.exit(main())
