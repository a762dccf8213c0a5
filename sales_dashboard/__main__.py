"""
Main entry point for running sales_dashboard as a module.

Usage:
    python -m sales_dashboard [options]
"""
import sys
from .cli import main

if __name__ == "__main__":
    sys.exit(main())
