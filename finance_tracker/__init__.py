"""
Finance Tracker - Source Package

A personal ledger: record income, expenses, savings and emergency-fund
entries, see the running balance, and correct or retire entries.

DESIGN PRINCIPLES:
1. The hosted table is the only source of truth
2. One amount column per entry, enforced when the row is written
3. Remote failures are logged and reported, never raised into the UI
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
