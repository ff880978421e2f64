"""
Finance Tracker - Source Package

A personal expense tracker: record transactions, search and sort them,
and summarize spending against a budget.

DESIGN PRINCIPLES:
1. Validate at the boundary, store only clean records
2. Fail visibly, never crash the session
3. Every change is announced and logged
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
