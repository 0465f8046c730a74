"""
Finance Ledger - Source Package

A personal finance ledger: record income and expense entries, summarize
them by month, category or date range, and keep them in a plain text file.

DESIGN PRINCIPLES:
1. Validate at the boundary, keep the core simple
2. Fail early, fail visibly
3. A damaged file loads as much as it can, and says what it skipped
4. Every step must be auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Ledger Team"
