"""Mini README: Reporting helpers for the gift ledger.

The `summary` module derives dashboard totals, occasion and monthly charts,
and contact rankings from a snapshot's transaction log.
"""

from .summary import LedgerAnalytics, TransactionFilter

__all__ = ["LedgerAnalytics", "TransactionFilter"]
