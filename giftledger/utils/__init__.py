"""Mini README: Small shared helpers for the gift ledger.

Currently exports the timestamp helpers that keep creation instants and
transaction dates in their comparable ISO forms.
"""

from .timestamps import is_iso_date, today_iso, utc_timestamp

__all__ = ["is_iso_date", "today_iso", "utc_timestamp"]
