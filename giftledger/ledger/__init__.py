"""Mini README: Gift ledger domain package.

Groups the data model, the pure transaction engine that keeps each person's
totals and balance consistent with the transaction log, and the helpers that
resolve typed names to person ids.
"""

from .engine import LedgerConsistencyError, add_transaction, update_transaction
from .models import (
    OCCASION_OPTIONS,
    TAG_OPTIONS,
    LedgerSnapshot,
    Occasion,
    Person,
    Transaction,
    TransactionDraft,
    TransactionType,
)
from .resolver import person_id_for, resolve_person, suggest_people

__all__ = [
    "OCCASION_OPTIONS",
    "TAG_OPTIONS",
    "LedgerConsistencyError",
    "LedgerSnapshot",
    "Occasion",
    "Person",
    "Transaction",
    "TransactionDraft",
    "TransactionType",
    "add_transaction",
    "person_id_for",
    "resolve_person",
    "suggest_people",
    "update_transaction",
]
