"""Mini README: Aggregations over the transaction log for dashboards and charts.

Structure:
    * TransactionFilter - optional date range, person, occasion and tag criteria.
    * LedgerAnalytics - totals, occasion breakdown, monthly activity and contact rankings.

Aggregates here are derived from transactions (optionally filtered), not from
the persons' running totals, so they reflect exactly the selected slice.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..ledger.models import LedgerSnapshot, Person, Transaction, TransactionType
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class TransactionFilter:
    """Criteria narrowing the analysed transactions. Unset fields match everything."""

    start_date: Optional[str] = None
    end_date: Optional[str] = None
    person_id: Optional[str] = None
    occasion: Optional[str] = None
    tag: Optional[str] = None

    def matches(self, transaction: Transaction) -> bool:
        if self.start_date and transaction.date < self.start_date:
            return False
        if self.end_date and transaction.date > self.end_date:
            return False
        if self.person_id and transaction.person_id != self.person_id:
            return False
        if self.occasion and transaction.occasion != self.occasion:
            return False
        if self.tag and self.tag not in transaction.tags:
            return False
        return True

    @property
    def active_count(self) -> int:
        return sum(
            1
            for value in (self.start_date, self.end_date, self.person_id, self.occasion, self.tag)
            if value
        )


class LedgerAnalytics:
    """Read-only views over a snapshot."""

    def __init__(self, snapshot: LedgerSnapshot, criteria: Optional[TransactionFilter] = None) -> None:
        self.snapshot = snapshot
        self.criteria = criteria or TransactionFilter()
        self._transactions = [
            transaction for transaction in snapshot.transactions if self.criteria.matches(transaction)
        ]
        LOGGER.debug(
            "Analytics over %s of %s transactions (%s active filters)",
            len(self._transactions),
            len(snapshot.transactions),
            self.criteria.active_count,
        )

    @property
    def transactions(self) -> List[Transaction]:
        return list(self._transactions)

    def totals(self) -> Dict[str, float]:
        """Given, received and net (given minus received) over the selection."""

        given = sum(t.amount for t in self._transactions if t.type is TransactionType.GIVE)
        received = sum(t.amount for t in self._transactions if t.type is TransactionType.RECEIVE)
        return {"given": given, "received": received, "net": given - received}

    def occasion_breakdown(self) -> List[Dict[str, Any]]:
        """Amount per occasion, largest first."""

        amounts: Dict[str, float] = {}
        for transaction in self._transactions:
            amounts[transaction.occasion] = amounts.get(transaction.occasion, 0.0) + transaction.amount
        return [
            {"name": name, "value": value}
            for name, value in sorted(amounts.items(), key=lambda item: item[1], reverse=True)
        ]

    def monthly_activity(self) -> List[Dict[str, Any]]:
        """Give and receive sums per ``YYYY-MM``, oldest month first."""

        months: Dict[str, Dict[str, Any]] = {}
        for transaction in self._transactions:
            month = transaction.date[:7]
            bucket = months.setdefault(month, {"name": month, "give": 0.0, "receive": 0.0})
            key = "give" if transaction.type is TransactionType.GIVE else "receive"
            bucket[key] += transaction.amount
        return [months[month] for month in sorted(months)]

    def top_contacts(self, limit: int = 5) -> List[Dict[str, Any]]:
        """Persons with the largest combined volume in the selection."""

        contacts: Dict[str, Dict[str, Any]] = {}
        for transaction in self._transactions:
            entry = contacts.setdefault(
                transaction.person_id,
                {"person_id": transaction.person_id, "name": transaction.person_name, "give": 0.0, "receive": 0.0},
            )
            key = "give" if transaction.type is TransactionType.GIVE else "receive"
            entry[key] += transaction.amount
        ranked = sorted(contacts.values(), key=lambda entry: entry["give"] + entry["receive"], reverse=True)
        return ranked[:limit]

    def people_by_activity(self) -> List[Person]:
        """All persons, most total activity first."""

        return sorted(
            self.snapshot.people.values(),
            key=lambda person: person.total_given + person.total_received,
            reverse=True,
        )

    def recent_transactions(self, limit: Optional[int] = 5) -> List[Transaction]:
        """Newest transactions of the selection, in log order."""

        if limit is None:
            return list(self._transactions)
        return self._transactions[:limit]

    def summarise(self) -> Dict[str, Any]:
        """Bundle every view into one JSON-friendly payload."""

        return {
            "totals": self.totals(),
            "transaction_count": len(self._transactions),
            "active_filters": self.criteria.active_count,
            "occasions": self.occasion_breakdown(),
            "monthly": self.monthly_activity(),
            "top_contacts": self.top_contacts(),
        }
