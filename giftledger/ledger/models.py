"""Mini README: Data model for the reciprocal gift ledger.

Structure:
    * TransactionType - GIVE versus RECEIVE direction of a gift.
    * Occasion - the occasions offered by the entry form.
    * Person - per-contact running totals and net balance.
    * TransactionDraft - a gift event before id/timestamp assignment.
    * Transaction - a recorded gift event.
    * LedgerSnapshot - aggregate root: newest-first transactions plus persons by id.

Serialised field names use the camelCase keys of the stored JSON document so
existing ledgers and backups stay readable. Balances follow the policy
"giving increases your balance, receiving decreases it".
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..utils.timestamps import is_iso_date

TAG_OPTIONS = ["ff亲人", "zz亲人", "ff其他", "zz其他"]


class TransactionType(str, Enum):
    """Direction of a gift relative to the ledger owner."""

    GIVE = "GIVE"
    RECEIVE = "RECEIVE"

    @classmethod
    def from_str(cls, value: str) -> "TransactionType":
        """Coerce arbitrary casing into a valid transaction type."""

        try:
            return cls(value.strip().upper())
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported transaction type: {value}") from error


class Occasion(str, Enum):
    BIRTHDAY = "生日"
    BIRTHDAY_BANQUET = "生日宴"
    FULL_MOON = "满月宴"
    FIRST_BIRTHDAY = "周岁宴"
    WEDDING = "婚礼"
    HOUSEWARMING = "乔迁新房"
    ACADEMIC = "升学宴"
    FESTIVAL = "节日"
    VISIT_SICK = "生病探望"
    DINNER = "请客吃饭"
    OTHER = "其他"


OCCASION_OPTIONS = [occasion.value for occasion in Occasion]


@dataclass(slots=True)
class Person:
    """A contact with running totals maintained by the transaction engine."""

    id: str
    name: str
    tags: List[str] = field(default_factory=list)
    total_given: float = 0.0
    total_received: float = 0.0
    balance: float = 0.0
    last_interaction: str = ""

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "tags": list(self.tags),
            "totalGiven": self.total_given,
            "totalReceived": self.total_received,
            "lastInteraction": self.last_interaction,
            "balance": self.balance,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Person":
        return cls(
            id=str(payload["id"]),
            name=str(payload.get("name", "")),
            tags=[str(tag) for tag in payload.get("tags") or []],
            total_given=float(payload.get("totalGiven", 0.0)),
            total_received=float(payload.get("totalReceived", 0.0)),
            balance=float(payload.get("balance", 0.0)),
            last_interaction=str(payload.get("lastInteraction", "")),
        )


@dataclass(slots=True)
class TransactionDraft:
    """Gift event supplied by a caller, lacking ``id`` and ``created_at``."""

    type: TransactionType
    person_id: str
    person_name: str
    amount: float
    date: str
    occasion: str = ""
    notes: str = ""
    tags: List[str] = field(default_factory=list)

    def validate(self) -> None:
        """Reject drafts the engine must not apply."""

        validate_fields(self.type, self.person_id, self.person_name, self.amount, self.date)


@dataclass(slots=True)
class Transaction:
    """A recorded gift event. ``id`` and ``created_at`` never change after creation."""

    id: str
    type: TransactionType
    person_id: str
    person_name: str
    amount: float
    date: str
    created_at: str
    occasion: str = ""
    notes: str = ""
    tags: List[str] = field(default_factory=list)

    def validate(self) -> None:
        validate_fields(self.type, self.person_id, self.person_name, self.amount, self.date)

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "type": self.type.value,
            "personId": self.person_id,
            "personName": self.person_name,
            "amount": self.amount,
            "date": self.date,
            "occasion": self.occasion,
            "notes": self.notes,
            "tags": list(self.tags),
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Transaction":
        return cls(
            id=str(payload["id"]),
            type=TransactionType.from_str(str(payload["type"])),
            person_id=str(payload["personId"]),
            person_name=str(payload.get("personName", "")),
            amount=float(payload["amount"]),
            date=str(payload["date"]),
            created_at=str(payload.get("createdAt", "")),
            occasion=str(payload.get("occasion", "")),
            notes=str(payload.get("notes", "")),
            tags=[str(tag) for tag in payload.get("tags") or []],
        )


def validate_fields(
    transaction_type: object, person_id: str, person_name: str, amount: float, date: str
) -> None:
    """Raise ``ValueError`` for payloads a caller's validation should have caught."""

    if not isinstance(transaction_type, TransactionType):
        raise ValueError(f"Unsupported transaction type: {transaction_type}")
    if not person_name or not person_name.strip():
        raise ValueError("Person name must not be empty.")
    if not person_id:
        raise ValueError("Person id must not be empty.")
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise ValueError(f"Amount must be a number, got {amount!r}.")
    if not math.isfinite(amount) or amount <= 0:
        raise ValueError(f"Amount must be a positive finite number, got {amount!r}.")
    if not is_iso_date(date):
        raise ValueError(f"Date must be an ISO formatted YYYY-MM-DD string, got {date!r}.")


@dataclass(slots=True)
class LedgerSnapshot:
    """Full ledger state: transactions newest first, persons keyed by id."""

    transactions: List[Transaction] = field(default_factory=list)
    people: Dict[str, Person] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "LedgerSnapshot":
        return cls()

    def get_person(self, person_id: str) -> Optional[Person]:
        return self.people.get(person_id)

    def find_transaction(self, transaction_id: str) -> Optional[Transaction]:
        for transaction in self.transactions:
            if transaction.id == transaction_id:
                return transaction
        return None

    def transactions_for(self, person_id: str) -> Iterable[Transaction]:
        return (transaction for transaction in self.transactions if transaction.person_id == person_id)

    def as_dict(self) -> Dict[str, List[Dict[str, object]]]:
        """Export in the stored document layout ``{people: [...], transactions: [...]}``."""

        return {
            "people": [person.as_dict() for person in self.people.values()],
            "transactions": [transaction.as_dict() for transaction in self.transactions],
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "LedgerSnapshot":
        """Build a snapshot from a decoded document; missing sections are empty."""

        if not isinstance(payload, Mapping):
            raise ValueError("Ledger document must be a JSON object.")
        people = [Person.from_dict(entry) for entry in payload.get("people") or []]
        transactions = [Transaction.from_dict(entry) for entry in payload.get("transactions") or []]
        return cls(
            transactions=transactions,
            people={person.id: person for person in people},
        )
