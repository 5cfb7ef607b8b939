"""Mini README: Pure state transitions applying gift transactions to a snapshot.

Structure:
    * add_transaction - prepend a new transaction and credit its person.
    * update_transaction - revert the old version, apply the edited one in place.
    * LedgerConsistencyError - raised when a revert would leave negative totals.

Both operations take a ``LedgerSnapshot`` and return a new one without touching
the input or any storage. Persons are copied before being adjusted, so callers
may keep the previous snapshot around (for undo or comparison) safely.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Dict, Optional
from uuid import uuid4

from ..logging_utils import get_logger
from ..utils.timestamps import utc_timestamp
from .models import LedgerSnapshot, Person, Transaction, TransactionDraft, TransactionType

LOGGER = get_logger(__name__)

# Float sums such as 0.1 + 0.2 - 0.3 may land just below zero.
_TOLERANCE = 1e-9


class LedgerConsistencyError(RuntimeError):
    """A person's running totals no longer agree with the transaction log."""


def generate_id() -> str:
    return uuid4().hex


def add_transaction(
    snapshot: LedgerSnapshot,
    draft: TransactionDraft,
    *,
    id_factory: Callable[[], str] = generate_id,
    clock: Callable[[], str] = utc_timestamp,
) -> LedgerSnapshot:
    """Record ``draft`` as the newest transaction and update its person."""

    draft.validate()
    transaction = Transaction(
        id=id_factory(),
        type=draft.type,
        person_id=draft.person_id,
        person_name=draft.person_name,
        amount=float(draft.amount),
        date=draft.date,
        created_at=clock(),
        occasion=draft.occasion,
        notes=draft.notes,
        tags=list(draft.tags),
    )

    people = dict(snapshot.people)
    person = _resolve_or_create(people, transaction)
    if transaction.date > person.last_interaction:
        person.last_interaction = transaction.date
    _apply(person, transaction, sign=1)

    LOGGER.info(
        "Added %s transaction %s for person %s (%.2f)",
        transaction.type.value,
        transaction.id,
        person.id,
        transaction.amount,
    )
    return LedgerSnapshot(transactions=[transaction, *snapshot.transactions], people=people)


def update_transaction(
    snapshot: LedgerSnapshot,
    edited: Transaction,
    *,
    recompute_last_interaction: bool = True,
) -> LedgerSnapshot:
    """Replace an existing transaction, moving its effect between persons as needed.

    Unknown ids are a no-op: the snapshot is returned unchanged. ``created_at``
    always comes from the stored version. With ``recompute_last_interaction``
    the touched persons get the true latest date over their transactions;
    otherwise only a running maximum is taken, which never moves backwards.
    """

    previous = snapshot.find_transaction(edited.id)
    if previous is None:
        LOGGER.warning("Transaction %s not found; nothing to update", edited.id)
        return snapshot

    edited.validate()
    edited = replace(edited, amount=float(edited.amount), created_at=previous.created_at, tags=list(edited.tags))

    people = dict(snapshot.people)
    old_person = people.get(previous.person_id)
    if old_person is not None:
        old_person = replace(old_person, tags=list(old_person.tags))
        people[old_person.id] = old_person
        _apply(old_person, previous, sign=-1)
        _check_non_negative(old_person)
    else:
        LOGGER.warning(
            "Person %s referenced by transaction %s is missing; skipping revert",
            previous.person_id,
            previous.id,
        )

    new_person = _resolve_or_create(people, edited)
    _apply(new_person, edited, sign=1)
    if edited.date > new_person.last_interaction:
        new_person.last_interaction = edited.date

    transactions = [edited if transaction.id == edited.id else transaction for transaction in snapshot.transactions]

    if recompute_last_interaction:
        for person_id in {previous.person_id, edited.person_id}:
            person = people.get(person_id)
            if person is None:
                continue
            dates = [transaction.date for transaction in transactions if transaction.person_id == person_id]
            if dates:
                person.last_interaction = max(dates)

    LOGGER.info(
        "Updated transaction %s (person %s -> %s, %s %.2f -> %s %.2f)",
        edited.id,
        previous.person_id,
        edited.person_id,
        previous.type.value,
        previous.amount,
        edited.type.value,
        edited.amount,
    )
    return LedgerSnapshot(transactions=transactions, people=people)


def _resolve_or_create(people: Dict[str, Person], transaction: Transaction) -> Person:
    """Return a private copy of the referenced person, creating it when absent."""

    existing: Optional[Person] = people.get(transaction.person_id)
    if existing is None:
        person = Person(
            id=transaction.person_id,
            name=transaction.person_name,
            last_interaction=transaction.date,
        )
        LOGGER.debug("Created person %s (%s)", person.id, person.name)
    else:
        person = replace(existing, tags=list(existing.tags))
    people[person.id] = person
    return person


def _apply(person: Person, transaction: Transaction, *, sign: int) -> None:
    """Add (``sign=1``) or revert (``sign=-1``) a transaction's effect on ``person``."""

    amount = sign * transaction.amount
    if transaction.type is TransactionType.GIVE:
        person.total_given += amount
        person.balance += amount
    else:
        person.total_received += amount
        person.balance -= amount


def _check_non_negative(person: Person) -> None:
    for field_name in ("total_given", "total_received"):
        value = getattr(person, field_name)
        if value < -_TOLERANCE:
            raise LedgerConsistencyError(
                f"Reverting left person {person.id} with negative {field_name} ({value})."
            )
        if value < 0:
            setattr(person, field_name, 0.0)
    person.balance = person.total_given - person.total_received
