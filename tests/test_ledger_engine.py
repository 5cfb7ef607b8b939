"""Mini README: Tests covering the transaction engine's bookkeeping.

Structure:
    * Scenario tests walk Alice/Bob through adds, an amount edit and a reassignment.
    * Property tests check balances, non-negative totals, ordering and no-op edits.
"""

from __future__ import annotations

from dataclasses import replace
from itertools import count

import pytest

from giftledger.ledger import (
    LedgerConsistencyError,
    LedgerSnapshot,
    Person,
    Transaction,
    TransactionDraft,
    TransactionType,
    add_transaction,
    update_transaction,
)


def _ids():
    sequence = count(1)
    return lambda: f"txn_{next(sequence):04d}"


def _draft(transaction_type, person_id, name, amount, date, **extra) -> TransactionDraft:
    return TransactionDraft(
        type=transaction_type,
        person_id=person_id,
        person_name=name,
        amount=amount,
        date=date,
        **extra,
    )


def _assert_consistent(snapshot: LedgerSnapshot) -> None:
    for person in snapshot.people.values():
        assert person.balance == pytest.approx(person.total_given - person.total_received)
        assert person.total_given >= 0
        assert person.total_received >= 0


@pytest.fixture()
def scenario() -> dict:
    """Snapshots after Scenario A (Alice GIVE 100) and B (Alice RECEIVE 40)."""

    new_id = _ids()
    after_a = add_transaction(
        LedgerSnapshot.empty(),
        _draft(TransactionType.GIVE, "alice", "Alice", 100, "2024-01-01", occasion="婚礼"),
        id_factory=new_id,
        clock=lambda: "2024-01-01T09:00:00.000Z",
    )
    after_b = add_transaction(
        after_a,
        _draft(TransactionType.RECEIVE, "alice", "Alice", 40, "2024-02-01"),
        id_factory=new_id,
        clock=lambda: "2024-02-01T09:00:00.000Z",
    )
    return {"a": after_a, "b": after_b}


def test_first_gift_creates_person(scenario) -> None:
    """Scenario A: giving to a new contact creates them with the gift credited."""

    alice = scenario["a"].people["alice"]
    assert alice.name == "Alice"
    assert alice.total_given == pytest.approx(100)
    assert alice.total_received == pytest.approx(0)
    assert alice.balance == pytest.approx(100)
    assert alice.last_interaction == "2024-01-01"
    transaction = scenario["a"].transactions[0]
    assert transaction.id == "txn_0001"
    assert transaction.created_at == "2024-01-01T09:00:00.000Z"


def test_receiving_reduces_balance_and_advances_last_interaction(scenario) -> None:
    """Scenario B: a received gift lowers the balance."""

    alice = scenario["b"].people["alice"]
    assert alice.total_given == pytest.approx(100)
    assert alice.total_received == pytest.approx(40)
    assert alice.balance == pytest.approx(60)
    assert alice.last_interaction == "2024-02-01"
    assert len(scenario["b"].people) == 1


def test_add_prepends_and_keeps_previous_order(scenario) -> None:
    snapshot = scenario["b"]
    before = [transaction.id for transaction in snapshot.transactions]
    updated = add_transaction(
        snapshot,
        _draft(TransactionType.GIVE, "carol", "Carol", 12.5, "2023-06-01"),
        id_factory=lambda: "txn_new",
    )
    assert [transaction.id for transaction in updated.transactions] == ["txn_new", *before]


def test_older_gift_does_not_move_last_interaction_back(scenario) -> None:
    updated = add_transaction(
        scenario["b"],
        _draft(TransactionType.GIVE, "alice", "Alice", 5, "2023-12-31"),
    )
    assert updated.people["alice"].last_interaction == "2024-02-01"


def test_add_leaves_input_snapshot_untouched(scenario) -> None:
    original = scenario["a"]
    add_transaction(original, _draft(TransactionType.GIVE, "alice", "Alice", 10, "2024-03-01"))
    assert original.people["alice"].total_given == pytest.approx(100)
    assert len(original.transactions) == 1


def test_edit_amount_reapplies_difference(scenario) -> None:
    """Scenario C: lowering the first gift from 100 to 70."""

    snapshot = scenario["b"]
    first = snapshot.find_transaction("txn_0001")
    updated = update_transaction(snapshot, replace(first, amount=70))

    alice = updated.people["alice"]
    assert alice.total_given == pytest.approx(70)
    assert alice.total_received == pytest.approx(40)
    assert alice.balance == pytest.approx(30)
    assert [transaction.id for transaction in updated.transactions] == ["txn_0002", "txn_0001"]
    assert updated.find_transaction("txn_0001").created_at == first.created_at


def test_reassigning_to_new_person_moves_effect(scenario) -> None:
    """Scenario D: moving the edited gift from Alice to a brand-new Bob."""

    after_c = update_transaction(scenario["b"], replace(scenario["b"].find_transaction("txn_0001"), amount=70))
    first = after_c.find_transaction("txn_0001")
    after_d = update_transaction(after_c, replace(first, person_id="bob", person_name="Bob"))

    alice = after_d.people["alice"]
    bob = after_d.people["bob"]
    assert alice.total_given == pytest.approx(0)
    assert alice.total_received == pytest.approx(40)
    assert alice.balance == pytest.approx(-40)
    assert bob.name == "Bob"
    assert bob.total_given == pytest.approx(70)
    assert bob.balance == pytest.approx(70)
    assert bob.last_interaction == "2024-01-01"
    _assert_consistent(after_d)


def test_changing_type_flips_balance_direction(scenario) -> None:
    snapshot = scenario["b"]
    first = snapshot.find_transaction("txn_0001")
    updated = update_transaction(snapshot, replace(first, type=TransactionType.RECEIVE))

    alice = updated.people["alice"]
    assert alice.total_given == pytest.approx(0)
    assert alice.total_received == pytest.approx(140)
    assert alice.balance == pytest.approx(-140)


def test_identical_edit_leaves_aggregates_unchanged(scenario) -> None:
    snapshot = scenario["b"]
    updated = update_transaction(snapshot, snapshot.find_transaction("txn_0002"))
    before = snapshot.people["alice"]
    after = updated.people["alice"]
    assert after.total_given == pytest.approx(before.total_given)
    assert after.total_received == pytest.approx(before.total_received)
    assert after.balance == pytest.approx(before.balance)
    assert after.last_interaction == before.last_interaction


def test_unknown_transaction_is_a_noop(scenario) -> None:
    snapshot = scenario["b"]
    ghost = Transaction(
        id="missing",
        type=TransactionType.GIVE,
        person_id="alice",
        person_name="Alice",
        amount=1,
        date="2024-01-01",
        created_at="",
    )
    assert update_transaction(snapshot, ghost) is snapshot


def test_edit_preserves_created_at_even_if_caller_changes_it(scenario) -> None:
    snapshot = scenario["b"]
    first = snapshot.find_transaction("txn_0001")
    updated = update_transaction(snapshot, replace(first, created_at="1999-01-01T00:00:00.000Z"))
    assert updated.find_transaction("txn_0001").created_at == "2024-01-01T09:00:00.000Z"


def test_moving_latest_date_earlier_recomputes_last_interaction(scenario) -> None:
    snapshot = scenario["b"]
    latest = snapshot.find_transaction("txn_0002")
    edited = replace(latest, date="2023-11-11")

    recomputed = update_transaction(snapshot, edited)
    assert recomputed.people["alice"].last_interaction == "2024-01-01"

    running_max = update_transaction(snapshot, edited, recompute_last_interaction=False)
    assert running_max.people["alice"].last_interaction == "2024-02-01"


def test_revert_that_would_go_negative_raises(scenario) -> None:
    snapshot = scenario["b"]
    tampered = LedgerSnapshot(
        transactions=snapshot.transactions,
        people={"alice": replace(snapshot.people["alice"], total_given=10.0, balance=-30.0)},
    )
    with pytest.raises(LedgerConsistencyError):
        update_transaction(tampered, tampered.find_transaction("txn_0001"))


def test_float_sums_stay_consistent_through_edits() -> None:
    snapshot = LedgerSnapshot.empty()
    for amount in (0.1, 0.2, 0.3):
        snapshot = add_transaction(snapshot, _draft(TransactionType.GIVE, "p", "P", amount, "2024-01-01"))
    for transaction in list(snapshot.transactions):
        snapshot = update_transaction(snapshot, replace(transaction, person_id="q", person_name="Q"))
    assert snapshot.people["p"].total_given == pytest.approx(0)
    assert snapshot.people["q"].total_given == pytest.approx(0.6)
    _assert_consistent(snapshot)


@pytest.mark.parametrize(
    "overrides",
    [
        {"person_name": "  "},
        {"amount": 0},
        {"amount": -5},
        {"amount": float("inf")},
        {"amount": float("nan")},
        {"date": "2024-1-1"},
        {"date": "yesterday"},
    ],
)
def test_invalid_drafts_are_rejected(overrides) -> None:
    values = {"person_name": "Alice", "amount": 10, "date": "2024-01-01"}
    values.update(overrides)
    draft = _draft(TransactionType.GIVE, "alice", values["person_name"], values["amount"], values["date"])
    with pytest.raises(ValueError):
        add_transaction(LedgerSnapshot.empty(), draft)


def test_existing_person_keeps_tags_and_name(scenario) -> None:
    snapshot = scenario["b"]
    tagged = LedgerSnapshot(
        transactions=snapshot.transactions,
        people={"alice": replace(snapshot.people["alice"], tags=["ff亲人"])},
    )
    updated = add_transaction(tagged, _draft(TransactionType.GIVE, "alice", "Ally", 1, "2024-03-01"))
    assert updated.people["alice"].tags == ["ff亲人"]
    assert updated.people["alice"].name == "Alice"
    assert updated.transactions[0].person_name == "Ally"
    assert isinstance(updated.people["alice"], Person)


def test_non_finite_edit_is_rejected_and_totals_stay_finite(scenario) -> None:
    snapshot = scenario["b"]
    first = snapshot.find_transaction("txn_0001")
    with pytest.raises(ValueError):
        update_transaction(snapshot, replace(first, amount=float("inf")))
    assert snapshot.people["alice"].total_given == pytest.approx(100)
    _assert_consistent(snapshot)
