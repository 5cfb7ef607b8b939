"""Mini README: Tests for the slot codec and the file-backed ledger store.

These tests confirm the codec inverts itself for non-ASCII ledgers, that a
missing or corrupt slot loads as an empty ledger without raising, and that
saves fully replace the stored snapshot.
"""

from __future__ import annotations

import base64
import json

import pytest

from giftledger.ledger import LedgerSnapshot, TransactionDraft, TransactionType, add_transaction
from giftledger.storage import Base64TextCodec, CodecError, LedgerStore


def _snapshot_with(name: str, amount: float) -> LedgerSnapshot:
    return add_transaction(
        LedgerSnapshot.empty(),
        TransactionDraft(
            type=TransactionType.GIVE,
            person_id="p1",
            person_name=name,
            amount=amount,
            date="2024-05-01",
            occasion="满月宴",
            tags=["zz亲人"],
        ),
    )


def test_codec_inverts_unicode_json() -> None:
    codec = Base64TextCodec()
    text = json.dumps({"people": [], "note": "乔迁新房 🎉"}, ensure_ascii=False)
    encoded = codec.encode(text)
    assert text not in encoded
    assert codec.decode(encoded) == text


def test_codec_matches_existing_stored_format() -> None:
    """Stored slots are base64 over UTF-8 bytes."""

    text = '{"people":[],"transactions":[]}'
    assert Base64TextCodec().encode(text) == base64.b64encode(text.encode("utf-8")).decode("ascii")


@pytest.mark.parametrize("garbage", ["not base64 at all!", "////", base64.b64encode(b"\xff\xfe").decode()])
def test_codec_rejects_malformed_text(garbage) -> None:
    with pytest.raises(CodecError):
        Base64TextCodec().decode(garbage)


def test_load_missing_slot_returns_empty_ledger(tmp_path) -> None:
    """Scenario E: nothing stored yet."""

    store = LedgerStore(tmp_path, "ledger")
    snapshot = store.load()
    assert snapshot.as_dict() == {"people": [], "transactions": []}
    assert store.read_raw() is None


def test_load_corrupt_slot_returns_empty_ledger(tmp_path, caplog) -> None:
    store = LedgerStore(tmp_path, "ledger")
    store.slot_path.write_text("%%% definitely not a ledger %%%", encoding="utf-8")
    with caplog.at_level("WARNING"):
        snapshot = store.load()
    assert snapshot.transactions == []
    assert snapshot.people == {}
    assert "Failed to load ledger" in caplog.text


def test_load_decodable_but_foreign_document_returns_empty_ledger(tmp_path) -> None:
    store = LedgerStore(tmp_path, "ledger")
    codec = Base64TextCodec()
    store.slot_path.write_text(codec.encode('["a", "list"]'), encoding="utf-8")
    assert store.load().transactions == []
    store.slot_path.write_text(codec.encode('{"transactions": [{"id": "x"}]}'), encoding="utf-8")
    assert store.load().transactions == []


def test_save_then_load_restores_snapshot(tmp_path) -> None:
    store = LedgerStore(tmp_path / "nested", "ledger")
    snapshot = _snapshot_with("王芳", 888)
    store.save(snapshot)

    loaded = store.load()
    assert loaded.as_dict() == snapshot.as_dict()
    assert loaded.people["p1"].name == "王芳"
    assert "王芳" not in store.read_raw()


def test_save_overwrites_previous_snapshot(tmp_path) -> None:
    store = LedgerStore(tmp_path, "ledger")
    store.save(_snapshot_with("First", 1))
    store.save(_snapshot_with("Second", 2))

    loaded = store.load()
    assert [person.name for person in loaded.people.values()] == ["Second"]
    assert len(loaded.transactions) == 1
    assert sorted(path.name for path in tmp_path.iterdir()) == ["ledger.dat"]


def test_stored_document_uses_camel_case_keys(tmp_path) -> None:
    store = LedgerStore(tmp_path, "ledger")
    store.save(_snapshot_with("Alice", 10))
    document = json.loads(Base64TextCodec().decode(store.read_raw()))
    assert set(document) == {"people", "transactions"}
    assert document["people"][0]["totalGiven"] == 10
    assert document["transactions"][0]["personId"] == "p1"
    assert document["transactions"][0]["type"] == "GIVE"


def test_load_binary_slot_returns_empty_ledger(tmp_path) -> None:
    store = LedgerStore(tmp_path, "ledger")
    store.slot_path.write_bytes(b"\xff\xfe\x00garbage")
    snapshot = store.load()
    assert snapshot.as_dict() == {"people": [], "transactions": []}
    with pytest.raises(CodecError):
        store.read_raw()


def test_load_deeply_nested_document_returns_empty_ledger(tmp_path) -> None:
    store = LedgerStore(tmp_path, "ledger")
    store.slot_path.write_text(Base64TextCodec().encode("[" * 100000 + "]" * 100000), encoding="utf-8")
    assert store.load().as_dict() == {"people": [], "transactions": []}
