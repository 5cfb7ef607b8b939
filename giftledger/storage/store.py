"""Mini README: File-backed persistence slot for the ledger snapshot.

Structure:
    * LedgerStore - ``load``/``save`` lifecycle over one named slot file.

The store owns the only persisted state. ``save`` writes the full encoded
snapshot to a temporary sibling and renames it over the slot, so readers see
either the previous or the new snapshot, never a partial one. ``load`` never
raises for missing or corrupt data; it returns an empty snapshot and logs why.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from ..configuration import GiftLedgerSettings, get_settings
from ..ledger.models import LedgerSnapshot
from ..logging_utils import get_logger
from .codec import Base64TextCodec, CodecError, LedgerCodec

LOGGER = get_logger(__name__)


class LedgerStore:
    """Explicit handle on the persisted ledger slot."""

    def __init__(
        self,
        directory: Path,
        key: str = "relationship_ledger_data",
        *,
        codec: Optional[LedgerCodec] = None,
    ) -> None:
        self.directory = Path(directory)
        self.key = key
        self.codec = codec or Base64TextCodec()
        LOGGER.debug("Ledger store using slot %s with %s codec", self.slot_path, self.codec.name)

    @classmethod
    def from_settings(cls, settings: Optional[GiftLedgerSettings] = None) -> "LedgerStore":
        settings = settings or get_settings()
        return cls(settings.data_directory, settings.storage_key)

    @property
    def slot_path(self) -> Path:
        return self.directory / f"{self.key}.dat"

    def read_raw(self) -> Optional[str]:
        """Return the stored opaque text, or ``None`` when nothing was saved yet.

        Raises ``CodecError`` when the slot holds bytes that are not UTF-8 text.
        """

        try:
            raw = self.slot_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as error:
            raise CodecError(f"Ledger slot {self.slot_path} does not hold text: {error}") from error
        return raw or None

    def load(self) -> LedgerSnapshot:
        """Decode the stored snapshot, substituting an empty one on any failure."""

        try:
            raw = self.read_raw()
            if raw is None:
                LOGGER.debug("No ledger stored at %s; starting empty", self.slot_path)
                return LedgerSnapshot.empty()
            snapshot = LedgerSnapshot.from_dict(json.loads(self.codec.decode(raw)))
        except (CodecError, ValueError, KeyError, TypeError, RecursionError) as error:
            LOGGER.warning("Failed to load ledger from %s, using empty ledger: %s", self.slot_path, error)
            return LedgerSnapshot.empty()
        LOGGER.info(
            "Loaded ledger with %s people and %s transactions",
            len(snapshot.people),
            len(snapshot.transactions),
        )
        return snapshot

    def save(self, snapshot: LedgerSnapshot) -> None:
        """Overwrite the slot with the full encoded ``snapshot``."""

        document = json.dumps(snapshot.as_dict(), ensure_ascii=False, separators=(",", ":"))
        encoded = self.codec.encode(document)
        self.directory.mkdir(parents=True, exist_ok=True)
        descriptor, temp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{self.key}.", suffix=".tmp")
        try:
            with os.fdopen(descriptor, "w", encoding="utf-8") as handle:
                handle.write(encoded)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_name, self.slot_path)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise
        LOGGER.info(
            "Saved ledger with %s people and %s transactions to %s",
            len(snapshot.people),
            len(snapshot.transactions),
            self.slot_path,
        )
