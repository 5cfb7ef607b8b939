"""Mini README: Backup export and import for the persisted ledger.

Structure:
    * BackupEnvelope - pydantic model of the ``{version, timestamp, payload}`` file.
    * BackupExporter - writes the stored opaque text into a dated backup file and
      restores snapshots from such files.
    * BackupError - raised for files that are not restorable backups.

Exports never decode the stored text; the payload is copied verbatim, so a
backup is exactly as readable as the slot it came from. Imports decode the
payload through the store's codec and only then overwrite the slot.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Callable, Optional

from pydantic import BaseModel, Field, ValidationError

from ..ledger.models import LedgerSnapshot
from ..logging_utils import get_logger
from ..storage import CodecError, LedgerStore
from ..utils.timestamps import utc_timestamp

LOGGER = get_logger(__name__)

BACKUP_VERSION = 1
BACKUP_PREFIX = "relationship_ledger_backup_"


class BackupError(ValueError):
    """The supplied file is not a restorable ledger backup."""


class BackupEnvelope(BaseModel):
    """Serialised wrapper around the stored opaque text."""

    version: int = Field(BACKUP_VERSION, ge=1)
    timestamp: str
    payload: str = Field(..., min_length=1)


class BackupExporter:
    """Repackage the stored ledger for download and restore it again."""

    def __init__(
        self,
        store: LedgerStore,
        *,
        clock: Callable[[], str] = utc_timestamp,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.store = store
        self._clock = clock
        self._today = today

    def backup_filename(self) -> str:
        return f"{BACKUP_PREFIX}{self._today().isoformat()}.json"

    def build_envelope(self) -> Optional[BackupEnvelope]:
        """Wrap the stored text, or return ``None`` when nothing exportable is stored."""

        try:
            raw = self.store.read_raw()
        except CodecError as error:
            LOGGER.warning("Stored ledger is not exportable: %s", error)
            return None
        if raw is None:
            return None
        return BackupEnvelope(version=BACKUP_VERSION, timestamp=self._clock(), payload=raw)

    def export_backup(self, destination: Path) -> Optional[Path]:
        """Write a dated backup file into ``destination``; no-op with an empty slot."""

        envelope = self.build_envelope()
        if envelope is None:
            LOGGER.warning("Nothing to export from %s; skipping backup export", self.store.slot_path)
            return None
        destination = Path(destination)
        destination.mkdir(parents=True, exist_ok=True)
        backup_path = destination / self.backup_filename()
        backup_path.write_text(envelope.model_dump_json(), encoding="utf-8")
        LOGGER.info("Exported ledger backup to %s", backup_path)
        return backup_path

    def parse_backup(self, content: str) -> LedgerSnapshot:
        """Decode backup file content into a snapshot without touching the store."""

        try:
            envelope = BackupEnvelope.model_validate_json(content)
        except ValidationError as error:
            raise BackupError(f"Not a ledger backup: {error}") from error
        if envelope.version != BACKUP_VERSION:
            raise BackupError(f"Unsupported backup version {envelope.version}")
        try:
            document = json.loads(self.store.codec.decode(envelope.payload))
            return LedgerSnapshot.from_dict(document)
        except (CodecError, ValueError, KeyError, TypeError, RecursionError) as error:
            raise BackupError(f"Backup payload could not be decoded: {error}") from error

    def import_backup(self, source: Path) -> LedgerSnapshot:
        """Restore the backup file at ``source`` and save it as the ledger."""

        try:
            content = Path(source).read_text(encoding="utf-8")
        except UnicodeDecodeError as error:
            raise BackupError(f"Backup file {source} is not text: {error}") from error
        return self.import_backup_text(content)

    def import_backup_text(self, content: str) -> LedgerSnapshot:
        """Restore a backup from the file's text, e.g. an uploaded body."""

        snapshot = self.parse_backup(content)
        self.store.save(snapshot)
        LOGGER.info(
            "Imported backup with %s people and %s transactions",
            len(snapshot.people),
            len(snapshot.transactions),
        )
        return snapshot
