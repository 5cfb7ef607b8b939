"""Mini README: Backup utilities for the gift ledger.

Exposes the exporter that packages the stored ledger into dated JSON backup
files and restores snapshots from them.
"""

from .backup import BACKUP_VERSION, BackupEnvelope, BackupError, BackupExporter

__all__ = ["BACKUP_VERSION", "BackupEnvelope", "BackupError", "BackupExporter"]
