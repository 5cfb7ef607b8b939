"""Mini README: Centralised configuration model and helpers for giftledger.

Structure:
    * GiftLedgerSettings - pydantic-settings model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read ``GIFTLEDGER_`` environment variables (or a
    local ``.env`` file) that decide where the ledger slot lives, where backups
    are written, and which host/port the web interface binds to.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GiftLedgerSettings(BaseSettings):
    """Runtime configuration for the gift ledger."""

    model_config = SettingsConfigDict(
        env_prefix="GIFTLEDGER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    data_directory: Path = Field(
        Path("data"),
        description="Directory holding the persisted ledger slot.",
    )
    storage_key: str = Field(
        "relationship_ledger_data",
        description="Name of the single persistence slot holding the encoded snapshot.",
        min_length=1,
    )
    backup_directory: Optional[Path] = Field(
        None,
        description="Where exported backups are written. Defaults to <data_directory>/backups.",
    )
    currency_symbol: str = Field(
        "¥",
        description="Symbol shown next to amounts in CLI output.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the web service to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Port the web service exposes.",
        ge=1,
        le=65535,
    )
    log_level: str = Field("INFO", description="Root logging level.")

    @field_validator("data_directory", "backup_directory", mode="before")
    @classmethod
    def _expand_path(cls, value: Optional[str | Path]) -> Optional[Path]:
        """Ensure configured paths expand user directories and exist."""

        if value is None or value == "":
            return None
        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @field_validator("log_level")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def resolved_backup_directory(self) -> Path:
        """Backup directory, falling back to a folder inside the data directory."""

        return self.backup_directory or self.data_directory / "backups"


@lru_cache()
def get_settings() -> GiftLedgerSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return GiftLedgerSettings()
