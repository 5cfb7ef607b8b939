"""Mini README: Timestamp helpers shared by the engine and backup exporter.

Structure:
    * utc_timestamp - ISO-8601 UTC instant with millisecond precision.
    * today_iso - calendar date string used for default transaction dates.
    * is_iso_date - check for zero-padded ``YYYY-MM-DD`` strings.

Transaction dates are compared as strings, which is only valid for the
zero-padded ISO form produced here.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """Return ``moment`` (default: now) as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""

    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def today_iso() -> str:
    return date.today().isoformat()


def is_iso_date(value: object) -> bool:
    """Return True when ``value`` is a zero-padded ISO calendar date string."""

    if not isinstance(value, str) or len(value) != 10:
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True
