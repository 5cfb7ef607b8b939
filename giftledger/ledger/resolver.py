"""Mini README: Name-to-person resolution used by entry forms.

Structure:
    * resolve_person - exact name match to a person id.
    * suggest_people - case-insensitive substring suggestions.
    * person_id_for - id policy applied when a form is submitted.

Matching policy lives here so the engine only ever sees explicit person ids.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from .engine import generate_id
from .models import LedgerSnapshot, Person, Transaction


def resolve_person(snapshot: LedgerSnapshot, name: str) -> Optional[str]:
    """Return the id of the first person named exactly ``name``."""

    for person in snapshot.people.values():
        if person.name == name:
            return person.id
    return None


def suggest_people(snapshot: LedgerSnapshot, query: str) -> List[Person]:
    """Persons whose name contains ``query``, ignoring case."""

    needle = query.strip().lower()
    if not needle:
        return []
    return [person for person in snapshot.people.values() if needle in person.name.lower()]


def person_id_for(
    snapshot: LedgerSnapshot,
    name: str,
    *,
    editing: Optional[Transaction] = None,
    id_factory: Callable[[], str] = generate_id,
) -> str:
    """Pick the person id for a submitted entry.

    An existing exact match wins; an edit that keeps the original name keeps
    the original person; anything else gets a fresh id.
    """

    existing = resolve_person(snapshot, name)
    if existing is not None:
        return existing
    if editing is not None and editing.person_name == name:
        return editing.person_id
    return id_factory()
