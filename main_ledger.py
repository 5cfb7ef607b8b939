"""Mini README: Entry point CLI for the gift ledger.

This script exposes a Typer CLI to record and edit gifts, inspect the contact
directory, export or restore backups, and launch the FastAPI service. Every
command reads settings from ``GIFTLEDGER_`` environment variables and works on
the single configured ledger slot.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
import uvicorn

from giftledger.configuration import get_settings
from giftledger.export import BackupError, BackupExporter
from giftledger.ledger import (
    Transaction,
    TransactionDraft,
    TransactionType,
    add_transaction,
    person_id_for,
    update_transaction,
)
from giftledger.logging_utils import configure_root_logger
from giftledger.storage import LedgerStore
from giftledger.utils.timestamps import today_iso

cli = typer.Typer(help="Track gifts given to and received from your contacts.")


def _store() -> LedgerStore:
    settings = get_settings()
    configure_root_logger(settings.log_level)
    return LedgerStore.from_settings(settings)


def _transaction_type(value: str) -> TransactionType:
    try:
        return TransactionType.from_str(value)
    except ValueError as error:
        raise typer.BadParameter(str(error)) from error


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    # Browsers cannot open the 0.0.0.0 sentinel, so point them at localhost.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting gift ledger on {effective_host}:{effective_port}.\n"
        f"Open http://{browser_host}:{effective_port}/docs to explore the API."
    )
    uvicorn.run(
        "giftledger.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def add(
    transaction_type: str = typer.Argument(..., metavar="TYPE", help="GIVE or RECEIVE."),
    person_name: str = typer.Argument(..., help="Contact name; exact matches reuse the contact."),
    amount: float = typer.Argument(..., help="Positive gift value."),
    date: str = typer.Option(None, help="ISO date of the event (default: today)."),
    occasion: str = typer.Option("", help="Occasion label."),
    notes: str = typer.Option("", help="Free-form notes."),
    tag: Optional[List[str]] = typer.Option(None, "--tag", help="Tag, repeatable."),
) -> None:
    """Record a new gift."""

    store = _store()
    snapshot = store.load()
    name = person_name.strip()
    draft = TransactionDraft(
        type=_transaction_type(transaction_type),
        person_id=person_id_for(snapshot, name),
        person_name=name,
        amount=amount,
        date=date or today_iso(),
        occasion=occasion,
        notes=notes,
        tags=list(tag or []),
    )
    try:
        snapshot = add_transaction(snapshot, draft)
    except ValueError as error:
        raise typer.BadParameter(str(error)) from error
    store.save(snapshot)
    created = snapshot.transactions[0]
    person = snapshot.people[created.person_id]
    typer.echo(f"Recorded {created.id}: {person.name} balance now {person.balance:.2f}")


@cli.command()
def edit(
    transaction_id: str = typer.Argument(..., help="Id of the transaction to edit."),
    transaction_type: Optional[str] = typer.Option(None, "--type", help="GIVE or RECEIVE."),
    person_name: Optional[str] = typer.Option(None, "--person", help="New contact name."),
    amount: Optional[float] = typer.Option(None, help="New gift value."),
    date: Optional[str] = typer.Option(None, help="New ISO date."),
    occasion: Optional[str] = typer.Option(None, help="New occasion label."),
    notes: Optional[str] = typer.Option(None, help="New notes."),
) -> None:
    """Edit an existing gift; omitted options keep their current value."""

    store = _store()
    snapshot = store.load()
    previous = snapshot.find_transaction(transaction_id)
    if previous is None:
        typer.echo(f"Transaction {transaction_id} not found; nothing to update.")
        raise typer.Exit(code=1)
    name = person_name.strip() if person_name is not None else previous.person_name
    edited = Transaction(
        id=previous.id,
        type=_transaction_type(transaction_type) if transaction_type else previous.type,
        person_id=person_id_for(snapshot, name, editing=previous),
        person_name=name,
        amount=amount if amount is not None else previous.amount,
        date=date or previous.date,
        created_at=previous.created_at,
        occasion=occasion if occasion is not None else previous.occasion,
        notes=notes if notes is not None else previous.notes,
        tags=list(previous.tags),
    )
    try:
        snapshot = update_transaction(snapshot, edited)
    except ValueError as error:
        raise typer.BadParameter(str(error)) from error
    store.save(snapshot)
    typer.echo(f"Updated {transaction_id}.")


@cli.command("list")
def list_transactions(limit: int = typer.Option(20, help="Number of entries to show.")) -> None:
    """Show the newest transactions."""

    settings = get_settings()
    for transaction in _store().load().transactions[:limit]:
        sign = "+" if transaction.type is TransactionType.GIVE else "-"
        typer.echo(
            f"{transaction.date}  {sign}{settings.currency_symbol}{transaction.amount:.2f}  "
            f"{transaction.person_name}  {transaction.occasion}  [{transaction.id}]"
        )


@cli.command()
def people() -> None:
    """Show every contact with totals and net balance."""

    settings = get_settings()
    snapshot = _store().load()
    ranked = sorted(
        snapshot.people.values(),
        key=lambda person: person.total_given + person.total_received,
        reverse=True,
    )
    for person in ranked:
        typer.echo(
            f"{person.name}: given {settings.currency_symbol}{person.total_given:.2f}, "
            f"received {settings.currency_symbol}{person.total_received:.2f}, "
            f"net {person.balance:+.2f} (last {person.last_interaction})"
        )


@cli.command("export")
def export_backup(
    destination: Optional[Path] = typer.Option(None, help="Directory to write the backup into."),
) -> None:
    """Write a dated backup of the stored ledger."""

    settings = get_settings()
    path = BackupExporter(_store()).export_backup(destination or settings.resolved_backup_directory)
    typer.echo(f"Backup written to {path}" if path else "Nothing stored yet; no backup written.")


@cli.command("import")
def import_backup(source: Path = typer.Argument(..., exists=True, dir_okay=False)) -> None:
    """Restore a backup file, replacing the stored ledger."""

    try:
        snapshot = BackupExporter(_store()).import_backup(source)
    except BackupError as error:
        typer.echo(f"Import failed: {error}", err=True)
        raise typer.Exit(code=1) from error
    typer.echo(f"Restored {len(snapshot.people)} people and {len(snapshot.transactions)} transactions.")


if __name__ == "__main__":
    cli()
