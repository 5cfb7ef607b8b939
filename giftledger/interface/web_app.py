"""Mini README: FastAPI service exposing the gift ledger.

Structure:
    * create_application - application factory wiring routes to a LedgerStore.

Routes cover recording and editing gifts, the contact directory with name
suggestions, analytics, and backup export/import. Every write runs its
load, mutate, save cycle under one asyncio lock so concurrent requests never
interleave snapshots.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

from fastapi import FastAPI, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse

from ..analytics import LedgerAnalytics, TransactionFilter
from ..configuration import get_settings
from ..export import BackupError, BackupExporter
from ..ledger import (
    OCCASION_OPTIONS,
    TAG_OPTIONS,
    LedgerConsistencyError,
    LedgerSnapshot,
    Transaction,
    TransactionDraft,
    TransactionType,
    add_transaction,
    person_id_for,
    suggest_people,
    update_transaction,
)
from ..logging_utils import get_logger
from ..storage import LedgerStore
from ..utils.timestamps import today_iso

LOGGER = get_logger(__name__)


def _parse_type(value: str) -> TransactionType:
    try:
        return TransactionType.from_str(value)
    except ValueError as error:
        raise HTTPException(status_code=400, detail=str(error)) from error


def create_application(store: Optional[LedgerStore] = None) -> FastAPI:
    """Create the FastAPI application bound to ``store`` (default: configured slot)."""

    app = FastAPI(title="Gift Ledger", version="0.1.0")
    settings = get_settings()
    ledger_store = store or LedgerStore.from_settings(settings)
    exporter = BackupExporter(ledger_store)
    update_lock = asyncio.Lock()

    async def mutate(change: Callable[[LedgerSnapshot], LedgerSnapshot]) -> LedgerSnapshot:
        async with update_lock:
            snapshot = ledger_store.load()
            try:
                updated = change(snapshot)
            except ValueError as error:
                raise HTTPException(status_code=400, detail=str(error)) from error
            except LedgerConsistencyError as error:
                LOGGER.error("Refusing to save inconsistent ledger: %s", error)
                raise HTTPException(status_code=409, detail=str(error)) from error
            if updated is not snapshot:
                ledger_store.save(updated)
            return updated

    def build_filter(
        start_date: Optional[str],
        end_date: Optional[str],
        person_id: Optional[str],
        occasion: Optional[str],
        tag: Optional[str],
    ) -> TransactionFilter:
        return TransactionFilter(
            start_date=start_date,
            end_date=end_date,
            person_id=person_id,
            occasion=occasion,
            tag=tag,
        )

    @app.get("/")
    async def dashboard() -> JSONResponse:
        """Return headline totals and the latest entries."""

        analytics = LedgerAnalytics(ledger_store.load())
        return JSONResponse(
            {
                "totals": analytics.totals(),
                "recent": [transaction.as_dict() for transaction in analytics.recent_transactions()],
                "currency_symbol": settings.currency_symbol,
                "occasions": OCCASION_OPTIONS,
                "tags": TAG_OPTIONS,
            }
        )

    @app.get("/transactions")
    async def list_transactions(
        start_date: Optional[str] = Query(None),
        end_date: Optional[str] = Query(None),
        person_id: Optional[str] = Query(None),
        occasion: Optional[str] = Query(None),
        tag: Optional[str] = Query(None),
    ) -> JSONResponse:
        criteria = build_filter(start_date, end_date, person_id, occasion, tag)
        analytics = LedgerAnalytics(ledger_store.load(), criteria)
        payload = [transaction.as_dict() for transaction in analytics.recent_transactions(limit=None)]
        return JSONResponse({"transactions": payload})

    @app.post("/transactions")
    async def record_transaction(
        type: str = Form(...),
        person_name: str = Form(...),
        amount: float = Form(...),
        date: Optional[str] = Form(None),
        person_id: Optional[str] = Form(None),
        occasion: str = Form(""),
        notes: str = Form(""),
        tags: Optional[List[str]] = Form(None),
    ) -> JSONResponse:
        """Record a new gift; the person is matched by exact name unless an id is given."""

        transaction_type = _parse_type(type)
        name = person_name.strip()

        def change(snapshot: LedgerSnapshot) -> LedgerSnapshot:
            draft = TransactionDraft(
                type=transaction_type,
                person_id=person_id or person_id_for(snapshot, name),
                person_name=name,
                amount=amount,
                date=date or today_iso(),
                occasion=occasion,
                notes=notes,
                tags=list(tags or []),
            )
            return add_transaction(snapshot, draft)

        updated = await mutate(change)
        created = updated.transactions[0]
        return JSONResponse(
            {
                "transaction": created.as_dict(),
                "person": updated.people[created.person_id].as_dict(),
            },
            status_code=201,
        )

    @app.put("/transactions/{transaction_id}")
    async def edit_transaction(
        transaction_id: str,
        type: str = Form(...),
        person_name: str = Form(...),
        amount: float = Form(...),
        date: str = Form(...),
        person_id: Optional[str] = Form(None),
        occasion: str = Form(""),
        notes: str = Form(""),
        tags: Optional[List[str]] = Form(None),
    ) -> JSONResponse:
        """Replace every editable field of an existing transaction."""

        transaction_type = _parse_type(type)
        name = person_name.strip()
        found: Dict[str, Any] = {}

        def change(snapshot: LedgerSnapshot) -> LedgerSnapshot:
            previous = snapshot.find_transaction(transaction_id)
            if previous is None:
                return snapshot
            found["previous"] = previous
            edited = Transaction(
                id=transaction_id,
                type=transaction_type,
                person_id=person_id or person_id_for(snapshot, name, editing=previous),
                person_name=name,
                amount=amount,
                date=date,
                created_at=previous.created_at,
                occasion=occasion,
                notes=notes,
                tags=list(tags or []),
            )
            return update_transaction(snapshot, edited)

        updated = await mutate(change)
        if "previous" not in found:
            raise HTTPException(status_code=404, detail=f"Transaction {transaction_id} not found")
        edited = updated.find_transaction(transaction_id)
        return JSONResponse(
            {
                "transaction": edited.as_dict(),
                "person": updated.people[edited.person_id].as_dict(),
            }
        )

    @app.get("/people")
    async def people() -> JSONResponse:
        """Return the contact directory, most active first."""

        analytics = LedgerAnalytics(ledger_store.load())
        return JSONResponse({"people": [person.as_dict() for person in analytics.people_by_activity()]})

    @app.get("/people/suggest")
    async def suggest(q: str = Query("")) -> JSONResponse:
        matches = suggest_people(ledger_store.load(), q)
        return JSONResponse({"people": [person.as_dict() for person in matches]})

    @app.get("/analytics")
    async def analytics_summary(
        start_date: Optional[str] = Query(None),
        end_date: Optional[str] = Query(None),
        person_id: Optional[str] = Query(None),
        occasion: Optional[str] = Query(None),
        tag: Optional[str] = Query(None),
    ) -> JSONResponse:
        criteria = build_filter(start_date, end_date, person_id, occasion, tag)
        return JSONResponse(LedgerAnalytics(ledger_store.load(), criteria).summarise())

    @app.get("/backup")
    async def download_backup() -> JSONResponse:
        """Return the backup envelope as a dated attachment."""

        envelope = exporter.build_envelope()
        if envelope is None:
            raise HTTPException(status_code=404, detail="Nothing stored yet")
        return JSONResponse(
            envelope.model_dump(),
            headers={"Content-Disposition": f'attachment; filename="{exporter.backup_filename()}"'},
        )

    @app.post("/backup/export")
    async def export_backup() -> JSONResponse:
        """Write a backup file into the configured backup directory."""

        path = exporter.export_backup(settings.resolved_backup_directory)
        return JSONResponse({"exported": path is not None, "path": str(path) if path else None})

    @app.post("/backup/import")
    async def import_backup(backup: UploadFile = File(...)) -> JSONResponse:
        """Restore an uploaded backup file, replacing the stored ledger."""

        content = (await backup.read()).decode("utf-8", errors="replace")
        async with update_lock:
            try:
                snapshot = exporter.import_backup_text(content)
            except BackupError as error:
                raise HTTPException(status_code=400, detail=str(error)) from error
        LOGGER.info("Restored backup %s", backup.filename)
        return JSONResponse(
            {"people": len(snapshot.people), "transactions": len(snapshot.transactions)}
        )

    return app
