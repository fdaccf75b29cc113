"""
Games API endpoints.

This module provides HTTP endpoints for managing game ledgers: batch upload of
PokerNow CSV files, listing and deleting stored sessions, JSON backup/restore
and pushing stored games to the hosted mirror.
"""

from typing import TYPE_CHECKING, Annotated, Any

from fastapi import APIRouter, Body, File, HTTPException, UploadFile
from loguru import logger

from src.api.deps import AliasTableDep, MirrorSessionDep, SessionDep
from src.core.exceptions import MirrorUnavailableError
from src.schemas.errors import (
    INVALID_INPUT_RESPONSE,
    MIRROR_UNAVAILABLE_RESPONSE,
    NOT_FOUND_RESPONSE,
)
from src.schemas.ledger import SessionRecord
from src.schemas.schemas import (
    BackupData,
    BatchUploadResponse,
    DeleteResponse,
    ImportResponse,
    SyncResult,
)
from src.services.game_service import (
    clear_all,
    delete_session,
    get_session_record,
    list_sessions,
    process_uploaded_file,
)
from src.services.import_service import export_backup, import_backup
from src.services.sync_service import mirror_stored_session, sync_to_mirror

if TYPE_CHECKING:
    from src.schemas.schemas import FileUploadResult

router = APIRouter()


@router.post("/upload", response_model=BatchUploadResponse)
def upload_game_ledgers(
    session: SessionDep,
    mirror: MirrorSessionDep,
    aliases: AliasTableDep,
    files: Annotated[list[UploadFile], File(description="CSV ledger files to upload")],
) -> BatchUploadResponse:
    """
    Upload one or more PokerNow CSV ledger files.
    Each file becomes one game; duplicates are skipped, bad files reported.
    New games are also uploaded to the mirror when one is connected.
    """
    logger.info(f"Received batch upload request with {len(files)} file(s)")

    if not files:
        raise HTTPException(status_code=400, detail="No files provided")

    results: list[FileUploadResult] = []
    for file in files:
        result = process_uploaded_file(session, file, aliases)
        if mirror is not None and result.status == "success" and result.session_id:
            mirror_stored_session(session, mirror, result.session_id)
        results.append(result)

    successful = sum(1 for r in results if r.status == "success")
    failed = sum(1 for r in results if r.status == "error")
    skipped = sum(1 for r in results if r.status == "skipped")

    logger.info(
        f"Batch upload complete: {successful} successful, {failed} failed, {skipped} skipped"
    )

    return BatchUploadResponse(
        total=len(files),
        successful=successful,
        failed=failed,
        skipped=skipped,
        results=results,
    )


@router.get("/", response_model=list[SessionRecord])
def read_games(session: SessionDep) -> list[SessionRecord]:
    """List stored games, newest first."""
    games = list_sessions(session)
    logger.debug(f"Retrieved {len(games)} games")
    return games


@router.delete("/", response_model=DeleteResponse)
def clear_games(session: SessionDep) -> DeleteResponse:
    """Delete every stored game."""
    return DeleteResponse(deleted=clear_all(session))


@router.get("/export", response_model=BackupData)
def export_games(session: SessionDep) -> BackupData:
    """Download a JSON backup of every stored game."""
    return export_backup(session)


@router.post("/import", response_model=ImportResponse, responses=INVALID_INPUT_RESPONSE)
def import_games(
    session: SessionDep, payload: Annotated[dict[str, Any], Body()]
) -> ImportResponse:
    """Replace all stored games with the contents of a JSON backup."""
    return ImportResponse(imported=import_backup(session, payload))


@router.post("/sync", response_model=SyncResult, responses=MIRROR_UNAVAILABLE_RESPONSE)
def sync_games(session: SessionDep, mirror: MirrorSessionDep) -> SyncResult:
    """Upload every stored game the mirror does not have yet."""
    if mirror is None:
        raise MirrorUnavailableError(message="Mirror database not connected")
    return sync_to_mirror(session, mirror)


@router.get("/{session_id}", response_model=SessionRecord, responses=NOT_FOUND_RESPONSE)
def read_game(session_id: str, session: SessionDep) -> SessionRecord:
    """Retrieve one stored game."""
    logger.info(f"Fetching game {session_id}")
    return get_session_record(session, session_id)


@router.delete(
    "/{session_id}", response_model=DeleteResponse, responses=NOT_FOUND_RESPONSE
)
def remove_game(session_id: str, session: SessionDep) -> DeleteResponse:
    """Delete one stored game."""
    delete_session(session, session_id)
    return DeleteResponse(deleted=1)
