"""Sync between the local store and the optional hosted mirror database."""

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from src.dao.game_dao import create_game, get_game_by_session_id
from src.schemas.ledger import SessionRecord
from src.schemas.schemas import SyncResult
from src.services.game_service import get_session_record, list_sessions


def merge_sessions(
    local: list[SessionRecord], remote: list[SessionRecord]
) -> list[SessionRecord]:
    """Local sessions followed by remote sessions whose id is not already local."""
    known_ids = {record.session_id for record in local}
    merged = list(local)
    for record in remote:
        if record.session_id not in known_ids:
            merged.append(record)
            known_ids.add(record.session_id)
    return merged


def load_sessions(local: Session, mirror: Session | None = None) -> list[SessionRecord]:
    """Return the session collection the engine should compute over.

    When a mirror is connected its sessions are merged in by id. A mirror
    failure falls back to the local sessions.
    """
    local_sessions = list_sessions(local)
    if mirror is None:
        return local_sessions

    try:
        remote_sessions = list_sessions(mirror)
    except SQLAlchemyError as e:
        logger.error(f"Mirror fetch failed, using local games only: {e!s}")
        return local_sessions

    merged = merge_sessions(local_sessions, remote_sessions)
    if len(merged) > len(local_sessions):
        logger.info(f"Synced {len(merged) - len(local_sessions)} games from mirror")
    return merged


def push_to_mirror(mirror: Session, record: SessionRecord) -> bool:
    """Upload one session unless the mirror already holds its id.

    Returns:
        True if the session was uploaded, False if it was already there.

    Raises:
        SQLAlchemyError: if the mirror write fails; the mirror transaction is rolled back.
    """
    try:
        if get_game_by_session_id(mirror, record.session_id):
            logger.debug(f"Game {record.session_id} already exists in mirror")
            return False
        create_game(mirror, record)
        mirror.commit()
    except SQLAlchemyError:
        mirror.rollback()
        raise
    logger.info(f"Uploaded game {record.session_id} to mirror")
    return True


def mirror_stored_session(local: Session, mirror: Session, session_id: str) -> bool:
    """Push a freshly stored local session to the mirror.

    A mirror failure is logged and reported as False; the local copy is kept.
    """
    record = get_session_record(local, session_id)
    try:
        return push_to_mirror(mirror, record)
    except SQLAlchemyError as e:
        logger.error(f"Failed to upload game {session_id} to mirror: {e!s}")
        return False


def sync_to_mirror(local: Session, mirror: Session) -> SyncResult:
    """Upload every local session missing from the mirror, keyed by session id."""
    result = SyncResult()
    for record in list_sessions(local):
        try:
            uploaded = push_to_mirror(mirror, record)
        except SQLAlchemyError as e:
            logger.error(f"Failed to sync game {record.session_id}: {e!s}")
            result.errors += 1
            continue
        if uploaded:
            result.uploaded += 1
        else:
            result.skipped += 1

    logger.info(
        f"Sync complete. Uploaded: {result.uploaded}, Skipped: {result.skipped}, "
        + f"Errors: {result.errors}"
    )
    return result
