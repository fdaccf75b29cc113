"""Game-related business logic: storing, listing and uploading sessions."""

from enum import Enum
from pathlib import Path

from fastapi import UploadFile
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from src.core.exceptions import NotFoundError, ValidationError
from src.dao.game_dao import (
    create_game,
    delete_all_games,
    delete_game,
    find_game_by_content,
    get_all_games,
    get_game_by_session_id,
    to_session_record,
)
from src.schemas.ledger import SessionRecord
from src.schemas.schemas import FileUploadResult
from src.services.alias_service import AliasTable
from src.services.ledger_parser import parse_ledger
from src.services.session_analyzer import analyze_session


class SaveResult(Enum):
    """Result of storing a single session."""

    SAVED = "saved"
    DUPLICATE = "duplicate"


def list_sessions(session: Session) -> list[SessionRecord]:
    """Return every stored session, newest first."""
    return [to_session_record(game) for game in get_all_games(session)]


def get_session_record(session: Session, session_id: str) -> SessionRecord:
    """Return one stored session or raise NotFoundError."""
    game = get_game_by_session_id(session, session_id)
    if game is None:
        raise NotFoundError(
            message=f"Game {session_id} not found", details={"session_id": session_id}
        )
    return to_session_record(game)


def is_duplicate(session: Session, record: SessionRecord) -> bool:
    """Check for a stored game with the same id, or the same date, winner and pot."""
    if get_game_by_session_id(session, record.session_id):
        return True
    return (
        find_game_by_content(session, record.date, record.winner_name, record.total_pot)
        is not None
    )


def save_session(session: Session, record: SessionRecord) -> SaveResult:
    """Store a session unless it duplicates one already stored. Caller commits."""
    if is_duplicate(session, record):
        logger.info(f"Game {record.session_id} already exists, skipping...")
        return SaveResult.DUPLICATE

    create_game(session, record)
    logger.info(
        f"Saved game {record.session_id}: {record.player_count} players, "
        + f"winner {record.winner_name} ({record.winner_profit:+.2f})"
    )
    return SaveResult.SAVED


def delete_session(session: Session, session_id: str) -> None:
    """Delete one stored session or raise NotFoundError."""
    game = get_game_by_session_id(session, session_id)
    if game is None:
        raise NotFoundError(
            message=f"Game {session_id} not found", details={"session_id": session_id}
        )
    delete_game(session, game)
    session.commit()
    logger.info(f"Deleted game {session_id}")


def clear_all(session: Session) -> int:
    """Delete every stored session. Returns the number removed."""
    deleted = delete_all_games(session)
    session.commit()
    logger.warning(f"Cleared all games ({deleted} removed)")
    return deleted


def import_ledger_text(
    session: Session,
    text: str,
    aliases: AliasTable,
    session_id: str | None = None,
    ledger_filename: str | None = None,
) -> tuple[SaveResult, SessionRecord]:
    """Parse, analyze and store one ledger. Caller commits.

    Raises:
        EmptyInputError: if the ledger has no data rows.
        NoValidPlayersError: if no row names a player.
    """
    rows = parse_ledger(text)
    record = analyze_session(
        rows, aliases.resolve, session_id=session_id, ledger_filename=ledger_filename
    )
    return save_session(session, record), record


def process_uploaded_file(  # noqa: PLR0911
    session: Session, file: UploadFile, aliases: AliasTable
) -> FileUploadResult:
    """Process a single uploaded file. Returns result without raising exceptions."""
    if not file.filename:
        return FileUploadResult(
            filename="unknown",
            status="error",
            message="No filename provided",
        )

    filename = file.filename

    if Path(filename).suffix.lower() == ".json":
        return FileUploadResult(
            filename=filename,
            status="error",
            message="JSON files are not supported. Please upload CSV files from PokerNow.",
        )

    if not filename.endswith(".csv") and file.content_type != "text/csv":
        return FileUploadResult(
            filename=filename,
            status="error",
            message="File must be a CSV",
        )

    try:
        text = file.file.read().decode("utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read file {filename}: {e!s}")
        return FileUploadResult(
            filename=filename,
            status="error",
            message=f"Failed to read file: {e!s}",
        )

    logger.info(f"Starting import of {filename}...")
    try:
        result, record = import_ledger_text(
            session, text, aliases, ledger_filename=filename
        )
        session.commit()
    except ValidationError as e:
        logger.warning(f"Rejected ledger {filename}: {e.message}")
        return FileUploadResult(filename=filename, status="error", message=e.message)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to import ledger {filename}: {e!s}")
        return FileUploadResult(
            filename=filename,
            status="error",
            message=f"Failed to import ledger: {e!s}",
        )

    if result == SaveResult.DUPLICATE:
        return FileUploadResult(
            filename=filename,
            status="skipped",
            message="Game already exists",
            session_id=record.session_id,
        )
    logger.success(f"Import completed for {filename}")
    return FileUploadResult(
        filename=filename,
        status="success",
        message="Successfully imported",
        session_id=record.session_id,
    )
