import datetime as dt
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel

from src.core.config import APP_NAME, BACKUP_VERSION
from src.core.db import create_db_and_tables, engine
from src.core.exceptions import InternalError, ValidationError
from src.dao.game_dao import delete_all_games
from src.schemas.ledger import SessionRecord
from src.schemas.schemas import BackupData
from src.services.alias_service import AliasTable
from src.services.game_service import (
    SaveResult,
    import_ledger_text,
    list_sessions,
    save_session,
)
from src.services.session_analyzer import session_id_from_filename


def reset_db() -> None:
    """Drop and recreate all tables."""
    logger.warning("Resetting database...")
    SQLModel.metadata.drop_all(engine)
    logger.info("Recreating tables...")
    create_db_and_tables()

    logger.success("Database reset successfully.")


def import_all_ledgers(
    session: Session, aliases: AliasTable, ledgers_dir: str | Path = "ledgers"
) -> dict[str, int]:
    """Import every CSV in ``ledgers_dir``, using file names as session ids.

    Files that fail to parse are logged and counted, not raised.
    """
    counts = {"imported": 0, "skipped": 0, "failed": 0}
    ledgers_path = Path(ledgers_dir)

    if not ledgers_path.exists():
        logger.error(f"Error: {ledgers_path} directory not found")
        return counts

    csv_files = sorted(ledgers_path.glob("*.csv"))
    logger.info(f"Found {len(csv_files)} CSV files to import")

    for csv_file in csv_files:
        logger.info(f"Processing: {csv_file.name}")
        try:
            result, _ = import_ledger_text(
                session,
                csv_file.read_text(encoding="utf-8-sig"),
                aliases,
                session_id=session_id_from_filename(csv_file.name),
                ledger_filename=csv_file.name,
            )
        except ValidationError as e:
            logger.error(f"Failed: {csv_file.name}: {e.message}")
            counts["failed"] += 1
            continue
        if result == SaveResult.DUPLICATE:
            counts["skipped"] += 1
        else:
            counts["imported"] += 1
    session.commit()

    logger.success(
        f"Imported {counts['imported']}, skipped {counts['skipped']}, "
        + f"failed {counts['failed']}"
    )
    return counts


def export_backup(session: Session) -> BackupData:
    """Snapshot every stored session as a JSON backup."""
    games = list_sessions(session)
    logger.info(f"Exporting backup of {len(games)} games")
    return BackupData(
        version=BACKUP_VERSION,
        export_date=dt.datetime.now(dt.UTC),
        games=games,
        game_count=len(games),
        app_name=APP_NAME,
    )


def import_backup(session: Session, data: dict[str, Any]) -> int:
    """Replace all stored sessions with the games of a backup.

    Returns the number of games stored; repeated games are dropped.

    Raises:
        ValidationError: if the payload has no ``games`` list or a game is malformed.
        InternalError: if writing the restored games fails; nothing is changed.
    """
    games = data.get("games")
    if not isinstance(games, list):
        raise ValidationError(message="Invalid backup file format")

    try:
        records = [SessionRecord.model_validate(game) for game in games]
    except PydanticValidationError as e:
        raise ValidationError(
            message="Invalid backup file format",
            details={"errors": [str(err["msg"]) for err in e.errors()]},
        ) from e

    # One transaction: a failed restore leaves the stored games untouched
    try:
        deleted = delete_all_games(session)
        saved = sum(
            save_session(session, record) == SaveResult.SAVED for record in records
        )
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Backup restore failed, keeping existing games: {e!s}")
        raise InternalError(
            message="Failed to restore backup", details={"error": str(e)}
        ) from e

    logger.success(
        f"Restored {saved} of {len(records)} games from backup ({deleted} replaced)"
    )
    return saved
