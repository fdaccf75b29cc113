from collections.abc import Generator
from typing import Annotated

from fastapi import Depends
from loguru import logger
from sqlmodel import Session

from src.core.db import engine, mirror_engine
from src.schemas.ledger import SessionRecord
from src.services.alias_service import AliasTable, load_alias_table
from src.services.sync_service import load_sessions


def get_session() -> Generator[Session, None, None]:
    """Provide a database session for dependency injection."""
    logger.debug("Creating database session")
    with Session(engine) as session:
        yield session
    logger.debug("Database session closed")


def get_mirror_session() -> Generator[Session | None, None, None]:
    """Provide a mirror database session, or None when no mirror is configured."""
    if mirror_engine is None:
        yield None
        return
    with Session(mirror_engine) as session:
        yield session


SessionDep = Annotated[Session, Depends(get_session)]
MirrorSessionDep = Annotated[Session | None, Depends(get_mirror_session)]


def get_alias_table(session: SessionDep) -> AliasTable:
    """Provide the alias table loaded from the database."""
    return load_alias_table(session)


def get_all_sessions(session: SessionDep, mirror: MirrorSessionDep) -> list[SessionRecord]:
    """Provide the full session collection, mirror sessions merged in."""
    return load_sessions(session, mirror)


AliasTableDep = Annotated[AliasTable, Depends(get_alias_table)]
SessionsDep = Annotated[list[SessionRecord], Depends(get_all_sessions)]
