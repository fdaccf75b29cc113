from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from src.core.config import DATABASE_URL, MIRROR_DATABASE_URL, normalize_database_url


def build_engine(url: str) -> Engine:
    """Create an engine for a local SQLite file or a Postgres URL."""
    url = normalize_database_url(url)
    if url.startswith("sqlite"):
        logger.info(f"Initializing database engine with URL: {url}")
        return create_engine(url, connect_args={"check_same_thread": False})
    # Hide credentials in the log line
    logger.info(f"Initializing database engine with URL: {url.split('@')[-1]}")
    return create_engine(url)


engine = build_engine(DATABASE_URL)

mirror_engine: Engine | None = (
    build_engine(MIRROR_DATABASE_URL) if MIRROR_DATABASE_URL else None
)


def create_db_and_tables(target: Engine | None = None) -> None:
    """Create database tables from SQLModel metadata."""
    logger.info("Creating database tables from SQLModel metadata...")
    SQLModel.metadata.create_all(target or engine)
    logger.success("Database tables created successfully")
