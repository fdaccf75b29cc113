"""Environment configuration for the PokerNow ledger service."""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Local store; point at Postgres for a shared deployment
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///pokernow.db")

# Optional hosted mirror (e.g. a Supabase Postgres instance)
MIRROR_DATABASE_URL = os.getenv("MIRROR_DATABASE_URL") or None

PLAYER_ALIASES_FILE = os.getenv("PLAYER_ALIASES_FILE", "player_aliases.json")
LEDGERS_DIR = os.getenv("LEDGERS_DIR", "ledgers")
LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

APP_NAME = "PokerNow Ledger"
BACKUP_VERSION = 1


def normalize_database_url(url: str) -> str:
    """Rewrite Postgres URLs so SQLAlchemy uses the psycopg (v3) driver."""
    # Render and Supabase hand out postgres:// URLs, but SQLAlchemy needs postgresql://
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://") and "+psycopg" not in url:
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url
