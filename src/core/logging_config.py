"""Logging configuration for the PokerNow ledger service."""

from pathlib import Path
import sys

from loguru import logger

from src.core.config import LOG_DIR, LOG_LEVEL


def configure_logging(logs_dir: Path | None = None, level: str = LOG_LEVEL) -> None:
    """Configure loguru logger with file output and rotation."""
    logs_dir = logs_dir or Path(LOG_DIR)
    logs_dir.mkdir(parents=True, exist_ok=True)

    # Remove default handler (console only)
    logger.remove()

    logger.add(
        sink=sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=level,
        colorize=True,
    )

    logger.add(
        sink=logs_dir / "ledger_{time:YYYY-MM-DD}.log",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        level=level,
        rotation="00:00",  # Rotate at midnight
        retention="30 days",
        compression="zip",
        enqueue=True,  # Thread-safe logging
    )

    # Errors are kept longer
    logger.add(
        sink=logs_dir / "ledger_errors_{time:YYYY-MM-DD}.log",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        level="ERROR",
        rotation="00:00",
        retention="90 days",
        compression="zip",
        enqueue=True,
    )

    logger.info(f"Logging configured: console + file output in {logs_dir}")
