"""FastAPI application for the PokerNow ledger tracker."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from sqlmodel import Session

from src.api.v1.router import api_router
from src.core.config import PLAYER_ALIASES_FILE
from src.core.db import create_db_and_tables, engine, mirror_engine
from src.core.error_handlers import register_exception_handlers
from src.core.logging_config import configure_logging
from src.services.alias_service import add_aliases_from_file


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events."""
    configure_logging()
    logger.info("Starting PokerNow ledger application...")
    logger.info("Initializing database...")
    create_db_and_tables()
    if mirror_engine is not None:
        logger.info("Mirror database configured, creating tables...")
        create_db_and_tables(mirror_engine)
    logger.success("Database initialized successfully")
    logger.info("Importing player aliases...")
    with Session(engine) as session:
        add_aliases_from_file(session, PLAYER_ALIASES_FILE)
    await asyncio.sleep(0)  # Satisfy RUF029 (async function must await)
    logger.success("Application startup complete")
    yield
    logger.info("Shutting down PokerNow ledger application...")


app = FastAPI(title="PokerNow Ledger", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(api_router)


@app.get("/")
def read_root() -> dict[str, str]:
    """Return welcome message for the root endpoint."""
    logger.debug("Root endpoint accessed")
    return {"message": "Welcome to PokerNow Ledger API"}
