"""Pydantic request/response schemas for API endpoints."""

import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field

from src.schemas.ledger import LedgerModel, SessionRecord

type SettlementStatusValue = Literal[
    "pending", "payment_sent", "paid", "adjusted", "adjusted_offline"
]


class FileUploadResult(BaseModel):
    """Result of a single file upload."""

    filename: str
    status: str
    message: str
    session_id: str | None = None


class BatchUploadResponse(BaseModel):
    """Response for batch upload operation."""

    total: int
    successful: int
    failed: int
    skipped: int
    results: list[FileUploadResult]


class DeleteResponse(BaseModel):
    """Number of sessions removed."""

    deleted: int


class BackupData(LedgerModel):
    """JSON backup of every stored session."""

    version: int
    export_date: dt.datetime
    games: list[SessionRecord]
    game_count: int
    app_name: str


class ImportResponse(BaseModel):
    """Number of sessions restored from a backup."""

    imported: int


class MergeRequest(BaseModel):
    """Merge every entry shown as ``source`` into ``target``."""

    source: str
    target: str


class MergeResponse(BaseModel):
    """Result of a player merge."""

    source: str
    target: str
    updated: int


class SettlementStatusUpdate(BaseModel):
    """Advisory status for a debtor/creditor pair."""

    debtor: str = Field(min_length=1)
    creditor: str = Field(min_length=1)
    status: SettlementStatusValue
    amount: float | None = None


class SettlementView(LedgerModel):
    """A recomputed settlement with its stored advisory status."""

    from_player: str = Field(alias="from")
    to_player: str = Field(alias="to")
    amount: int
    actual_amount: float
    status: SettlementStatusValue = "pending"
    updated_at: dt.datetime | None = None


class SyncResult(BaseModel):
    """Outcome of pushing local sessions to the hosted mirror."""

    uploaded: int = 0
    skipped: int = 0
    errors: int = 0
