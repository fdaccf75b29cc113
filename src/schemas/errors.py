"""Error response schemas for API documentation."""

from typing import Any

from pydantic import BaseModel

from src.core.exceptions import ErrorDetails


class ErrorDetail(BaseModel):
    """Standard error detail structure."""

    code: str
    message: str
    details: ErrorDetails = {}


class ErrorResponse(BaseModel):
    """Standard error response wrapper."""

    error: ErrorDetail


NOT_FOUND_RESPONSE: dict[int | str, dict[str, Any]] = {
    404: {"model": ErrorResponse, "description": "Game or player not found"}
}
INVALID_INPUT_RESPONSE: dict[int | str, dict[str, Any]] = {
    422: {"model": ErrorResponse, "description": "Invalid ledger, backup or request"}
}
CONFLICT_RESPONSE: dict[int | str, dict[str, Any]] = {
    409: {"model": ErrorResponse, "description": "Concurrent update of the same record"}
}
MIRROR_UNAVAILABLE_RESPONSE: dict[int | str, dict[str, Any]] = {
    503: {"model": ErrorResponse, "description": "No mirror database is configured"}
}
