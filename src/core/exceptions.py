"""Custom exception classes for consistent error handling across the application."""

from dataclasses import dataclass, field

# Shared type alias for error detail values
type ErrorDetails = dict[
    str, str | int | float | bool | list[str] | list[dict[str, str | int]] | None
]


@dataclass
class AppError(Exception):
    """Base exception for all application errors."""

    code: str = "app_error"
    message: str = "An application error occurred"
    details: ErrorDetails = field(default_factory=dict)

    def __str__(self) -> str:  # pyright: ignore[reportImplicitOverride]
        return self.message


@dataclass
class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    code: str = "not_found"
    message: str = "Resource not found"


@dataclass
class ValidationError(AppError):
    """Raised when domain validation fails."""

    code: str = "validation_error"
    message: str = "Validation failed"


@dataclass
class EmptyInputError(ValidationError):
    """Raised when ledger text has no header plus data rows."""

    code: str = "empty_input"
    message: str = "Ledger contains no data rows"


@dataclass
class NoValidPlayersError(ValidationError):
    """Raised when a ledger yields no rows with a player nickname."""

    code: str = "no_valid_players"
    message: str = "No valid game data found"


@dataclass
class ConflictError(AppError):
    """Raised when an operation conflicts with existing state."""

    code: str = "conflict"
    message: str = "Resource conflict"


@dataclass
class MirrorUnavailableError(AppError):
    """Raised when an operation needs the hosted mirror and none is configured."""

    code: str = "mirror_unavailable"
    message: str = "Mirror database is not configured"


@dataclass
class InternalError(AppError):
    """Raised for unexpected internal errors."""

    code: str = "internal_error"
    message: str = "Internal server error"
