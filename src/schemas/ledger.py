"""Pydantic models for ledger sessions, player aggregates and settlements.

These are the plain data structures the ledger engine consumes and produces.
Field names are snake_case in Python and camelCase on the wire, which keeps
JSON backups compatible with the browser app's format.
"""

import datetime as dt
from typing import Self

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


class LedgerModel(BaseModel):
    """Base model with camelCase JSON aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PlayerSessionStat(LedgerModel):
    """One player's result within one session, amounts in minor units."""

    name: str
    full_name: str
    buy_in: float = 0.0
    buy_out: float = 0.0
    net: float = 0.0


class SessionRecord(LedgerModel):
    """One analyzed poker session (one uploaded ledger file)."""

    session_id: str = Field(
        validation_alias=AliasChoices("sessionId", "gameId", "session_id"),
        serialization_alias="sessionId",
    )
    date: dt.date | None = None
    players: list[PlayerSessionStat]
    winner_name: str = Field(
        validation_alias=AliasChoices("winnerName", "winner", "winner_name"),
        serialization_alias="winnerName",
    )
    winner_full_name: str | None = None
    winner_profit: float
    total_pot: float
    player_count: int
    added_at: dt.datetime | None = None
    ledger_filename: str | None = None

    @field_validator("added_at")
    @classmethod
    def _assume_utc(cls, value: dt.datetime | None) -> dt.datetime | None:
        # Older backups stored naive timestamps
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=dt.UTC)
        return value

    @model_validator(mode="after")
    def _check_players(self) -> Self:
        if not self.players:
            raise ValueError("A game needs at least one player")
        if self.player_count != len(self.players):
            raise ValueError(
                f"playerCount is {self.player_count} but {len(self.players)} players are listed"
            )
        return self


class AggregatedPlayerStat(LedgerModel):
    """Cross-session rollup for one player (computed, never stored)."""

    key: str
    name: str
    full_name: str
    total_buy_in: float = 0.0
    total_buy_out: float = 0.0
    total_net: float = 0.0
    games_played: int = 0
    wins: int = 0
    rank: int = 0
    win_rate: float = 0.0
    actual_value: float = 0.0
    rounded_value: int = 0
    rounding_diff: float = 0.0


class Settlement(LedgerModel):
    """A recommended payment from a debtor to a creditor."""

    from_player: str = Field(alias="from")
    to_player: str = Field(alias="to")
    amount: int
    actual_amount: float


class BalanceCheck(LedgerModel):
    """Receivable vs payable totals over rounded player values."""

    total_receivable: int
    total_payable: int
    balance: int
    is_balanced: bool
    total_net: float


class HistoryPoint(LedgerModel):
    """Cumulative profit after one session."""

    game: str
    date: dt.date | None = None
    profit: float
    net: float


class PlayerHistory(LedgerModel):
    """Per-player statistics over the sessions they played."""

    name: str
    full_name: str
    total_games: int
    total_profit: float
    wins: int
    win_rate: float
    best_win: float
    worst_loss: float
    highest_net: float
    lowest_net: float
    history: list[HistoryPoint]
