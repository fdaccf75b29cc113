"""SQLModel data models for the PokerNow ledger service."""

import datetime as dt

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel  # type: ignore


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


class Game(SQLModel, table=True):
    """Represents a single poker session/game."""

    id: int | None = Field(default=None, primary_key=True)
    session_id: str = Field(index=True, unique=True)
    date: dt.date | None = Field(default=None, index=True)

    winner_name: str
    winner_full_name: str | None = None
    winner_profit: float = 0.0
    total_pot: float = 0.0
    player_count: int = 0

    added_at: dt.datetime = Field(default_factory=_utcnow)
    ledger_filename: str | None = None

    # Relationships
    player_games: list["PlayerGameStats"] = Relationship(  # type: ignore
        back_populates="game",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "PlayerGameStats.position",
        },
    )


class PlayerNickname(SQLModel, table=True):
    """Alias table: maps a PokerNow handle to a player's display name."""

    id: int | None = Field(default=None, primary_key=True)
    nickname: str = Field(index=True, unique=True, description="Lower-cased handle")
    player_name: str


class PlayerGameStats(SQLModel, table=True):
    """One player's totals within one game."""

    id: int | None = Field(default=None, primary_key=True)
    game_id: int = Field(foreign_key="game.id", index=True)

    # Position in the net-descending order of the game
    position: int = 0

    name: str = Field(index=True)
    full_name: str
    buy_in: float = 0.0
    buy_out: float = 0.0
    net: float = 0.0

    game: Game = Relationship(back_populates="player_games")  # type: ignore


class SettlementStatus(SQLModel, table=True):
    """Advisory payment status for a debtor/creditor pair."""

    __table_args__ = (UniqueConstraint("debtor", "creditor"),)

    id: int | None = Field(default=None, primary_key=True)
    debtor: str = Field(index=True)
    creditor: str = Field(index=True)
    status: str = Field(default="pending")
    amount: float | None = None
    updated_at: dt.datetime = Field(default_factory=_utcnow)
