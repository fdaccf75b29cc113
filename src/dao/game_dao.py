"""Data Access Object for Game operations."""

import datetime as dt

from sqlmodel import Session, col, select

from src.models import Game, PlayerGameStats
from src.schemas.ledger import PlayerSessionStat, SessionRecord


def get_game_by_session_id(session: Session, session_id: str) -> Game | None:
    """Get a game by its session id."""
    return session.exec(select(Game).where(Game.session_id == session_id)).first()


def find_game_by_content(
    session: Session, date: dt.date | None, winner_name: str, total_pot: float
) -> Game | None:
    """Find a game with the same date, winner and pot (uploads without a natural id)."""
    statement = select(Game).where(
        Game.date == date,
        Game.winner_name == winner_name,
        Game.total_pot == total_pot,
    )
    return session.exec(statement).first()


def get_all_games(session: Session) -> list[Game]:
    """Get all games, newest date first, undated games last."""
    statement = select(Game).order_by(
        col(Game.date).desc().nulls_last(), col(Game.added_at).desc()
    )
    return list(session.exec(statement).all())


def create_game(session: Session, record: SessionRecord) -> Game:
    """Create a game with its player rows and return it with ID populated."""
    game = Game(
        session_id=record.session_id,
        date=record.date,
        winner_name=record.winner_name,
        winner_full_name=record.winner_full_name,
        winner_profit=record.winner_profit,
        total_pot=record.total_pot,
        player_count=record.player_count,
        ledger_filename=record.ledger_filename,
    )
    if record.added_at is not None:
        game.added_at = record.added_at
    game.player_games = [
        PlayerGameStats(
            position=position,
            name=player.name,
            full_name=player.full_name,
            buy_in=player.buy_in,
            buy_out=player.buy_out,
            net=player.net,
        )
        for position, player in enumerate(record.players)
    ]
    session.add(game)
    session.flush()
    return game


def delete_game(session: Session, game: Game) -> None:
    """Delete a game and its player rows."""
    session.delete(game)


def delete_all_games(session: Session) -> int:
    """Delete every game. Returns the number deleted."""
    games = list(session.exec(select(Game)).all())
    for game in games:
        session.delete(game)
    return len(games)


def get_player_rows_by_full_name(session: Session, full_name: str) -> list[PlayerGameStats]:
    """Get all player rows displayed under ``full_name``."""
    return list(
        session.exec(
            select(PlayerGameStats)
            .where(PlayerGameStats.full_name == full_name)
            .order_by(col(PlayerGameStats.game_id), col(PlayerGameStats.id))
        ).all()
    )


def to_session_record(game: Game) -> SessionRecord:
    """Convert a stored game to the engine's session record."""
    return SessionRecord(
        session_id=game.session_id,
        date=game.date,
        players=[
            PlayerSessionStat(
                name=row.name,
                full_name=row.full_name,
                buy_in=row.buy_in,
                buy_out=row.buy_out,
                net=row.net,
            )
            for row in sorted(game.player_games, key=lambda r: r.position)
        ],
        winner_name=game.winner_name,
        winner_full_name=game.winner_full_name,
        winner_profit=game.winner_profit,
        total_pot=game.total_pot,
        player_count=game.player_count,
        added_at=game.added_at,
        ledger_filename=game.ledger_filename,
    )
