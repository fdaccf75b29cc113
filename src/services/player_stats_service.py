"""Service for per-player history and player maintenance."""

from collections.abc import Iterable
import datetime as dt

from loguru import logger
from sqlmodel import Session

from src.core.exceptions import NotFoundError, ValidationError
from src.dao.game_dao import get_player_rows_by_full_name
from src.models import Game
from src.schemas.ledger import HistoryPoint, PlayerHistory, PlayerSessionStat, SessionRecord
from src.services.aggregation_service import player_key


def _find_player(record: SessionRecord, key: str) -> PlayerSessionStat | None:
    return next((p for p in record.players if player_key(p.name) == key), None)


def player_history(sessions: Iterable[SessionRecord], name: str) -> PlayerHistory:
    """Calculate a player's statistics over the sessions they played.

    This calculates:
    - total_games / total_profit: sessions played and summed net
    - wins: sessions with a positive net
    - best_win / worst_loss: highest and lowest single-session net
    - highest_net / lowest_net: rolling max/min of the cumulative net
    - history: cumulative profit after each session, oldest first

    Args:
        sessions: Full session collection
        name: Player handle, matched case-insensitively

    Raises:
        NotFoundError: if the player appears in no session
    """
    key = player_key(name)
    played = [
        (record, player)
        for record in sessions
        if (player := _find_player(record, key)) is not None
    ]
    if not played:
        raise NotFoundError(
            message=f"Player {name} not found", details={"player": name}
        )

    # Undated sessions sort first
    played.sort(key=lambda item: item[0].date or dt.date.min)

    total_profit = 0.0
    wins = 0
    highest_net = 0.0
    lowest_net = 0.0
    history: list[HistoryPoint] = []

    for index, (record, player) in enumerate(played, start=1):
        total_profit += player.net
        highest_net = max(highest_net, total_profit)
        lowest_net = min(lowest_net, total_profit)
        if player.net > 0:
            wins += 1
        history.append(
            HistoryPoint(
                game=f"Game {index}", date=record.date, profit=total_profit, net=player.net
            )
        )

    total_games = len(played)
    # Single-session extremes; best_win is negative when every session lost
    nets = [player.net for _, player in played]
    first_seen = played[0][1]
    logger.debug(
        f"History for {first_seen.name}: net={total_profit:.2f}, games={total_games}"
    )
    return PlayerHistory(
        name=first_seen.name,
        full_name=first_seen.full_name,
        total_games=total_games,
        total_profit=total_profit,
        wins=wins,
        win_rate=round(wins / total_games * 100, 1),
        best_win=max(nets),
        worst_loss=min(nets),
        highest_net=highest_net,
        lowest_net=lowest_net,
        history=history,
    )


def _rerank_game(session: Session, game: Game) -> None:
    """Restore net-descending order and winner fields after rows changed."""
    rows = sorted(game.player_games, key=lambda r: (-r.net, r.position))
    for position, row in enumerate(rows):
        row.position = position
        session.add(row)
    winner = rows[0]
    game.winner_name = winner.name
    game.winner_full_name = winner.full_name
    game.winner_profit = winner.net
    game.player_count = len(rows)
    session.add(game)


def merge_players(session: Session, source: str, target: str) -> int:
    """Fold every entry displayed as ``source`` into the player displayed as ``target``.

    Source rows take the target's handle so aggregation groups them together.
    In games where both players appear the source row is summed into the
    target row and removed.

    Returns:
        Number of source entries merged.
    """
    source = source.strip()
    target = target.strip()
    if not source or not target:
        raise ValidationError(message="Please select both source and target players")
    if source == target:
        raise ValidationError(
            message="Source and target players must be different",
            details={"source": source, "target": target},
        )

    source_rows = get_player_rows_by_full_name(session, source)
    if not source_rows:
        raise NotFoundError(message=f"Player {source} not found", details={"player": source})
    target_rows = get_player_rows_by_full_name(session, target)
    if not target_rows:
        raise NotFoundError(message=f"Player {target} not found", details={"player": target})

    target_handle = target_rows[0].name
    target_by_game = {row.game_id: row for row in target_rows}
    touched: dict[int, Game] = {}

    for row in source_rows:
        touched[row.game_id] = row.game
        existing = target_by_game.get(row.game_id)
        if existing is None:
            row.name = target_handle
            row.full_name = target
            session.add(row)
            target_by_game[row.game_id] = row
            continue
        existing.buy_in += row.buy_in
        existing.buy_out += row.buy_out
        existing.net += row.net
        session.add(existing)
        row.game.player_games.remove(row)
        session.delete(row)

    for game in touched.values():
        _rerank_game(session, game)
    session.commit()

    logger.success(
        f"Merged {source} into {target}: {len(source_rows)} entries in "
        + f"{len(touched)} games"
    )
    return len(source_rows)
