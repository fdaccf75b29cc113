"""Cross-session player aggregation.

Statistics are recomputed from the complete session collection on every call;
nothing here keeps state between calls.
"""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from loguru import logger

from src.schemas.ledger import AggregatedPlayerStat, BalanceCheck, SessionRecord

# Minor units per major unit (paise per rupee, cents per dollar)
MINOR_UNITS = 100

# Rounding drift below this is ignored
ROUNDING_TOLERANCE = 0.01


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, with .5 going away from zero."""
    return int(Decimal(repr(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def player_key(name: str) -> str:
    """Grouping key for a player handle."""
    return name.strip().lower()


def aggregate_players(sessions: Iterable[SessionRecord]) -> list[AggregatedPlayerStat]:
    """Roll up every player's results across sessions, ranked by total net.

    The player with the largest absolute total net absorbs the summed
    rounding remainder so rounded values reconcile with the actual total.
    """
    stats: dict[str, AggregatedPlayerStat] = {}

    for session in sessions:
        winner_key = player_key(session.winner_name)
        for player in session.players:
            key = player_key(player.name)
            stat = stats.get(key)
            if stat is None:
                stat = AggregatedPlayerStat(
                    key=key,
                    name=player.name,
                    full_name=player.full_name or player.name,
                )
                stats[key] = stat
            stat.total_buy_in += player.buy_in
            stat.total_buy_out += player.buy_out
            stat.total_net += player.net
            stat.games_played += 1
            if winner_key == key:
                stat.wins += 1

    players = sorted(stats.values(), key=lambda p: p.total_net, reverse=True)

    for rank, stat in enumerate(players, start=1):
        stat.rank = rank
        stat.win_rate = round(stat.wins / stat.games_played * 100, 1)
        stat.actual_value = stat.total_net / MINOR_UNITS
        stat.rounded_value = round_half_away_from_zero(stat.actual_value)
        stat.rounding_diff = stat.actual_value - stat.rounded_value

    total_rounding_diff = sum(p.rounding_diff for p in players)
    if players and abs(total_rounding_diff) > ROUNDING_TOLERANCE:
        # max() keeps the first of equally large players
        largest = max(players, key=lambda p: abs(p.total_net))
        adjustment = round_half_away_from_zero(total_rounding_diff)
        largest.rounded_value += adjustment
        logger.debug(
            f"Rounding remainder {total_rounding_diff:.4f} absorbed by "
            + f"{largest.full_name} ({adjustment:+d})"
        )

    return players


def balance_check(players: Iterable[AggregatedPlayerStat]) -> BalanceCheck:
    """Compare what winners are owed with what losers owe, in rounded units."""
    players = list(players)
    total_receivable = sum(p.rounded_value for p in players if p.rounded_value > 0)
    total_payable = sum(-p.rounded_value for p in players if p.rounded_value < 0)
    balance = total_receivable - total_payable
    total_net = sum(p.total_net for p in players)

    if abs(balance) >= 1:
        logger.warning(
            f"Ledger is unbalanced: receivable {total_receivable}, payable {total_payable}"
        )

    return BalanceCheck(
        total_receivable=total_receivable,
        total_payable=total_payable,
        balance=balance,
        is_balanced=abs(balance) < 1,
        total_net=total_net,
    )
