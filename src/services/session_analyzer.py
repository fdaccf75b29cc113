"""Per-session analysis: turns parsed ledger rows into a ``SessionRecord``."""

from collections.abc import Callable, Iterable, Mapping
import datetime as dt
import math
from pathlib import Path
import secrets
import string
import time

from loguru import logger

from src.core.exceptions import NoValidPlayersError
from src.schemas.ledger import PlayerSessionStat, SessionRecord

type DisplayNameResolver = Callable[[str], str]

_BASE36 = string.digits + string.ascii_lowercase


def parse_amount(val: str | None) -> float:
    """Parse a monetary value leniently: empty, non-numeric or non-finite is 0.0."""
    if not val or not val.strip():
        return 0.0
    try:
        amount = float(val.strip())
    except ValueError:
        return 0.0
    return amount if math.isfinite(amount) else 0.0


def parse_session_date(val: str) -> dt.date | None:
    """Return the UTC calendar date of an ISO-8601 timestamp, or None if unparseable."""
    try:
        stamp = dt.datetime.fromisoformat(val.strip())
    except ValueError:
        return None
    if stamp.tzinfo is not None:
        stamp = stamp.astimezone(dt.UTC)
    return stamp.date()


def generate_session_id() -> str:
    """Generate an id like ``game_1704103200000_k3j9x0a2b``."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"game_{time.time_ns() // 1_000_000}_{suffix}"


def session_id_from_filename(filename: str) -> str:
    """Derive a session id from an upload's filename: ``ledger_abc.csv`` -> ``abc``."""
    return Path(filename).stem.removeprefix("ledger_")


def analyze_session(
    rows: Iterable[Mapping[str, str]],
    resolve_display_name: DisplayNameResolver,
    session_id: str | None = None,
    ledger_filename: str | None = None,
) -> SessionRecord:
    """Aggregate ledger rows into one session record.

    Rows for the same nickname (case-insensitive) are summed. Rows without a
    nickname are skipped. The first row carrying ``session_start_at`` sets
    the session date.

    Raises:
        NoValidPlayersError: if no row has a player nickname.
    """
    player_stats: dict[str, PlayerSessionStat] = {}
    total_buy_in = 0.0
    game_date: dt.date | None = None
    skipped_rows = 0

    for row in rows:
        nickname = (row.get("player_nickname") or "").strip()
        if not nickname:
            skipped_rows += 1
            continue

        buy_in = parse_amount(row.get("buy_in"))
        buy_out = parse_amount(row.get("buy_out"))
        net = parse_amount(row.get("net"))

        session_start = (row.get("session_start_at") or "").strip()
        if session_start and game_date is None:
            game_date = parse_session_date(session_start)
            if game_date is None:
                logger.warning(f"Ignoring unparseable session_start_at: {session_start!r}")

        key = nickname.lower()
        stat = player_stats.get(key)
        if stat is None:
            stat = PlayerSessionStat(
                name=nickname, full_name=resolve_display_name(nickname)
            )
            player_stats[key] = stat

        stat.buy_in += buy_in
        stat.buy_out += buy_out
        stat.net += net
        total_buy_in += buy_in

    if skipped_rows:
        logger.debug(f"Skipped {skipped_rows} ledger rows without a player nickname")

    # sorted() is stable, so equal nets keep their first-seen order
    players = sorted(player_stats.values(), key=lambda p: p.net, reverse=True)
    if not players:
        raise NoValidPlayersError(
            message="No valid game data found. Make sure this is a PokerNow CSV file.",
            details={"skipped_rows": skipped_rows},
        )

    winner = players[0]
    return SessionRecord(
        session_id=session_id or generate_session_id(),
        date=game_date,
        players=players,
        winner_name=winner.name,
        winner_full_name=winner.full_name,
        winner_profit=winner.net,
        total_pot=total_buy_in,
        player_count=len(players),
        added_at=dt.datetime.now(dt.UTC),
        ledger_filename=ledger_filename,
    )
