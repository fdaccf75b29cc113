"""CSV report of consolidated player statistics and settlements."""

from collections.abc import Sequence
import csv
import datetime as dt
import io

from src.core.config import APP_NAME
from src.schemas.ledger import SessionRecord
from src.services.aggregation_service import aggregate_players
from src.services.ledger_parser import BOM
from src.services.settlement_service import calculate_settlements


def _format_amount(value: float) -> str:
    return str(int(value)) if value.is_integer() else f"{value:.2f}"


def build_csv_report(
    sessions: Sequence[SessionRecord], generated_at: dt.datetime | None = None
) -> str:
    """Render player totals and settlements as a BOM-prefixed CSV string."""
    generated_at = generated_at or dt.datetime.now(dt.UTC)
    players = aggregate_players(sessions)
    settlements = calculate_settlements(players)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\r\n")
    writer.writerow([f"{APP_NAME} Report"])
    writer.writerow(["Generated", generated_at.isoformat(timespec="seconds")])
    writer.writerow([])

    writer.writerow(["Player", "Games", "Wins", "Total Net", "Actual Value"])
    for p in players:
        writer.writerow(
            [
                p.full_name,
                p.games_played,
                p.wins,
                _format_amount(p.total_net),
                f"{p.actual_value:.2f}",
            ]
        )

    writer.writerow([])
    writer.writerow(["Settlements"])
    writer.writerow(["From", "To", "Amount"])
    for s in settlements:
        writer.writerow([s.from_player, s.to_player, s.amount])

    return BOM + buffer.getvalue()
