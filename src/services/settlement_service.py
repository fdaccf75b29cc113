"""Greedy debt settlement and advisory settlement status."""

from collections.abc import Sequence
from dataclasses import dataclass
import datetime as dt

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from src.core.exceptions import ConflictError
from src.dao.settlement_dao import get_all_statuses, get_status, save_status
from src.models import SettlementStatus
from src.schemas.ledger import AggregatedPlayerStat, Settlement
from src.schemas.schemas import SettlementStatusUpdate, SettlementView
from src.services.aggregation_service import round_half_away_from_zero


@dataclass
class _Balance:
    name: str
    outstanding: float


def calculate_settlements(players: Sequence[AggregatedPlayerStat]) -> list[Settlement]:
    """Match debtors to creditors with a two-pointer sweep.

    Creditors are visited largest first and debtors most-indebted first, so
    the output is creditor-major. At most ``creditors + debtors - 1``
    payments are produced. If the nets do not sum to zero the sweep stops when
    either side runs out and the remainder stays unsettled.
    """
    # Working copies; the input is not modified
    creditors = [
        _Balance(p.full_name, p.total_net)
        for p in sorted(players, key=lambda p: p.total_net, reverse=True)
        if p.total_net > 0
    ]
    debtors = [
        _Balance(p.full_name, p.total_net)
        for p in sorted(players, key=lambda p: p.total_net)
        if p.total_net < 0
    ]

    settlements: list[Settlement] = []
    ci = di = 0
    while ci < len(creditors) and di < len(debtors):
        creditor = creditors[ci]
        debtor = debtors[di]
        amount = min(creditor.outstanding, abs(debtor.outstanding))

        settlements.append(
            Settlement(
                from_player=debtor.name,
                to_player=creditor.name,
                amount=round_half_away_from_zero(amount),
                actual_amount=amount,
            )
        )

        creditor.outstanding -= amount
        debtor.outstanding += amount
        if creditor.outstanding == 0:
            ci += 1
        if debtor.outstanding == 0:
            di += 1

    unsettled = sum(c.outstanding for c in creditors[ci:]) + sum(
        d.outstanding for d in debtors[di:]
    )
    if unsettled:
        logger.warning(
            f"Player nets do not sum to zero; {unsettled:+.2f} left unsettled"
        )

    return settlements


def unsettled_remainder(
    players: Sequence[AggregatedPlayerStat], settlements: Sequence[Settlement]
) -> dict[str, float]:
    """Return each player's balance after applying ``settlements``; all zero when balanced."""
    remaining: dict[str, float] = {}
    for player in players:
        remaining[player.full_name] = remaining.get(player.full_name, 0.0) + player.total_net
    for settlement in settlements:
        remaining[settlement.from_player] += settlement.actual_amount
        remaining[settlement.to_player] -= settlement.actual_amount
    return remaining


def _mirror_statuses(mirror: Session | None) -> list[SettlementStatus]:
    if mirror is None:
        return []
    try:
        return get_all_statuses(mirror)
    except SQLAlchemyError as e:
        logger.error(f"Mirror settlement fetch failed, using local statuses: {e!s}")
        return []


def settlements_with_status(
    session: Session, settlements: Sequence[Settlement], mirror: Session | None = None
) -> list[SettlementView]:
    """Attach stored advisory status to recomputed settlements.

    Stored amounts are ignored: the amount always comes from current totals.
    With a mirror connected, the most recently updated status of a pair wins.
    """
    statuses: dict[tuple[str, str], SettlementStatus] = {}
    for stored in [*get_all_statuses(session), *_mirror_statuses(mirror)]:
        key = (stored.debtor, stored.creditor)
        current = statuses.get(key)
        if current is None or stored.updated_at > current.updated_at:
            statuses[key] = stored

    views: list[SettlementView] = []
    for settlement in settlements:
        stored = statuses.get((settlement.from_player, settlement.to_player))
        views.append(
            SettlementView(
                from_player=settlement.from_player,
                to_player=settlement.to_player,
                amount=settlement.amount,
                actual_amount=settlement.actual_amount,
                status=stored.status if stored else "pending",  # pyright: ignore[reportArgumentType]
                updated_at=stored.updated_at if stored else None,
            )
        )
    return views


def _upsert_status(
    session: Session, update: SettlementStatusUpdate, updated_at: dt.datetime
) -> SettlementStatus:
    record = get_status(session, update.debtor, update.creditor)
    if record is None:
        record = SettlementStatus(debtor=update.debtor, creditor=update.creditor)
    record.status = update.status
    record.amount = update.amount
    record.updated_at = updated_at
    save_status(session, record)
    session.commit()
    session.refresh(record)
    return record


def update_settlement_status(
    session: Session, update: SettlementStatusUpdate, mirror: Session | None = None
) -> SettlementStatus:
    """Create or update the status row for a debtor/creditor pair.

    The mirror, when connected, receives the same row. A mirror failure is
    logged and the local update still stands.

    Raises:
        ConflictError: if another writer created the same pair first.
    """
    updated_at = dt.datetime.now(dt.UTC)
    try:
        record = _upsert_status(session, update, updated_at)
    except IntegrityError as e:
        session.rollback()
        raise ConflictError(
            message=f"Settlement {update.debtor} -> {update.creditor} was changed "
            + "by another request, please retry",
            details={"debtor": update.debtor, "creditor": update.creditor},
        ) from e

    if mirror is not None:
        try:
            _upsert_status(mirror, update, updated_at)
        except SQLAlchemyError as e:
            mirror.rollback()
            logger.error(
                f"Failed to mirror settlement {update.debtor} -> {update.creditor}: {e!s}"
            )

    logger.info(
        f"Settlement {update.debtor} -> {update.creditor} marked {update.status}"
    )
    return record
