from fastapi import APIRouter

from src.api.deps import MirrorSessionDep, SessionDep, SessionsDep
from src.schemas.errors import CONFLICT_RESPONSE
from src.schemas.schemas import SettlementStatusUpdate, SettlementView
from src.services.aggregation_service import aggregate_players
from src.services.settlement_service import (
    calculate_settlements,
    settlements_with_status,
    update_settlement_status,
)

router = APIRouter()


@router.get("/", response_model=list[SettlementView])
def read_settlements(
    session: SessionDep, mirror: MirrorSessionDep, sessions: SessionsDep
) -> list[SettlementView]:
    """Payments that settle every balance, with their advisory status."""
    settlements = calculate_settlements(aggregate_players(sessions))
    return settlements_with_status(session, settlements, mirror)


@router.put("/status", response_model=SettlementView, responses=CONFLICT_RESPONSE)
def put_settlement_status(
    update: SettlementStatusUpdate,
    session: SessionDep,
    mirror: MirrorSessionDep,
    sessions: SessionsDep,
) -> SettlementView:
    """Record the payment status of a debtor/creditor pair."""
    record = update_settlement_status(session, update, mirror)
    current = next(
        (
            s
            for s in calculate_settlements(aggregate_players(sessions))
            if (s.from_player, s.to_player) == (update.debtor, update.creditor)
        ),
        None,
    )
    return SettlementView(
        from_player=record.debtor,
        to_player=record.creditor,
        amount=current.amount if current else 0,
        actual_amount=current.actual_amount if current else 0.0,
        status=update.status,
        updated_at=record.updated_at,
    )
