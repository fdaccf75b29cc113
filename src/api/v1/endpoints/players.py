from fastapi import APIRouter
from loguru import logger

from src.api.deps import SessionDep, SessionsDep
from src.schemas.errors import INVALID_INPUT_RESPONSE, NOT_FOUND_RESPONSE
from src.schemas.ledger import AggregatedPlayerStat, BalanceCheck, PlayerHistory
from src.schemas.schemas import MergeRequest, MergeResponse
from src.services.aggregation_service import aggregate_players, balance_check
from src.services.player_stats_service import merge_players, player_history

router = APIRouter()


@router.get("/", response_model=list[AggregatedPlayerStat])
def read_players(sessions: SessionsDep) -> list[AggregatedPlayerStat]:
    """Ranked player totals across every game."""
    logger.info(f"Aggregating players over {len(sessions)} games")
    return aggregate_players(sessions)


@router.get("/balance", response_model=BalanceCheck)
def read_balance(sessions: SessionsDep) -> BalanceCheck:
    """Receivable vs payable totals; unbalanced ledgers show a non-zero balance."""
    return balance_check(aggregate_players(sessions))


@router.post(
    "/merge",
    response_model=MergeResponse,
    responses={**NOT_FOUND_RESPONSE, **INVALID_INPUT_RESPONSE},
)
def merge_player_profiles(request: MergeRequest, session: SessionDep) -> MergeResponse:
    """Fold one player's games into another player."""
    updated = merge_players(session, request.source, request.target)
    return MergeResponse(source=request.source, target=request.target, updated=updated)


@router.get("/{name}", response_model=PlayerHistory, responses=NOT_FOUND_RESPONSE)
def read_player(name: str, sessions: SessionsDep) -> PlayerHistory:
    """Game-by-game history for one player handle."""
    logger.info(f"Fetching history for player {name}")
    return player_history(sessions, name)
