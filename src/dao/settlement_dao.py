"""Data Access Object for settlement status operations."""

from sqlmodel import Session, select

from src.models import SettlementStatus


def get_status(session: Session, debtor: str, creditor: str) -> SettlementStatus | None:
    """Get the status row for a debtor/creditor pair."""
    return session.exec(
        select(SettlementStatus).where(
            SettlementStatus.debtor == debtor,
            SettlementStatus.creditor == creditor,
        )
    ).first()


def get_all_statuses(session: Session) -> list[SettlementStatus]:
    """Get every stored settlement status."""
    return list(session.exec(select(SettlementStatus)).all())


def save_status(session: Session, status: SettlementStatus) -> SettlementStatus:
    """Create or update a settlement status row."""
    session.add(status)
    return status
