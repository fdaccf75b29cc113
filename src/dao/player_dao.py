"""Data Access Object for player alias operations."""

from sqlmodel import Session, select

from src.models import PlayerNickname


def get_nickname(session: Session, nickname: str) -> PlayerNickname | None:
    """Get an alias row by its (lower-cased) handle."""
    return session.exec(
        select(PlayerNickname).where(PlayerNickname.nickname == nickname)
    ).first()


def get_all_nicknames(session: Session) -> list[PlayerNickname]:
    """Get every alias row."""
    return list(session.exec(select(PlayerNickname)).all())


def create_nickname(session: Session, nickname: PlayerNickname) -> PlayerNickname:
    """Create a new player nickname."""
    session.add(nickname)
    return nickname
