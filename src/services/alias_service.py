"""Player alias table: maps PokerNow handles to display names."""

from collections.abc import Mapping
import json
from pathlib import Path
from typing import cast

from loguru import logger
from sqlmodel import Session

from src.dao.player_dao import create_nickname, get_all_nicknames, get_nickname
from src.models import PlayerNickname


def _normalize(handle: str) -> str:
    return handle.strip().lower()


class AliasTable:
    """Case-insensitive handle → display name lookup.

    Unknown handles resolve to themselves.
    """

    def __init__(self, aliases: Mapping[str, str] | None = None) -> None:
        self._aliases: dict[str, str] = {
            _normalize(handle): name for handle, name in (aliases or {}).items()
        }

    def resolve(self, handle: str) -> str:
        """Return the display name for ``handle``."""
        return self._aliases.get(_normalize(handle), handle)


def load_alias_table(session: Session) -> AliasTable:
    """Build an alias table from the ``PlayerNickname`` rows."""
    nicknames = get_all_nicknames(session)
    return AliasTable({n.nickname: n.player_name for n in nicknames})


def add_aliases(session: Session, aliases: Mapping[str, str]) -> int:
    """Store aliases, skipping handles that already exist. Returns the count added."""
    added_count = 0
    skipped_count = 0
    for handle, player_name in aliases.items():
        nickname = _normalize(handle)
        if not nickname or get_nickname(session, nickname):
            skipped_count += 1
            continue
        create_nickname(session, PlayerNickname(nickname=nickname, player_name=player_name))
        added_count += 1
    session.commit()
    logger.success(f"Added {added_count} aliases, skipped {skipped_count} existing.")
    return added_count


def add_aliases_from_file(session: Session, aliases_file: str | Path) -> int:
    """Load ``{handle: display name}`` JSON and store it. Missing file adds nothing."""
    path = Path(aliases_file)
    if not path.exists():
        logger.info(f"No alias file at {path}, skipping alias import")
        return 0

    with path.open("r", encoding="utf-8") as f:
        aliases = cast("dict[str, str]", json.load(f))
    return add_aliases(session, aliases)
