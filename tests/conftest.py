"""Pytest configuration and shared fixtures."""

from collections.abc import Callable, Generator
import datetime as dt
import os
from pathlib import Path
import tempfile

# Keep the app's engine and log files away from the working directory
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", str(Path(tempfile.gettempdir()) / "pokernow-ledger-test-logs"))
os.environ.setdefault("PLAYER_ALIASES_FILE", "does-not-exist.json")

import pytest  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from src.dao.game_dao import create_game  # noqa: E402
from src.models import Game, PlayerNickname  # noqa: E402
from src.schemas.ledger import PlayerSessionStat, SessionRecord  # noqa: E402
from src.services.alias_service import AliasTable  # noqa: E402

LEDGER_HEADER = "player_nickname,player_id,session_start_at,session_end_at,buy_in,buy_out,stack,net"


@pytest.fixture
def test_engine():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(test_engine) -> Generator[Session, None, None]:
    """Create a database session for testing."""
    with Session(test_engine) as session:
        yield session
        session.rollback()


@pytest.fixture
def mirror_test_engine():
    """A second in-memory database standing in for the hosted mirror."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def mirror(mirror_test_engine) -> Generator[Session, None, None]:
    """Create a mirror database session for testing."""
    with Session(mirror_test_engine) as session:
        yield session


@pytest.fixture
def aliases() -> AliasTable:
    """A small alias table."""
    return AliasTable({"cs": "Chintan Shah", "GP": "Gaurav Jain"})


@pytest.fixture
def stored_aliases(session) -> None:
    """The same aliases stored in the nickname table."""
    session.add(PlayerNickname(nickname="cs", player_name="Chintan Shah"))
    session.add(PlayerNickname(nickname="gp", player_name="Gaurav Jain"))
    session.commit()


def make_session(
    session_id: str,
    nets: dict[str, float],
    date: dt.date | None = None,
    buy_in: float = 100.0,
    full_names: dict[str, str] | None = None,
) -> SessionRecord:
    """Build a session record from ``{handle: net}``, winner first."""
    full_names = full_names or {}
    players = sorted(
        (
            PlayerSessionStat(
                name=name,
                full_name=full_names.get(name, name),
                buy_in=buy_in,
                buy_out=buy_in + net,
                net=net,
            )
            for name, net in nets.items()
        ),
        key=lambda p: p.net,
        reverse=True,
    )
    return SessionRecord(
        session_id=session_id,
        date=date,
        players=players,
        winner_name=players[0].name,
        winner_full_name=players[0].full_name,
        winner_profit=players[0].net,
        total_pot=buy_in * len(players),
        player_count=len(players),
    )


@pytest.fixture
def session_factory() -> Callable[..., SessionRecord]:
    """Expose make_session to tests."""
    return make_session


@pytest.fixture
def two_sessions() -> list[SessionRecord]:
    """alice +50 / bob -50, then alice -20 / bob +20."""
    return [
        make_session("game_1", {"alice": 50, "bob": -50}, dt.date(2024, 1, 1)),
        make_session("game_2", {"alice": -20, "bob": 20}, dt.date(2024, 1, 8)),
    ]


@pytest.fixture
def ledger_csv() -> str:
    """A PokerNow ledger export with three players."""
    return "\n".join(
        [
            LEDGER_HEADER,
            "cs,a1,2024-03-02T18:30:00.000Z,2024-03-02T23:00:00.000Z,1000,2500,2500,1500",
            "gp,b2,2024-03-02T18:31:00.000Z,2024-03-02T23:00:00.000Z,1000,0,0,-1000",
            "kd,c3,2024-03-02T19:00:00.000Z,2024-03-02T23:00:00.000Z,1000,500,500,-500",
        ]
    )


@pytest.fixture
def temp_ledgers_dir(ledger_csv) -> Generator[Path, None, None]:
    """A directory holding two ledger files."""
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp)
        (path / "ledger_24_03_02.csv").write_text(ledger_csv, encoding="utf-8")
        (path / "ledger_24_03_09.csv").write_text(
            "\n".join(
                [
                    LEDGER_HEADER,
                    "cs,a1,2024-03-09T18:30:00.000Z,,1000,400,400,-600",
                    "kd,c3,2024-03-09T18:30:00.000Z,,1000,1600,1600,600",
                ]
            ),
            encoding="utf-8",
        )
        yield path


@pytest.fixture
def sample_game(session, two_sessions) -> Game:
    """The first of two_sessions stored in the database."""
    game = create_game(session, two_sessions[0])
    session.commit()
    session.refresh(game)
    return game
