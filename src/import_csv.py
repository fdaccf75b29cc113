"""Script to import a directory of PokerNow CSV ledgers into the database."""

import argparse

from loguru import logger
from sqlmodel import Session

from src.core.config import LEDGERS_DIR, PLAYER_ALIASES_FILE
from src.core.db import create_db_and_tables, engine, mirror_engine
from src.core.logging_config import configure_logging
from src.services.alias_service import add_aliases_from_file, load_alias_table
from src.services.import_service import import_all_ledgers, reset_db
from src.services.sync_service import sync_to_mirror


def main(argv: list[str] | None = None) -> None:
    """Import ledgers, then push them to the mirror when one is configured."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--ledgers-dir", default=LEDGERS_DIR)
    parser.add_argument("--aliases", default=PLAYER_ALIASES_FILE)
    parser.add_argument(
        "--reset", action="store_true", help="Drop and recreate tables first"
    )
    args = parser.parse_args(argv)

    configure_logging()
    logger.info("Starting CSV import script...")
    if args.reset:
        reset_db()
    else:
        create_db_and_tables()

    with Session(engine) as session:
        add_aliases_from_file(session, args.aliases)
        import_all_ledgers(session, load_alias_table(session), args.ledgers_dir)

        if mirror_engine is not None:
            logger.info("Syncing to mirror database...")
            create_db_and_tables(mirror_engine)
            with Session(mirror_engine) as mirror:
                sync_to_mirror(session, mirror)

    logger.success("CSV import script completed successfully")


if __name__ == "__main__":
    main()
