"""
Script to migrate snippets from CouchDB into PostgreSQL
"""

import argparse
import asyncio
import sys
import os
import logging

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.config import get_settings
from core.database import create_engine, create_session_maker, check_connection
from core.exceptions import MigrationError
from core.logging import setup_logging
from ingestion.extractors.couchdb_extractor import CouchDBExtractor
from ingestion.runner import MigrationRunner

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Migrate CouchDB snippets into PostgreSQL")
    parser.add_argument(
        "--start-key",
        help="resume after this document _id (overrides the stored checkpoint)"
    )
    parser.add_argument(
        "--page-size",
        type=int,
        help="documents per page (default: PAGE_SIZE setting)"
    )
    parser.add_argument(
        "--ignore-checkpoint",
        action="store_true",
        help="start from the first document even if a checkpoint is stored"
    )
    return parser.parse_args(argv)


async def run_migration(args: argparse.Namespace) -> int:
    """Run the migration; returns the process exit status"""
    try:
        settings = get_settings()
    except MigrationError as e:
        setup_logging()
        logger.error(str(e))
        return 1

    setup_logging(settings.LOG_LEVEL)

    engine = create_engine(settings.DATABASE_URL)
    session_maker = create_session_maker(engine)

    extractor = CouchDBExtractor(
        base_url=settings.COUCHDB_BASE_URL,
        database=settings.COUCHDB_DATABASE,
        timeout=settings.COUCHDB_TIMEOUT
    )

    try:
        await check_connection(engine)

        async with session_maker() as session:
            runner = MigrationRunner(
                session,
                extractor,
                page_size=args.page_size or settings.PAGE_SIZE,
                checkpoint_name=settings.CHECKPOINT_NAME
            )
            result = await runner.run(
                start_key=args.start_key,
                resume=not args.ignore_checkpoint
            )

        logger.info(
            f"Migration finished: {result['records_processed']} documents, "
            f"last key {result['checkpoint']!r}"
        )
        return 0

    except MigrationError as e:
        logger.exception(f"Migration aborted: {e}")
        return 1

    except Exception:
        logger.exception("Migration aborted by unexpected error")
        return 1

    finally:
        await engine.dispose()


if __name__ == "__main__":
    sys.exit(asyncio.run(run_migration(parse_args())))
