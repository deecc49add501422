# ============================================================================
# File: ingestion/runner.py
# Description: Pagination driver for the CouchDB -> PostgreSQL snippet migration
# ============================================================================
"""
Migration Runner - drives the fetch -> transform -> load loop.

The loop is an explicit state machine with the cursor and the processed
count as loop-carried state:

    Start -> Fetching(cursor, processed) -> Loading -> Fetching(...) -> Done

- One page is fetched, loaded and committed before the next fetch
- An empty page is the only successful exit
- Any error aborts the run; committed pages stay committed and the
  checkpoint (or the last_committed_key in the error context) tells the
  next run where to resume
"""

from typing import Dict, Any, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from ingestion.extractors.couchdb_extractor import CouchDBExtractor
from ingestion.transformers.snippet_transformer import SnippetTransformer
from ingestion.loaders.postgres_loader import PostgresLoader
from ingestion.lookup import load_owner_profiles
from ingestion.checkpoint import get_checkpoint
from core.exceptions import MigrationError

logger = logging.getLogger(__name__)


class MigrationRunner:
    """
    Pagination driver

    Responsibilities:
    - Load the owner lookup table once
    - Pick the starting cursor (explicit, stored checkpoint, or none)
    - Thread the cursor and running total through every page
    - Report progress once per fetched page
    """

    def __init__(
        self,
        db_session: AsyncSession,
        extractor: CouchDBExtractor,
        page_size: int = 1000,
        checkpoint_name: Optional[str] = None
    ):
        self.db = db_session
        self.extractor = extractor
        self.page_size = page_size
        self.checkpoint_name = checkpoint_name

    async def run(self, start_key: Optional[str] = None, resume: bool = True) -> Dict[str, Any]:
        """
        Migrate every document after the starting cursor.

        Args:
            start_key: Explicit cursor; overrides any stored checkpoint
            resume: Start from the stored checkpoint when no start_key is given

        Returns:
            Dictionary with run statistics:
            - status: "success"
            - records_processed: Documents processed, including resumed ones
            - pages: Number of non-empty pages loaded in this run
            - checkpoint: Natural key of the last committed document

        Raises:
            MigrationError: On any failure; context carries the last committed key
        """
        cursor: Optional[str] = None
        processed = 0
        pages = 0

        try:
            profiles = await load_owner_profiles(self.db)
            loader = PostgresLoader(
                self.db,
                SnippetTransformer(profiles),
                checkpoint_name=self.checkpoint_name
            )

            cursor, processed = await self._initial_state(start_key, resume)

            while True:
                page = await self.extractor.fetch_page(cursor, self.page_size)

                logger.info(f"Processed {processed} of {page.total_rows}")

                documents = page.documents
                if not documents:
                    break

                cursor = await loader.load_page(
                    documents,
                    records_processed=processed + len(documents)
                )
                processed += len(documents)
                pages += 1

        except MigrationError as e:
            e.context["last_committed_key"] = cursor
            e.context["records_processed"] = processed
            logger.error(
                f"Migration failed: {e.message}",
                extra={"error_context": e.to_dict()}
            )
            raise

        except Exception as e:
            logger.error(f"Unexpected error in migration: {str(e)}")
            raise MigrationError(
                "Unexpected error in migration",
                context={
                    "last_committed_key": cursor,
                    "records_processed": processed
                },
                original_exception=e
            )

        logger.info(f"Migration completed: {processed} documents in {pages} pages")

        return {
            "status": "success",
            "records_processed": processed,
            "pages": pages,
            "checkpoint": cursor
        }

    async def _initial_state(
        self,
        start_key: Optional[str],
        resume: bool
    ) -> Tuple[Optional[str], int]:
        """Starting cursor and processed count"""
        if start_key is not None:
            logger.info(f"Starting after explicit key {start_key!r}")
            return start_key, 0

        if resume and self.checkpoint_name:
            checkpoint = await get_checkpoint(self.db, self.checkpoint_name)
            if checkpoint and checkpoint.checkpoint_value:
                logger.info(
                    f"Resuming after {checkpoint.checkpoint_value!r} "
                    f"({checkpoint.records_processed} already processed)"
                )
                return checkpoint.checkpoint_value, checkpoint.records_processed

        return None, 0
