"""
Load snippet pages into PostgreSQL, one transaction per page
"""

from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from models.code_snippet import CodeSnippet
from models.code_file import CodeFile
from schemas.couchdb import SourceDocument
from schemas.snippets import CodeSnippetCreate
from ingestion.transformers.snippet_transformer import SnippetTransformer
from ingestion.checkpoint import stage_checkpoint
from core.database import dialect_insert
from core.exceptions import MigrationError, DatabaseError
import logging

logger = logging.getLogger(__name__)


class PostgresLoader:
    """
    Write pages of snippet documents with page-level atomicity.

    Ensures:
    - A snippet is never visible without all of its files
    - Either every row of a page is committed or none is
    - Re-loading an already migrated slug is a no-op (ON CONFLICT DO NOTHING)
    - The checkpoint, when enabled, is committed with the page it describes
    """

    def __init__(
        self,
        db_session: AsyncSession,
        transformer: SnippetTransformer,
        checkpoint_name: Optional[str] = None
    ):
        self.db = db_session
        self.transformer = transformer
        self.checkpoint_name = checkpoint_name

        # Built once and reused for every page
        insert = dialect_insert(db_session)
        snippets = CodeSnippet.__table__
        self._insert_snippet = (
            insert(snippets)
            .on_conflict_do_nothing(index_elements=[snippets.c.slug])
            .returning(snippets.c.id)
        )
        self._insert_file = insert(CodeFile.__table__)

    async def load_page(
        self,
        documents: List[SourceDocument],
        records_processed: int = 0
    ) -> Optional[str]:
        """
        Transform and insert a page inside a single transaction.

        Args:
            documents: Page of documents in fetch order
            records_processed: Running total to store with the checkpoint

        Returns:
            _id of the last document (the next cursor), None for an empty page

        Raises:
            DataFormatError: If a document cannot be transformed (page rolled back)
            DatabaseError: If an insert or the commit fails (page rolled back)
        """
        if not documents:
            return None

        inserted = 0
        skipped = 0
        cursor = documents[-1].id

        try:
            for document in documents:
                snippet = self.transformer.transform(document)

                if await self._insert(snippet):
                    inserted += 1
                else:
                    skipped += 1
                    logger.debug(f"Snippet {snippet.slug} already migrated, skipping")

            if self.checkpoint_name:
                await stage_checkpoint(self.db, self.checkpoint_name, cursor, records_processed)

            await self.db.commit()

        except MigrationError:
            await self.db.rollback()
            raise

        except SQLAlchemyError as e:
            await self.db.rollback()
            raise DatabaseError(
                "Failed to load snippet page",
                context={
                    "operation": "INSERT",
                    "table_name": CodeSnippet.__tablename__,
                    "first_slug": documents[0].id,
                    "last_slug": cursor,
                    "page_size": len(documents)
                },
                original_exception=e
            )

        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Loaded page ending at {cursor!r}: {inserted} inserted, {skipped} already migrated")
        return cursor

    async def _insert(self, snippet: CodeSnippetCreate) -> bool:
        """Insert one snippet and its files; False if the slug already exists"""
        result = await self.db.execute(self._insert_snippet, snippet.row())
        snippet_id = result.scalar_one_or_none()

        if snippet_id is None:
            return False

        if snippet.files:
            await self.db.execute(
                self._insert_file,
                [
                    {"code_snippet_id": snippet_id, "name": f.name, "content": f.content}
                    for f in snippet.files
                ]
            )

        return True
