# ============================================================================
# File: tests/integration/test_migration_pipeline.py
# ============================================================================

import logging
import pytest
from unittest.mock import patch
from sqlalchemy import select, func

from ingestion.extractors.couchdb_extractor import CouchDBExtractor
from ingestion.runner import MigrationRunner
from models import CodeSnippet, CodeFile, Language, MigrationCheckpoint

COUCHDB_URL = "http://couchdb.test:5984"
CHECKPOINT_NAME = "couchdb_snippets"


def make_runner(db_session, couch, page_size=1000):
    extractor = CouchDBExtractor(base_url=COUCHDB_URL, transport=couch.transport)
    return MigrationRunner(db_session, extractor, page_size=page_size, checkpoint_name=CHECKPOINT_NAME)


async def count(db_session, model):
    return await db_session.scalar(select(func.count()).select_from(model))


async def stored_checkpoint(db_session):
    result = await db_session.execute(
        select(MigrationCheckpoint.checkpoint_value, MigrationCheckpoint.records_processed)
        .where(MigrationCheckpoint.source_name == CHECKPOINT_NAME)
    )
    return result.one_or_none()


@pytest.mark.asyncio
async def test_three_documents_single_page(db_session, seeded_profiles, fake_couchdb, make_document, caplog):
    """
    Store holds a, b, c behind the design document:
    1. One page with all three documents, committed once
    2. Second fetch starts after c and is empty
    3. Progress ends at "Processed 3 of 3"
    """
    caplog.set_level(logging.INFO, logger="ingestion.runner")
    couch = fake_couchdb([make_document(k) for k in ["a", "b", "c"]], total_rows=3)
    runner = make_runner(db_session, couch)

    with patch.object(db_session, "commit", wraps=db_session.commit) as commit_spy:
        result = await runner.run()

    assert result == {
        "status": "success",
        "records_processed": 3,
        "pages": 1,
        "checkpoint": "c"
    }
    commit_spy.assert_awaited_once()

    assert len(couch.requests) == 2
    assert "startkey" not in couch.requests[0].url.params
    assert couch.requests[0].url.params["skip"] == "1"
    assert couch.requests[1].url.params["startkey"] == '"c"'
    assert couch.requests[1].url.params["startkey_docid"] == "c"

    snippets = (await db_session.execute(select(CodeSnippet).order_by(CodeSnippet.slug))).scalars().all()
    assert [s.slug for s in snippets] == ["a", "b", "c"]
    assert len({s.id for s in snippets}) == 3

    assert "Processed 0 of 3" in caplog.text
    assert "Processed 3 of 3" in caplog.text


@pytest.mark.asyncio
async def test_rows_are_transformed(db_session, seeded_profiles, fake_couchdb, make_document):
    couch = fake_couchdb([
        make_document("a", owner="owner-1", language="PERL6", title="ti\0tle"),
        make_document("b", owner="owner-unknown", language="brainfuck", public=False),
        make_document("c", owner="owner-2", language="Go", files=[
            {"name": "main.go", "content": "package main"},
            {"name": "RE\0ADME", "content": [0, 159, 146, 150]},
        ]),
    ])

    await make_runner(db_session, couch).run()

    result = await db_session.execute(
        select(CodeSnippet.slug, CodeSnippet.user_id, CodeSnippet.language, CodeSnippet.title, CodeSnippet.public)
        .order_by(CodeSnippet.slug)
    )
    rows = {row.slug: row for row in result}

    assert rows["a"].user_id == 1
    assert rows["a"].language == Language.RAKU
    assert rows["a"].title == "title"
    assert rows["b"].user_id is None
    assert rows["b"].language == Language.PLAINTEXT
    assert rows["b"].public is False
    assert rows["c"].user_id == 2
    assert rows["c"].language == Language.GO

    files = (await db_session.execute(
        select(CodeFile.name, CodeFile.content)
        .join(CodeSnippet, CodeFile.code_snippet_id == CodeSnippet.id)
        .where(CodeSnippet.slug == "c")
        .order_by(CodeFile.id)
    )).all()
    assert [tuple(f) for f in files] == [
        ("main.go", b"package main"),
        ("README", b"\x00\x9f\x92\x96"),
    ]


@pytest.mark.asyncio
async def test_multiple_pages(db_session, seeded_profiles, fake_couchdb, make_document):
    keys = ["a", "b", "c", "d", "e"]
    couch = fake_couchdb([make_document(k) for k in keys])

    result = await make_runner(db_session, couch, page_size=2).run()

    assert result["records_processed"] == 5
    assert result["pages"] == 3
    assert [r.url.params.get("startkey_docid") for r in couch.requests] == [None, "b", "d", "e"]
    assert await count(db_session, CodeSnippet) == 5
    assert await count(db_session, CodeFile) == 5
    assert tuple(await stored_checkpoint(db_session)) == ("e", 5)


@pytest.mark.asyncio
async def test_second_run_resumes_from_checkpoint(db_session, seeded_profiles, fake_couchdb, make_document):
    couch = fake_couchdb([make_document(k) for k in ["a", "b", "c"]])
    await make_runner(db_session, couch, page_size=2).run()

    couch.documents.extend([make_document("d"), make_document("e")])
    couch.requests.clear()

    result = await make_runner(db_session, couch, page_size=2).run()

    assert couch.requests[0].url.params["startkey_docid"] == "c"
    assert result["records_processed"] == 5
    assert result["pages"] == 1
    assert await count(db_session, CodeSnippet) == 5
    assert tuple(await stored_checkpoint(db_session)) == ("e", 5)


@pytest.mark.asyncio
async def test_rerun_from_start_does_not_duplicate(db_session, seeded_profiles, fake_couchdb, make_document, caplog):
    caplog.set_level(logging.DEBUG, logger="ingestion.loaders.postgres_loader")
    couch = fake_couchdb([make_document(k) for k in ["a", "b", "c"]])
    await make_runner(db_session, couch).run()

    result = await make_runner(db_session, couch).run(resume=False)

    assert result["records_processed"] == 3
    assert await count(db_session, CodeSnippet) == 3
    assert await count(db_session, CodeFile) == 3
    assert "Snippet a already migrated, skipping" in caplog.text
    assert "0 inserted, 3 already migrated" in caplog.text


@pytest.mark.asyncio
async def test_empty_store(db_session, seeded_profiles, fake_couchdb):
    couch = fake_couchdb([])

    result = await make_runner(db_session, couch).run()

    assert result["records_processed"] == 0
    assert result["checkpoint"] is None
    assert len(couch.requests) == 1
    assert await stored_checkpoint(db_session) is None
