"""
Pytest configuration and fixtures
"""

import json
import pytest
import pytest_asyncio
import httpx
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from typing import AsyncGenerator, Any, Dict, List, Optional
from core.database import create_session_maker
from models import Base, Profile

DESIGN_DOC_ID = "_design/snippets"


class FakeCouchDB:
    """
    In-memory stand-in for the CouchDB _all_docs view.

    Applies startkey, skip and limit the way CouchDB does: rows are sorted by
    _id, the design document comes first, startkey is inclusive.
    """

    def __init__(self, documents: List[Dict[str, Any]], total_rows: Optional[int] = None):
        self.documents = documents
        self.total_rows = total_rows
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        params = request.url.params

        entries = sorted(
            [{"_id": DESIGN_DOC_ID, "_rev": "1-design"}] + self.documents,
            key=lambda doc: doc["_id"]
        )

        offset = 0
        if "startkey" in params:
            start_key = json.loads(params["startkey"])
            offset = len([doc for doc in entries if doc["_id"] < start_key])
            entries = entries[offset:]

        skip = int(params.get("skip", 0))
        limit = int(params.get("limit", len(entries)))
        entries = entries[skip:skip + limit]

        total_rows = self.total_rows if self.total_rows is not None else len(self.documents) + 1
        return httpx.Response(
            200,
            json={
                "total_rows": total_rows,
                "offset": offset + skip,
                "rows": [
                    {"id": doc["_id"], "key": doc["_id"], "value": {"rev": doc["_rev"]}, "doc": doc}
                    for doc in entries
                ]
            }
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def make_document():
    """Factory for CouchDB snippet documents"""

    def _make(doc_id: str, **overrides) -> Dict[str, Any]:
        doc = {
            "_id": doc_id,
            "_rev": "1-abc",
            "created": "2020-05-01T10:00:00+02:00",
            "modified": "2020-05-02T11:30:00+02:00",
            "language": "python",
            "title": f"Snippet {doc_id}",
            "public": True,
            "owner": "owner-1",
            "files": [
                {"name": "main.py", "content": "print('hello')\n"}
            ]
        }
        doc.update(overrides)
        return doc

    return _make


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path):
    """SQLite database with the destination schema"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'migration.db'}",
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests"""
    session_maker = create_session_maker(test_engine)

    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def seeded_profiles(db_session):
    """Owner profiles; "owner-unknown" is deliberately absent"""
    db_session.add_all([
        Profile(user_id=1, snippets_api_id="owner-1", username="alice"),
        Profile(user_id=2, snippets_api_id="owner-2", username="bob"),
    ])
    await db_session.commit()


@pytest.fixture
def fake_couchdb():
    """Factory for FakeCouchDB instances"""
    return FakeCouchDB
