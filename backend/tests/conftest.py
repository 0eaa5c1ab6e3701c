"""
Test fixtures for the Bookkeeping API.

Tests drive the ASGI app in-process through httpx.  The database dependency
is replaced by ``FakeSession``, which records every statement and answers
from a queue of canned results, and the upstream backend by an
``httpx.MockTransport``.
"""
import uuid
from contextlib import asynccontextmanager
from datetime import datetime

import httpx
import pytest
import pytest_asyncio

from bookkeeper.database import get_db
from bookkeeper.main import app
from bookkeeper.middleware.auth import create_access_token, demo_user
from bookkeeper.services.proxy import get_upstream_client

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------
BASE_URL = "http://testserver"
UPSTREAM_URL = "http://backend.test"
DEMO_ORG_ID = "550e8400-e29b-41d4-a716-446655440000"


# ---------------------------------------------------------------------------
# Fake database session
# ---------------------------------------------------------------------------

class FakeResult:
    """The subset of ``sqlalchemy.engine.Result`` the routes use."""

    def __init__(self, rows=()):
        self._rows = list(rows)

    def scalars(self):
        return self

    def unique(self):
        return self

    def all(self):
        return list(self._rows)

    def first(self):
        return self._rows[0] if self._rows else None

    def scalar_one_or_none(self):
        return self._rows[0] if self._rows else None

    def scalar_one(self):
        assert len(self._rows) == 1, f"expected one row, got {len(self._rows)}"
        return self._rows[0]


def _fill_server_defaults(obj) -> None:
    """Stand in for values the database would generate on insert."""
    now = datetime(2025, 1, 15, 12, 0, 0)
    if getattr(obj, "id", None) is None:
        obj.id = uuid.uuid4()
    for attr in ("created_at", "updated_at", "timestamp"):
        if hasattr(obj, attr) and getattr(obj, attr) is None:
            setattr(obj, attr, now)
    for line in getattr(obj, "lines", None) or ():
        _fill_server_defaults(line)


class FakeSession:
    def __init__(self):
        self.results: list[FakeResult] = []
        self.statements = []
        self.added = []
        self.commits = 0
        self.rollbacks = 0
        self.fail_with: Exception | None = None

    def queue(self, *rows):
        """Queue the rows answered by the next ``execute`` call."""
        self.results.append(FakeResult(rows))
        return self

    async def execute(self, stmt, params=None):
        if self.fail_with is not None:
            raise self.fail_with
        self.statements.append(stmt)
        return self.results.pop(0) if self.results else FakeResult()

    def add(self, obj):
        _fill_server_defaults(obj)
        self.added.append(obj)

    async def commit(self):
        if self.fail_with is not None:
            raise self.fail_with
        self.commits += 1

    async def rollback(self):
        self.rollbacks += 1

    async def refresh(self, obj):
        _fill_server_defaults(obj)

    async def close(self):
        pass


class UpstreamStub:
    """Records proxied requests and answers with ``self.response``."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.response = httpx.Response(200, json={})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def db():
    return FakeSession()


@pytest.fixture
def upstream():
    return UpstreamStub()


@asynccontextmanager
async def app_client(db, upstream, **transport_options):
    """Async HTTP client bound to the app with fake DB and upstream."""

    async def _get_db():
        yield db

    async def _get_upstream_client():
        transport = httpx.MockTransport(upstream.handler)
        async with httpx.AsyncClient(base_url=UPSTREAM_URL, transport=transport) as c:
            yield c

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_upstream_client] = _get_upstream_client
    transport = httpx.ASGITransport(app=app, **transport_options)
    try:
        async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(db, upstream):
    async with app_client(db, upstream) as c:
        yield c


@pytest_asyncio.fixture
async def tolerant_client(db, upstream):
    """Client that receives the 500 response for unhandled errors."""
    async with app_client(db, upstream, raise_app_exceptions=False) as c:
        yield c


@pytest.fixture
def token():
    """JWT for the demo user."""
    return create_access_token(demo_user())


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}
