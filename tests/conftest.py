"""Shared test fixtures and configuration.

Points the app at a throwaway SQLite file and turns the reminder loop off,
then gives every test fresh tables and an HTTP client bound to the app.
"""

import os
import tempfile

# Patch env vars BEFORE any journalmate imports
_tmp_dir = tempfile.mkdtemp(prefix="journalmate-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmp_dir}/test.db"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["REMINDER_POLL_SECONDS"] = "0"

import httpx
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session

from journalmate.database import AsyncSessionLocal, Base, engine
from journalmate.main import app


@pytest.fixture(autouse=True)
async def setup_db():
    """Create every table before the test and drop them afterwards."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    # connections are tied to this test's event loop
    await engine.dispose()


@pytest.fixture
async def db_session():
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def register(client):
    """Register and log in a user; returns (user dict, auth headers)."""

    async def _register(username="alice", password="s3cret-pass", **extra):
        payload = {"username": username, "password": password, **extra}
        resp = await client.post("/auth/register", json=payload)
        assert resp.status_code == 201, resp.text
        login = await client.post("/auth/login", json={"username": username, "password": password})
        assert login.status_code == 200, login.text
        body = login.json()
        return body["user"], {"Authorization": f"Bearer {body['access_token']}"}

    return _register


@pytest.fixture
async def auth(register):
    """Headers for a default user."""
    _, headers = await register()
    return headers


@pytest.fixture
def commit_first():
    """Make another connection commit `row` right before `session` commits, as a concurrent request would."""

    def _arm(session, row):
        def insert(_session):
            sync_engine = create_engine(engine.url.set(drivername="sqlite"))
            try:
                with Session(sync_engine) as other:
                    other.add(row)
                    other.commit()
            finally:
                sync_engine.dispose()

        event.listen(session.sync_session, "before_commit", insert, once=True)

    return _arm
