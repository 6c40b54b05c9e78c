"""Pytest configuration and fixtures.

Every test gets a fresh in-memory SQLite database (aiosqlite, one shared
connection) with foreign keys enforced, so CASCADE / SET NULL behave as on
PostgreSQL.
"""

import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.deps import get_webauthn_verifier
from app.db.base import Base
from app.main import create_application
from app.models.program import Program
from app.models.user import User
from app.schemas.exercise import ExerciseCreate
from app.services.ordering import add_exercise
from tests.fakes import FakeVerifier

API = "/api/v1"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        # Let SQLAlchemy emit BEGIN itself so SAVEPOINT works under the driver
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def verifier():
    return FakeVerifier()


@pytest.fixture
def app(session_maker, verifier):
    application = create_application(session_maker=session_maker)
    application.dependency_overrides[get_webauthn_verifier] = lambda: verifier
    return application


@pytest.fixture
async def make_client(app):
    """Factory for clients with their own cookie jar (one per browser)."""
    clients = []

    def _make() -> AsyncClient:
        client = AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")
        clients.append(client)
        return client

    yield _make
    for client in clients:
        await client.aclose()


@pytest.fixture
def client(make_client):
    return make_client()


async def sign_up(client: AsyncClient, email: str = "lifter@example.com") -> dict:
    """Register a new account through /auth/check + /auth/verify and keep its session."""
    r = await client.post(f"{API}/auth/check", json={"email": email})
    assert r.status_code == 200, r.text
    assert r.json()["flow"] == "registration"
    r = await client.post(
        f"{API}/auth/verify",
        json={
            "email": email,
            "flow_type": "registration",
            "credential_response": {"id": f"cred-{email}"},
        },
    )
    assert r.status_code == 200, r.text
    return r.json()


@pytest.fixture
async def user(db):
    user = User(email="owner@example.com", webauthn_id=uuid.uuid4().hex)
    db.add(user)
    await db.flush()
    return user


@pytest.fixture
async def program(db, user):
    program = Program(user_id=user.id, title="Leg day", description="Squats *and* lunges")
    db.add(program)
    await db.flush()
    return program


async def add_exercises(db, program, *specs):
    """Append (name, repeat_count) pairs to program in order."""
    exercises = []
    for name, repeat_count in specs:
        exercises.append(
            await add_exercise(db, program, ExerciseCreate(name=name, repeat_count=repeat_count))
        )
    return exercises
