"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Must be set before any cafe_* module reads the settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["ID_SCHEME"] = "uuid"
os.environ["ENVIRONMENT"] = "test"

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cafe_api.main import app
from cafe_api.models import Base, Instax, Maid, Menu, User
from cafe_shared.config.settings import Settings, get_settings
from cafe_shared.infrastructure.db import build_engine, get_db
from cafe_shared.infrastructure.storage import MemoryObjectStore, StoredObject, get_object_store

ADMIN_KEY = "admin-secret-key-for-tests"
MAID_KEY = "maid-secret-key-for-tests"
CDN = "https://cdn.example"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


# SQLite in-memory database shared by every session through StaticPool
engine = build_engine("sqlite://", poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def new_id() -> str:
    return str(uuid.uuid4())


def multipart(fields: dict | None = None, **uploads) -> dict:
    """
    Build an httpx ``files`` mapping.

    Plain fields are sent as (None, value) parts so the request is
    multipart even without an upload.
    """
    parts = {name: (None, str(value)) for name, value in (fields or {}).items()}
    parts.update(uploads)
    return parts


def png(name: str = "photo.png") -> tuple:
    return (name, PNG_BYTES, "image/png")


def make_settings(**overrides) -> Settings:
    values = {
        "admin_api_password": ADMIN_KEY,
        "maid_api_password": MAID_KEY,
        "public_base_url": CDN,
        "storage_backend": "memory",
        "environment": "test",
        "debug": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store():
    return MemoryObjectStore()


@pytest.fixture
def test_settings():
    return make_settings()


@pytest.fixture(scope="function")
def client(db_session, store, test_settings):
    """
    Create a test client with database, storage and settings overrides.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_object_store] = lambda: store
    app.dependency_overrides[get_settings] = lambda: test_settings

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def sql_statements(client):
    """
    SQL statements sent to the test database while the fixture is active.

    Depends on ``client`` so table creation at startup is not recorded.
    """
    statements: list[str] = []

    def record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(engine, "before_cursor_execute", record)
    yield statements
    event.remove(engine, "before_cursor_execute", record)


@pytest.fixture
def maid_headers():
    return {"x-api-key": MAID_KEY}


@pytest.fixture
def admin_headers():
    return {"x-api-key": ADMIN_KEY}


# =============================================================================
# Seed data
# =============================================================================


@pytest.fixture
def seed_maid(db_session):
    """An active maid who takes instax photos."""
    maid = Maid(id=new_id(), name="Mimi", is_active=True, is_instax_available=True)
    db_session.add(maid)
    db_session.commit()
    db_session.refresh(maid)
    return maid


@pytest.fixture
def seed_inactive_maid(db_session):
    maid = Maid(id=new_id(), name="Nana", is_active=False, is_instax_available=False)
    db_session.add(maid)
    db_session.commit()
    db_session.refresh(maid)
    return maid


@pytest.fixture
def seed_user(db_session, seed_maid):
    """A valid user seated at seat 3 with ``seed_maid``."""
    user = User(id=new_id(), name="Taro", seat_id=3, maid_id=seed_maid.id, is_valid=True)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def seed_menu(db_session):
    menu = Menu(name="Omurice", description="Drawn with ketchup", stock=5, image_key="menus/1/omurice.png")
    db_session.add(menu)
    db_session.commit()
    db_session.refresh(menu)
    return menu


@pytest.fixture
def seed_instax(db_session, store, seed_user, seed_maid):
    """An instax whose image blob exists in ``store``."""
    key = f"instax/{seed_user.id}/first.png"
    store._objects[key] = StoredObject(key=key, data=PNG_BYTES, content_type="image/png")
    instax = Instax(user_id=seed_user.id, maid_id=seed_maid.id, image_key=key)
    db_session.add(instax)
    db_session.commit()
    db_session.refresh(instax)
    return instax
