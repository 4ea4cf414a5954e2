# tests/conftest.py

import os

# Settings are read at import time; configure the environment first.
os.environ.setdefault("ENV", "local")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL_LOCAL", "sqlite://")
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.testclient import TestClient

from app.main import app
from app.db.session import get_db
from app.models import Base


# --- In-memory store ---
# One shared connection so every session sees the same in-memory database.
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


# --- Test Client Fixtures ---
@pytest.fixture(scope="function")
def client(db):
    """
    Provides a TestClient backed by the in-memory database. Authentication is
    NOT mocked: tests send real signed tokens from tests.utils.auth.
    """

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
