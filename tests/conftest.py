"""
Register pytest fixtures used across the test suite.

The application runs against an in-memory SQLite database; the ``get_db``
dependency is overridden so each test gets a fresh schema.
"""

import os
import sys
from pathlib import Path

THIS_DIR = Path(__file__).parent
TESTS_DIR_PARENT = (THIS_DIR / "..").resolve()

# add the repository root to PYTHONPATH so "app" imports resolve without installation
sys.path.insert(0, str(TESTS_DIR_PARENT))

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENVIRONMENT", "local")
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.core.database import Base
from app.main import app as fastapi_app
from app.models.church import Church, ChurchAdmin, ChurchLocation
from app.models.common import ChurchStatus
import app.models  # noqa: F401

from tests.helpers import ADMIN_EMAIL, OTHER_EMAIL, auth_headers


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def session(session_factory):
    """A session for tests that call the service layer directly."""
    db_session = session_factory()
    try:
        yield db_session
    finally:
        db_session.rollback()
        db_session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db_session = session_factory()
        try:
            yield db_session
            db_session.commit()
        except Exception:
            db_session.rollback()
            raise
        finally:
            db_session.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return auth_headers(ADMIN_EMAIL)


@pytest.fixture
def other_headers():
    return auth_headers(OTHER_EMAIL)


@pytest.fixture
def make_church(session_factory):
    """Insert a church directly, bypassing the API."""
    def _make_church(
        code: str = "acme",
        name: str = "Acme Church",
        time_offset: int = 0,
        status: ChurchStatus = ChurchStatus.ACTIVE,
        admins=(ADMIN_EMAIL,),
        locations=(),
    ) -> str:
        with session_factory() as db_session:
            church = Church(code=code, name=name, address="1 Main Street", time_offset=time_offset, status=status)
            church.admins = {ChurchAdmin(email=email) for email in admins}
            church.locations = [ChurchLocation(code=c, location=l) for c, l in locations]
            db_session.add(church)
            db_session.commit()
        return code

    return _make_church
