"""Pytest configuration and shared fixtures."""

import os
import tempfile
from datetime import date
from pathlib import Path
from typing import Generator

# Config, engine and loggers are built at import time, so the environment must
# be in place before anything from patriot_thanks is imported.
_temp_dir = tempfile.mkdtemp(prefix="patriot_thanks_tests_")
_test_db_url = os.environ.get("PATRIOT_TEST_DATABASE_URL") or (
    f"sqlite:///{Path(_temp_dir) / 'test.db'}"
)
os.environ["PATRIOT_DATABASE_URL"] = _test_db_url
os.environ["PATRIOT_LOG_TO_FILE"] = "0"
os.environ["PATRIOT_USER_DATA_DIR"] = _temp_dir

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from alembic import command
from alembic.config import Config

from patriot_thanks.db.models import BusinessType, IncentiveType, UsState
from patriot_thanks.repositories.interfaces import RepositoryContainer
from patriot_thanks.repositories.memory_impl import create_memory_container
from patriot_thanks.repositories.sqlalchemy_impl import (
    SQLAlchemyBusinessRepository,
    SQLAlchemyBusinessLocationRepository,
    SQLAlchemyIncentiveRepository,
    SQLAlchemyBusinessTypeRepository,
    SQLAlchemyIncentiveTypeRepository,
    SQLAlchemySchoolRepository,
    SQLAlchemySchoolLocationRepository,
    SQLAlchemyUsStateRepository,
)

FIXED_TODAY = date(2025, 6, 15)


def _project_root() -> Path:
    """Return the repository root path."""
    return Path(__file__).resolve().parents[1]


def _run_alembic_migrations(db_url: str):
    """Run Alembic migrations programmatically for test database."""
    alembic_cfg = Config()
    alembic_cfg.set_main_option("script_location", str(_project_root() / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", db_url)

    command.upgrade(alembic_cfg, "head")


@pytest.fixture(scope="session")
def migrated_db_url() -> str:
    """Migrate the test database once per session."""
    _run_alembic_migrations(_test_db_url)
    return _test_db_url


@pytest.fixture
def test_db(migrated_db_url):
    """Session factory over the migrated database; tables are emptied afterwards."""
    from patriot_thanks.db.database import Base

    engine = create_engine(migrated_db_url, connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    yield TestingSessionLocal

    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())
    engine.dispose()


@pytest.fixture
def db_session(test_db):
    """A database session closed after the test."""
    session = test_db()

    yield session

    session.close()


@pytest.fixture
def reference_data(db_session):
    """Seed business types, incentive types and a state; returns their IDs."""
    restaurant = BusinessType(name="Restaurant", display_order=2)
    retail = BusinessType(name="Retail", display_order=1)
    veteran = IncentiveType(name="Veteran", display_order=1)
    active_duty = IncentiveType(name="Active Duty", display_order=2)
    iowa = UsState(code="IA", name="Iowa")
    db_session.add_all([restaurant, retail, veteran, active_duty, iowa])
    db_session.commit()

    return {
        "restaurant": restaurant.id,
        "retail": retail.id,
        "veteran": veteran.id,
        "active_duty": active_duty.id,
        "iowa": iowa.id,
    }


@pytest.fixture
def sql_repos(db_session) -> RepositoryContainer:
    """Repository container over the test session."""
    return RepositoryContainer(
        business_repo=SQLAlchemyBusinessRepository(db_session),
        business_location_repo=SQLAlchemyBusinessLocationRepository(db_session),
        incentive_repo=SQLAlchemyIncentiveRepository(db_session),
        business_type_repo=SQLAlchemyBusinessTypeRepository(db_session),
        incentive_type_repo=SQLAlchemyIncentiveTypeRepository(db_session),
        school_repo=SQLAlchemySchoolRepository(db_session),
        school_location_repo=SQLAlchemySchoolLocationRepository(db_session),
        us_state_repo=SQLAlchemyUsStateRepository(db_session),
    )


@pytest.fixture
def memory_repos() -> RepositoryContainer:
    """In-memory repository container seeded with lookup types and a state."""
    return create_memory_container(
        business_types=[
            BusinessType(id=1, name="Restaurant", display_order=2, is_active=True),
            BusinessType(id=2, name="Retail", display_order=1, is_active=True),
        ],
        incentive_types=[
            IncentiveType(id=1, name="Veteran", display_order=1, is_active=True),
            IncentiveType(id=2, name="Active Duty", display_order=2, is_active=True),
        ],
        states=[UsState(id=1, code="IA", name="Iowa")],
    )


@pytest.fixture
def client(test_db) -> Generator[TestClient, None, None]:
    """Create a test client with database dependency override."""
    from patriot_thanks.main import app
    from patriot_thanks.db.database import get_db

    def override_get_db():
        # Use a fresh session per request in tests
        db = test_db()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    # Clear overrides to avoid affecting other tests
    app.dependency_overrides.clear()
