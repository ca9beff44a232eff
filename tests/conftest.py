"""
Shared test fixtures for PharmaDesk tests.
"""
import os
import pytest
from unittest.mock import patch, MagicMock
from pathlib import Path

# Load .env file FIRST before any backend imports
from dotenv import load_dotenv
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path, override=True)

# Set test-specific environment
os.environ["TESTING"] = "true"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

# Now import and clear settings cache to pick up test values
from backend.config import get_settings
get_settings.cache_clear()

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


@pytest.fixture(scope="function")
def test_engine():
    """Create a test database engine with tables using shared in-memory DB."""
    from backend.core.database import Base
    # Import models BEFORE create_all to register them with Base
    from backend.models.database import Variant, Unit  # noqa: F401

    # Use StaticPool to ensure all connections share the same in-memory database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(test_engine):
    """Create a test database session."""
    Session = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def client_with_db(test_engine):
    """Create a test client with properly configured database.

    Patches both the get_db dependency AND the underlying engine/SessionLocal
    so every database operation uses the test database.
    """
    from fastapi.testclient import TestClient
    from backend.main import app
    from backend.core import database as db_module
    from backend.core.database import get_db

    # Save original values
    original_engine = db_module.engine
    original_session_local = db_module.SessionLocal

    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    db_module.engine = test_engine
    db_module.SessionLocal = TestSessionLocal

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)
    yield client

    # Restore original values
    app.dependency_overrides.clear()
    db_module.engine = original_engine
    db_module.SessionLocal = original_session_local


@pytest.fixture
def session_state():
    """Plain dict standing in for st.session_state."""
    state = {}
    with patch(
        'frontend.utils.session_state.SessionState._get_session_state',
        return_value=state,
    ):
        yield state


@pytest.fixture
def mock_gateway():
    """Variant gateway double with an empty backend."""
    gateway = MagicMock()
    gateway.existing_names.return_value = frozenset()
    return gateway


@pytest.fixture
def sample_variant_payload():
    """Sample variant in the camelCase wire format."""
    return {
        "variantName": "Tablet",
        "unitDtos": [
            {"unitName": "Box"},
            {"unitName": "Strip"},
        ],
    }
