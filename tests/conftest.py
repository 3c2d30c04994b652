"""
Test fixtures for the shared credit engine.

This module provides shared test fixtures including database setup,
factory binding, and common test utilities.
"""

from datetime import date

import pytest
from sqlalchemy.orm import Session

from shared_credit_core.config import DatabaseConfig, reset_config
from shared_credit_core.context.tenant_context import TenantContext
from shared_credit_core.db import DatabaseManager, import_all_models
from shared_credit_core.db.db_config import Base, initialize_db
from shared_credit_core.exceptions import clear_correlation_id
from shared_credit_core.utils.encryption_utils import encrypt_value
from shared_credit_core.utils.logger import reset_logging
from tests.fixtures.factories import configure_factories

TEST_ENCRYPTION_KEY = "unit-test-credential-key"


@pytest.fixture(scope="session")
def db_config() -> DatabaseConfig:
    """Create SQLite in-memory database configuration for testing."""
    return DatabaseConfig(connection_string="sqlite:///:memory:", echo=False)


@pytest.fixture(scope="session")
def db_manager(db_config: DatabaseConfig) -> DatabaseManager:
    """Create and initialize database manager with all models."""
    import_all_models()
    return initialize_db(db_config)


@pytest.fixture(scope="function")
def db_session(db_manager: DatabaseManager) -> Session:
    """
    Create a database session for each test.

    Tables are created before and dropped after every test so no rows leak
    between tests.
    """
    session = db_manager.get_session()
    Base.metadata.create_all(db_manager.engine)

    yield session

    session.rollback()
    session.close()
    Base.metadata.drop_all(db_manager.engine)


@pytest.fixture(scope="function")
def factory_session(db_session):
    """Bind all factories to the test session."""
    configure_factories(db_session)
    return db_session


@pytest.fixture(autouse=True)
def clean_globals(monkeypatch):
    """Isolate configuration, logging and context state between tests."""
    monkeypatch.setenv("CREDENTIAL_ENCRYPTION_KEY", TEST_ENCRYPTION_KEY)
    monkeypatch.delenv("MAX_SHARES", raising=False)
    reset_config()
    reset_logging()
    yield
    TenantContext.clear_current_tenant()
    clear_correlation_id()
    reset_config()
    reset_logging()


@pytest.fixture
def sample_tenant_id() -> str:
    """Standard tenant ID for testing."""
    return "test-tenant-123"


@pytest.fixture
def other_tenant_id() -> str:
    """A second tenant for isolation tests."""
    return "test-tenant-456"


@pytest.fixture
def today() -> date:
    """Fixed reference day inside a 30-day month."""
    return date(2024, 6, 20)


@pytest.fixture
def encrypt():
    """Encrypt a credential with the test key."""
    return lambda value: encrypt_value(value, TEST_ENCRYPTION_KEY)
