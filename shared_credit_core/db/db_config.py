"""
Engine and session management.

Connection settings come from the application config (DATABASE_URL) unless a
DatabaseConfig is passed explicitly.
"""

from typing import Any, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.orm import Session, declarative_base, scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import DatabaseConfig, get_config
from ..exceptions import ErrorCode, ServiceError, ValidationError
from ..utils import get_logger

# Base class for all SQLAlchemy models
Base: Any = declarative_base()


def parse_connection_string(connection_string: str) -> URL:
    """
    Parse a connection string without ever echoing it back.

    Raises:
        ValidationError: If the string is not a database URL
    """
    try:
        return make_url(connection_string)
    except ArgumentError:
        # The string may hold a password, so neither it nor the parser message is kept
        raise ValidationError(
            "Invalid database connection string",
            field="connection_string",
            error_code=ErrorCode.INVALID_FORMAT,
        ) from None


class DatabaseManager:
    """
    Owns the engine and a thread-scoped session factory.
    """

    def __init__(self, config: Optional[DatabaseConfig] = None):
        self.config = config or get_config().database
        self.url = parse_connection_string(self.config.connection_string)
        self.engine = self._create_engine()
        self.session_factory = sessionmaker(bind=self.engine)
        self.scoped_session = scoped_session(self.session_factory)

    @property
    def is_sqlite(self) -> bool:
        return self.url.get_backend_name() == "sqlite"

    def _create_engine(self):
        if self.is_sqlite:
            options: dict = {"connect_args": {"check_same_thread": False}}
            # Sessions are used from worker threads; they must all see one in-memory database
            if self.url.database in (None, "", ":memory:"):
                options["poolclass"] = StaticPool
            return create_engine(self.url, echo=self.config.echo, **options)
        return create_engine(
            self.url,
            echo=self.config.echo,
            pool_size=self.config.pool_size,
            max_overflow=self.config.max_overflow,
            pool_timeout=self.config.pool_timeout,
        )

    def create_tables(self) -> None:
        Base.metadata.create_all(self.engine)

    def get_session(self) -> Session:
        return self.scoped_session()

    def close(self) -> None:
        self.scoped_session.remove()
        self.engine.dispose()

    def __repr__(self) -> str:
        return f"DatabaseManager(url={self.url.render_as_string(hide_password=True)!r})"


def import_all_models():
    """Import all models to ensure they're registered with SQLAlchemy metadata."""
    from sqlalchemy.orm import configure_mappers

    from .db_customer_models import Customer  # noqa
    from .db_server_models import Server  # noqa

    configure_mappers()


# Global database manager instance
_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    """
    Get the global database manager instance.

    Raises:
        ServiceError: If no database manager has been initialized
    """
    if _db_manager is None:
        raise ServiceError(
            "Database manager not initialized. Call initialize_db() first.",
            error_code=ErrorCode.CONFIGURATION_ERROR,
            operation="get_db_manager",
        )
    return _db_manager


def set_db_manager(manager: Optional[DatabaseManager]) -> None:
    """Replace the global database manager, used by tests to inject their own."""
    global _db_manager
    _db_manager = manager


def initialize_db(config: Optional[DatabaseConfig] = None) -> DatabaseManager:
    """
    Initialize the global database manager and create missing tables.

    Args:
        config: Connection settings; the application config is used when omitted
    """
    global _db_manager

    _db_manager = DatabaseManager(config)

    import_all_models()
    get_logger().info(
        "Initializing database tables", extra={"db_backend": _db_manager.url.get_backend_name()}
    )
    _db_manager.create_tables()

    return _db_manager


def close_db() -> None:
    """Close the database connections and dispose of the engine."""
    global _db_manager
    if _db_manager:
        _db_manager.close()
        _db_manager = None
