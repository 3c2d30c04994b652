"""
Base service implementation with common functionality for all services.

Each service owns its database session unless one is injected, in which
case the caller controls commit and rollback.
"""

import logging
from contextlib import contextmanager
from typing import NoReturn, Optional

from sqlalchemy.orm import Session

from ..db.db_config import get_db_manager
from ..exceptions import BaseError, ErrorCode, RepositoryError, ServiceError
from ..utils.logger import get_logger


class SessionManagedService:
    """
    Service that owns and manages its own database session.
    """

    def __init__(
        self,
        session: Optional[Session] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize service with its own session.

        Args:
            session: Optional existing session (for testing or coordination)
            logger: Optional logger instance
        """
        if session is not None:
            self.session = session
            self._owns_session = False
        else:
            self.session = self._create_session()
            self._owns_session = True

        self.logger = logger or get_logger()

    def _create_session(self) -> Session:
        """Create a new database session from the initialized database manager."""
        return get_db_manager().get_session()

    def _handle_service_exception(
        self, operation: str, exception: Exception, entity_id: Optional[str] = None  # noqa
    ) -> NoReturn:
        """
        Log and wrap an exception raised inside a service operation.

        Args:
            operation: Operation being performed
            exception: Exception that occurred
            entity_id: Optional ID of the entity involved

        Raises:
            ServiceError: Wrapping anything that is not already one of our errors
        """
        if isinstance(exception, BaseError) and not isinstance(exception, RepositoryError):
            raise exception

        error_msg = f"Error in {operation}: {str(exception)}"
        self.logger.error(
            error_msg,
            extra={
                "operation": operation,
                "entity_id": entity_id,
                "error_type": type(exception).__name__,
                "error_details": str(exception),
            },
        )
        raise ServiceError(
            error_msg,
            error_code=(
                exception.error_code
                if isinstance(exception, RepositoryError)
                else ErrorCode.INTERNAL_ERROR
            ),
            operation=operation,
            entity_id=entity_id,
            cause=exception,
        )

    @contextmanager
    def transaction(self):
        """
        Context manager for transactional operations.

        Usage:
            with service.transaction():
                service.delete_something()
                # Auto-commits on success, rollback on exception
        """
        try:
            yield self.session
            if self._owns_session:
                self.session.commit()
        except Exception:
            if self._owns_session:
                self.session.rollback()
            raise

    def commit(self):
        """Manually commit the current transaction."""
        if self._owns_session:
            self.session.commit()

    def rollback(self):
        """Manually rollback the current transaction."""
        if self._owns_session:
            self.session.rollback()

    def close(self):
        """Close the session if we own it."""
        if self._owns_session and self.session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.rollback()
        else:
            self.commit()
        self.close()
