"""
Base repository implementation with common functionality for all repositories.

Repositories receive a session and never commit or roll back; transaction
boundaries belong to the service layer.
"""

import logging
from contextlib import contextmanager
from typing import Any, Generic, List, NoReturn, Optional, Type, TypeVar

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import ErrorCode, RepositoryError
from ..utils.logger import get_logger

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """Base repository with common functionality for all repositories."""

    def __init__(
        self,
        session: Session,
        entity_class: Type[T],
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the base repository.

        Args:
            session: SQLAlchemy session for database operations
            entity_class: SQLAlchemy model class this repository handles
            logger: Optional logger instance
        """
        self.session = session
        self.entity_class = entity_class
        self.logger = logger or get_logger()
        self.entity_name = entity_class.__name__

    def _handle_db_error(
        self,
        e: Exception,
        operation_name: str,
        entity_id: Optional[str] = None,
        **context: Any,
    ) -> NoReturn:
        """
        Map database errors to RepositoryError.

        Args:
            e: The original exception
            operation_name: Name of the operation that failed
            entity_id: Optional entity ID involved in the operation
            **context: Additional context for the error

        Raises:
            RepositoryError: With appropriate error code and context
        """
        if isinstance(e, RepositoryError):
            raise e

        error_context = {
            "operation_name": operation_name,
            "entity_type": self.entity_name,
            **context,
        }
        if entity_id:
            error_context["entity_id"] = entity_id

        if isinstance(e, IntegrityError):
            raise RepositoryError(
                f"Database constraint violation for {self.entity_name}: {str(e)}",
                error_code=ErrorCode.CONSTRAINT_VIOLATION,
                cause=e,
                **error_context,
            )

        elif isinstance(e, SQLAlchemyError):
            raise RepositoryError(
                f"Database error for {self.entity_name}: {str(e)}",
                error_code=ErrorCode.DATABASE_ERROR,
                cause=e,
                **error_context,
            )

        raise RepositoryError(
            f"Unexpected error for {self.entity_name}: {str(e)}",
            error_code=ErrorCode.INTERNAL_ERROR,
            cause=e,
            **error_context,
        )

    @contextmanager
    def _session_operation(
        self, operation_name: str, entity_id: Optional[str] = None, is_read_only: bool = False
    ):
        """
        Context manager for operations on the existing session with error handling.

        Args:
            operation_name: Name of the operation for error reporting
            entity_id: Optional ID of the entity being operated on
            is_read_only: If True, skip flush

        Yields:
            The existing session

        Raises:
            RepositoryError: If there's a database error
        """
        try:
            yield self.session
            # Flush writes to surface constraint violations early; commit is the service's job
            if not is_read_only:
                self.session.flush()
        except Exception as e:
            self._handle_db_error(e, operation_name, entity_id)

    # ==================== BASE CRUD METHODS ====================

    def _delete_batch(self, entity_ids: List[str], tenant_id: Optional[str] = None) -> int:
        """
        Hard delete multiple entities with a single statement.

        Args:
            entity_ids: IDs to delete
            tenant_id: When given, rows of other tenants are left untouched

        Returns:
            Number of rows actually deleted
        """
        if not entity_ids:
            return 0

        statement = delete(self.entity_class).where(self.entity_class.id.in_(entity_ids))
        if tenant_id is not None:
            statement = self._apply_tenant_filter(statement, tenant_id)

        result = self.session.execute(statement.execution_options(synchronize_session=False))
        deleted_count = result.rowcount or 0

        self.logger.info(
            f"Deleted {deleted_count} {self.entity_name} rows in batch",
            extra={
                "entity_type": self.entity_name,
                "requested_count": len(entity_ids),
                "deleted_count": deleted_count,
            },
        )
        return deleted_count

    # ==================== UTILITY METHODS ====================

    def _apply_tenant_filter(self, query, tenant_id: str):
        """Restrict a select or delete statement to one tenant."""
        return query.where(self.entity_class.tenant_id == tenant_id)  # type: ignore[attr-defined]
