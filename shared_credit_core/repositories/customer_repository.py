"""
Repository for customer snapshot reads and batch deletes.

Every read takes an explicit ReadScope so that the one query crossing tenant
boundaries, the global usage count, is visible at its call site.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..constants import ReadScope
from ..db.db_customer_models import Customer
from ..exceptions import ErrorCode, ValidationError
from .base_repository import BaseRepository


class CustomerRepository(BaseRepository[Customer]):
    """Snapshot reads and batch deletes of customers."""

    def __init__(self, session: Session):
        super().__init__(session, Customer)

    def list_customers(
        self,
        scope: ReadScope,
        tenant_id: Optional[str] = None,
        server_id: Optional[str] = None,
    ) -> List[Customer]:
        """
        Read non-archived customers.

        Args:
            scope: TENANT restricts to tenant_id, GLOBAL reads every tenant
            tenant_id: Required for TENANT scope, ignored for GLOBAL
            server_id: Optional restriction to one server

        Returns:
            Customers in creation order

        Raises:
            ValidationError: If a tenant-scoped read has no tenant_id
        """
        if scope == ReadScope.TENANT and not tenant_id:
            raise ValidationError(
                "Tenant-scoped customer read requires tenant_id",
                field="tenant_id",
                error_code=ErrorCode.MISSING_REQUIRED,
            )

        with self._session_operation("list_customers", is_read_only=True):
            query = select(Customer).where(Customer.is_archived.is_(False))
            if scope == ReadScope.TENANT:
                query = self._apply_tenant_filter(query, tenant_id)
            else:
                self.logger.debug(
                    "Reading customers across all tenants", extra={"scope": scope.value}
                )
            if server_id is not None:
                query = query.where(Customer.server_id == server_id)
            query = query.order_by(Customer.created_at, Customer.id)
            return list(self.session.execute(query).scalars())

    def list_logins(self, scope: ReadScope, tenant_id: Optional[str] = None) -> List[Customer]:
        """Customers with a stored login, the only rows that can count toward usage."""
        return [c for c in self.list_customers(scope, tenant_id=tenant_id) if c.login]

    def delete_many(self, customer_ids: List[str], tenant_id: str) -> int:
        """
        Delete customers of one tenant in a single statement.

        Returns:
            Number of rows actually removed
        """
        with self._session_operation("delete_customers"):
            return self._delete_batch(customer_ids, tenant_id=tenant_id)
