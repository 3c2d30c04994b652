"""
Service deleting every customer that shares one credential on a server.
"""

import asyncio
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..constants import ReadScope, RevocationStatus
from ..context.operation_context import operation
from ..context.tenant_context import tenant_context
from ..db.db_customer_models import Customer
from ..exceptions import ErrorCode, ValidationError
from ..repositories.customer_repository import CustomerRepository
from ..schemas.customer_schema import CustomerRecord
from ..schemas.offer_schema import RevocationResult
from .base_service import SessionManagedService
from .decryption_service import Decryptor, DecryptionPass


def matches_credential(record: CustomerRecord, login: str, password: Optional[str]) -> bool:
    """A record matches on login, and on password too when one is given."""
    if record.login != login:
        return False
    return not password or record.password == password


class RevocationService(SessionManagedService):
    """Revokes a shared credential by deleting all of its customers at once."""

    def __init__(
        self,
        session: Optional[Session] = None,
        decryptor: Optional[Decryptor] = None,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(session=session, logger=logger)
        self.customer_repository = CustomerRepository(self.session)
        self.decryptor = decryptor

    def _read_server_customers(self, tenant_id: str, server_id: str) -> List[Customer]:
        # Membership is read fresh on every call, never taken from an earlier offer
        with tenant_context(tenant_id):
            return self.customer_repository.list_customers(
                ReadScope.TENANT, tenant_id=tenant_id, server_id=server_id
            )

    def _delete_members(self, customer_ids: List[str], tenant_id: str) -> int:
        with tenant_context(tenant_id), self.transaction():
            if not customer_ids:
                return 0
            return self.customer_repository.delete_many(customer_ids, tenant_id)

    async def revoke_async(
        self,
        tenant_id: str,
        server_id: str,
        login: str,
        password: Optional[str] = None,
    ) -> RevocationResult:
        """
        Delete every customer on the server using the given credential.

        Database work runs in a worker thread; decryption runs on the loop.

        Args:
            tenant_id: Owning tenant
            server_id: Server the credential belongs to
            login: Decrypted login
            password: Decrypted password; when empty, login alone decides membership

        Returns:
            RevocationResult, NOTHING_TO_DELETE when no row was removed

        Raises:
            ValidationError: If login is empty
            ServiceError: If the delete fails; no row is removed in that case
        """
        if not login:
            raise ValidationError(
                "A login is required to revoke a shared credential",
                field="login",
                error_code=ErrorCode.MISSING_REQUIRED,
                server_id=server_id,
            )

        try:
            customers = await asyncio.to_thread(self._read_server_customers, tenant_id, server_id)
            records = await DecryptionPass(self.decryptor).decrypt_all(customers)
            customer_ids = [
                record.id for record in records if matches_credential(record, login, password)
            ]
            deleted_count = await asyncio.to_thread(self._delete_members, customer_ids, tenant_id)
        except Exception as e:
            self.rollback()
            self._handle_service_exception("revoke", e, entity_id=server_id)

        if deleted_count == 0:
            self.logger.info(
                "Nothing to delete for credential",
                extra={"server_id": server_id, "resolved_count": len(customer_ids)},
            )
            return RevocationResult(
                status=RevocationStatus.NOTHING_TO_DELETE, deleted_count=0, customer_ids=[]
            )

        self.logger.info(
            f"Revoked credential for {deleted_count} customers",
            extra={"server_id": server_id, "deleted_count": deleted_count},
        )
        return RevocationResult(
            status=RevocationStatus.DELETED,
            deleted_count=deleted_count,
            customer_ids=customer_ids,
        )

    @operation(redact=("login", "password"))
    def revoke(
        self,
        tenant_id: str,
        server_id: str,
        login: str,
        password: Optional[str] = None,
    ) -> RevocationResult:
        """Synchronous wrapper of revoke_async; must not be called from a running loop."""
        with tenant_context(tenant_id):
            return asyncio.run(self.revoke_async(tenant_id, server_id, login, password))
