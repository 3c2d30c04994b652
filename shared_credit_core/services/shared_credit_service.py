"""
Service computing shared-credit slot offers for a tenant.

Reads a snapshot, decrypts it in one pass and hands it to the pure offer
builder. Nothing is written and nothing is cached between calls.
"""

import asyncio
import logging
from datetime import date
from typing import List, NamedTuple, Optional

from sqlalchemy.orm import Session

from ..allocation.allocator import SlotAllocator
from ..allocation.engine import OfferBuilder
from ..allocation.presenter import select_offer
from ..config import get_config
from ..constants import ReadScope, ServiceClass
from ..context.operation_context import operation
from ..context.tenant_context import tenant_context
from ..db.db_customer_models import Customer
from ..exceptions import ErrorCode, ValidationError
from ..repositories.customer_repository import CustomerRepository
from ..repositories.server_repository import ServerRepository
from ..schemas.offer_schema import SharedCreditSelection, SlotOffer
from ..schemas.server_schema import ServerCapacity
from .base_service import SessionManagedService
from .decryption_service import Decryptor, DecryptionPass


class Snapshot(NamedTuple):
    servers: List[ServerCapacity]
    tenant_customers: List[Customer]
    global_customers: List[Customer]


class SharedCreditService(SessionManagedService):
    """Finds existing credentials a new customer can be attached to."""

    def __init__(
        self,
        session: Optional[Session] = None,
        decryptor: Optional[Decryptor] = None,
        offer_builder: Optional[OfferBuilder] = None,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(session=session, logger=logger)
        self.server_repository = ServerRepository(self.session)
        self.customer_repository = CustomerRepository(self.session)
        self.decryptor = decryptor
        self.offer_builder = offer_builder or OfferBuilder(
            SlotAllocator(get_config().allocation.max_shares)
        )

    def _read_snapshot(self, tenant_id: str) -> Snapshot:
        if not tenant_id:
            raise ValidationError(
                "tenant_id is required to compute offers",
                field="tenant_id",
                error_code=ErrorCode.MISSING_REQUIRED,
            )

        # Runs on a worker thread, which does not inherit the caller's tenant context
        with tenant_context(tenant_id):
            servers = [
                ServerCapacity.from_model(server)
                for server in self.server_repository.list_active(tenant_id)
            ]
            tenant_customers = self.customer_repository.list_logins(
                ReadScope.TENANT, tenant_id=tenant_id
            )
            # Usage is capped system-wide, so this read crosses tenants
            global_customers = self.customer_repository.list_logins(ReadScope.GLOBAL)
        return Snapshot(servers, tenant_customers, global_customers)

    async def find_offers_async(
        self,
        tenant_id: str,
        plan_duration_days: Optional[int] = None,
        service_class: Optional[ServiceClass] = None,
        today: Optional[date] = None,
    ) -> List[SlotOffer]:
        """
        Compute slot offers from within a running event loop.

        Database reads run in a worker thread so the loop is never blocked.

        Args:
            tenant_id: Tenant whose servers and customers are offered
            plan_duration_days: Nominal duration of the plan being sold
            service_class: Only keep offers with a free slot of this class
            today: Reference day, defaults to the current date

        Returns:
            Offers sorted by expiration, most urgent first
        """
        try:
            snapshot = await asyncio.to_thread(self._read_snapshot, tenant_id)
            if not snapshot.servers:
                self.logger.info("No active server with capacity", extra={"tenant_id": tenant_id})
                return []

            decryption = DecryptionPass(self.decryptor)
            tenant_records = await decryption.decrypt_all(snapshot.tenant_customers)
            global_records = await decryption.decrypt_all(snapshot.global_customers)
        except Exception as e:
            self._handle_service_exception("find_offers", e, entity_id=tenant_id)

        if decryption.fallback_count:
            self.logger.warning(
                "Some credentials were read as legacy plaintext",
                extra={
                    "tenant_id": tenant_id,
                    "fallback_count": decryption.fallback_count,
                    "records_decrypted": len(decryption),
                },
            )

        offers = self.offer_builder.build_offers(
            snapshot.servers,
            tenant_records,
            global_records,
            plan_duration_days=plan_duration_days,
            service_class=service_class,
            today=today,
        )
        self.logger.info(
            f"Found {len(offers)} shared credit offers",
            extra={"tenant_id": tenant_id, "server_count": len(snapshot.servers)},
        )
        return offers

    @operation()
    def find_offers(
        self,
        tenant_id: str,
        plan_duration_days: Optional[int] = None,
        service_class: Optional[ServiceClass] = None,
        today: Optional[date] = None,
    ) -> List[SlotOffer]:
        """Synchronous wrapper of find_offers_async; must not be called from a running loop."""
        with tenant_context(tenant_id):
            return asyncio.run(
                self.find_offers_async(
                    tenant_id,
                    plan_duration_days=plan_duration_days,
                    service_class=service_class,
                    today=today,
                )
            )

    @operation()
    def select_offer(
        self,
        offer: SlotOffer,
        service_class: ServiceClass,
        today: Optional[date] = None,
    ) -> SharedCreditSelection:
        return select_offer(offer, service_class, today=today)
