"""
Repository for server capacity reads.
"""

from typing import List

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from ..db.db_server_models import Server
from .base_repository import BaseRepository


class ServerRepository(BaseRepository[Server]):
    """Tenant-scoped reads of servers."""

    def __init__(self, session: Session):
        super().__init__(session, Server)

    def list_active(self, tenant_id: str, with_capacity_only: bool = True) -> List[Server]:
        """
        List active servers of a tenant.

        Args:
            tenant_id: Owning tenant
            with_capacity_only: Skip servers with no slots configured for either class

        Returns:
            Servers ordered by name
        """
        with self._session_operation("list_active_servers", is_read_only=True):
            query = select(Server).where(Server.is_active.is_(True))
            query = self._apply_tenant_filter(query, tenant_id)
            if with_capacity_only:
                query = query.where(or_(Server.primary_slots > 0, Server.secondary_slots > 0))
            return list(self.session.execute(query.order_by(Server.name, Server.id)).scalars())
