"""
Server model with its per-credential slot capacity.

Just the data structure - no business logic or class methods.
"""

from sqlalchemy import Boolean, Column, Index, Integer, Numeric, String

from .db_base import TimestampMixin, UUIDMixin
from .db_config import Base


class Server(Base, UUIDMixin, TimestampMixin):
    """A server on which credentials grant a fixed number of slots."""

    __tablename__ = "server"

    tenant_id = Column(String(100), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    # Slots one credential grants, per service class
    primary_slots = Column(Integer, nullable=False, default=0)
    secondary_slots = Column(Integer, nullable=False, default=0)

    monthly_price = Column(Numeric(12, 2), nullable=True)

    __table_args__ = (Index("ix_server_tenant_active", "tenant_id", "is_active"),)
