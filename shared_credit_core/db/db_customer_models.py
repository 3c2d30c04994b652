"""
Customer model.

Login and password hold ciphertext, or plaintext for legacy rows.
"""

from sqlalchemy import Boolean, Column, Date, ForeignKey, Index, String, Text

from .db_base import TimestampMixin, UUIDMixin
from .db_config import Base


class Customer(Base, UUIDMixin, TimestampMixin):
    """An end customer attached to one server."""

    __tablename__ = "customer"

    tenant_id = Column(String(100), nullable=False, index=True)
    server_id = Column(String(36), ForeignKey("server.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(200), nullable=False)
    service_class = Column(String(20), nullable=False)

    login = Column(Text, nullable=True)
    password = Column(Text, nullable=True)

    expiration_date = Column(Date, nullable=False)
    is_archived = Column(Boolean, nullable=False, default=False)

    __table_args__ = (Index("ix_customer_server", "tenant_id", "server_id"),)
