"""Pydantic schemas exchanged between the engine, services and callers."""

from .customer_schema import CustomerRecord
from .offer_schema import (
    ProRataQuote,
    RevocationResult,
    SharedCreditSelection,
    SlotAvailability,
    SlotOffer,
)
from .server_schema import ServerCapacity

__all__ = [
    "CustomerRecord",
    "ProRataQuote",
    "RevocationResult",
    "ServerCapacity",
    "SharedCreditSelection",
    "SlotAvailability",
    "SlotOffer",
]
