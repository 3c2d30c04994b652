"""
Pydantic schemas emitted by the allocation engine.

All values are raw: days as integers, prices as Decimal, categories as enum
tags. Formatting and rounding belong to the presentation layer.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..constants import DurationCategory, RevocationStatus, ServiceClass


class SlotAvailability(BaseModel):
    """Free slots per service class under one credential."""

    primary: int = Field(default=0, ge=0)
    secondary: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)

    def get(self, service_class: ServiceClass) -> int:
        if service_class == ServiceClass.PRIMARY:
            return self.primary
        return self.secondary

    @property
    def total(self) -> int:
        return self.primary + self.secondary

    @property
    def is_empty(self) -> bool:
        return self.total == 0


class ProRataQuote(BaseModel):
    """Partial-month charge for attaching mid-cycle."""

    price: Decimal
    remaining_days: int
    total_days: int

    model_config = ConfigDict(frozen=True)


class SlotOffer(BaseModel):
    """A credential that a new customer can be attached to."""

    server_id: str
    server_name: str
    login: str
    password: Optional[str] = None
    login_ciphertext: Optional[str] = Field(default=None, repr=False)
    password_ciphertext: Optional[str] = Field(default=None, repr=False)

    available: SlotAvailability
    member_names: List[str] = Field(default_factory=list)
    expiration_date: Optional[date] = None
    remaining_days: Optional[int] = None
    duration_category: Optional[DurationCategory] = None

    monthly_price: Decimal = Field(default=Decimal("0"))
    pro_rata: Optional[ProRataQuote] = None

    model_config = ConfigDict(frozen=True)


class SharedCreditSelection(BaseModel):
    """An offer the user picked, bound to one service class."""

    server_id: str
    server_name: str
    service_class: ServiceClass
    pro_rata_price: Decimal
    full_price: Decimal
    remaining_days: int
    existing_members: List[str] = Field(default_factory=list)

    login: str
    password: Optional[str] = None
    login_ciphertext: Optional[str] = Field(default=None, repr=False)
    password_ciphertext: Optional[str] = Field(default=None, repr=False)

    model_config = ConfigDict(frozen=True)


class RevocationResult(BaseModel):
    """Outcome of deleting every customer sharing a credential."""

    status: RevocationStatus
    deleted_count: int = Field(default=0, ge=0)
    customer_ids: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def nothing_to_delete(self) -> bool:
        return self.status == RevocationStatus.NOTHING_TO_DELETE
