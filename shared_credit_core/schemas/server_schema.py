"""
Pydantic schemas for servers and their slot capacity.
"""

from decimal import Decimal
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import ServiceClass


class ServerCapacity(BaseModel):
    """
    Capacity configuration of one server.

    slots_by_class is the total number of slots a single credential grants on
    this server, per service class.
    """

    id: str
    tenant_id: str
    name: str
    slots_by_class: Dict[ServiceClass, int] = Field(default_factory=dict)
    monthly_price: Decimal = Field(default=Decimal("0"))

    model_config = ConfigDict(frozen=True)

    @field_validator("slots_by_class")
    @classmethod
    def validate_slots(cls, v: Dict[ServiceClass, int]) -> Dict[ServiceClass, int]:
        """Fill missing classes with zero and reject negative counts."""
        slots = {service_class: 0 for service_class in ServiceClass}
        for service_class, count in v.items():
            if count < 0:
                raise ValueError(f"Slot count for {service_class.value} cannot be negative")
            slots[service_class] = count
        return slots

    @field_validator("monthly_price", mode="before")
    @classmethod
    def default_price(cls, v):
        """An unset price is priced as zero."""
        return Decimal("0") if v is None else v

    @property
    def total_capacity(self) -> int:
        return sum(self.slots_by_class.values())

    @property
    def has_capacity(self) -> bool:
        """False for servers with nothing configured for either class."""
        return self.total_capacity > 0

    def capacity_for(self, service_class: ServiceClass) -> int:
        return self.slots_by_class.get(service_class, 0)

    @classmethod
    def from_model(cls, server) -> "ServerCapacity":
        """Build from a Server ORM row."""
        return cls(
            id=server.id,
            tenant_id=server.tenant_id,
            name=server.name,
            slots_by_class={
                ServiceClass.PRIMARY: server.primary_slots or 0,
                ServiceClass.SECONDARY: server.secondary_slots or 0,
            },
            monthly_price=server.monthly_price,
        )
