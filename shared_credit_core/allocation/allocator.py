"""
Slot allocation for one credential group.

Three constraints are applied in order:
1. the global share cap on the login (checked first, a credential can be
   locally free yet globally saturated),
2. the server-local capacity the credential grants,
3. a proportional reduction so the per-class numbers never let more new
   customers attach than the global cap still permits.
"""

from typing import Dict, Iterable, Optional, Tuple

from ..config import get_config
from ..constants import ServiceClass
from ..schemas.customer_schema import CustomerRecord
from ..schemas.offer_schema import SlotAvailability
from ..schemas.server_schema import ServerCapacity
from ..utils.logger import get_logger


def count_used_slots(members: Iterable[CustomerRecord]) -> Dict[ServiceClass, int]:
    """Count group members per service class."""
    used = {service_class: 0 for service_class in ServiceClass}
    for member in members:
        used[member.service_class] += 1
    return used


def scale_to_remaining(primary: int, secondary: int, remaining: int) -> Tuple[int, int]:
    """
    Scale per-class availability down so the two sum to exactly remaining.

    Primary is floored first and secondary takes the remainder. The floor is
    computed on integers so the result never depends on float rounding.

    Args:
        primary: Naive primary availability
        secondary: Naive secondary availability
        remaining: Shares still allowed by the global cap, below primary + secondary

    Returns:
        (primary, secondary) summing to remaining
    """
    total = primary + secondary
    if total == 0:
        return 0, 0
    scaled_primary = (primary * remaining) // total
    return scaled_primary, remaining - scaled_primary


class SlotAllocator:
    """Computes free slots per service class for credential groups."""

    def __init__(self, max_shares: Optional[int] = None):
        self.max_shares = max_shares if max_shares is not None else get_config().allocation.max_shares
        self.logger = get_logger()

    def allocate(
        self,
        members: Iterable[CustomerRecord],
        capacity: ServerCapacity,
        global_usage: int,
    ) -> Optional[SlotAvailability]:
        """
        Compute availability for one credential group.

        Args:
            members: Records sharing the credential on this server
            capacity: Capacity configuration of the owning server
            global_usage: System-wide count of records using the login

        Returns:
            Per-class availability, or None when the group must not be offered
        """
        if global_usage >= self.max_shares:
            self.logger.debug(
                "Credential excluded: global share cap reached",
                extra={"server_id": capacity.id, "global_usage": global_usage},
            )
            return None

        used = count_used_slots(members)
        if sum(used.values()) >= capacity.total_capacity:
            self.logger.debug(
                "Credential excluded: server capacity reached",
                extra={"server_id": capacity.id, "used": sum(used.values())},
            )
            return None

        primary = max(0, capacity.capacity_for(ServiceClass.PRIMARY) - used[ServiceClass.PRIMARY])
        secondary = max(
            0, capacity.capacity_for(ServiceClass.SECONDARY) - used[ServiceClass.SECONDARY]
        )
        if primary + secondary == 0:
            return None

        global_remaining = self.max_shares - global_usage
        if primary + secondary > global_remaining:
            primary, secondary = scale_to_remaining(primary, secondary, global_remaining)

        if primary == 0 and secondary == 0:
            return None

        return SlotAvailability(primary=primary, secondary=secondary)
