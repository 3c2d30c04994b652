"""
Offer computation over a decrypted snapshot.

Pure and synchronous: no I/O, no suspension points. Callers re-run it on
every input change; nothing it produces is cached.
"""

from datetime import date
from typing import Iterable, List, Optional

from ..constants import ServiceClass
from ..schemas.customer_schema import CustomerRecord
from ..schemas.offer_schema import SlotOffer
from ..schemas.server_schema import ServerCapacity
from ..utils.logger import get_logger
from .allocator import SlotAllocator
from .duration import classify_duration, days_until, durations_match
from .grouping import CredentialKey, group_by_server
from .presenter import filter_by_service_class, sort_offers
from .pricing import calculate_pro_rata
from .usage import GlobalUsageIndex


class OfferBuilder:
    """Turns servers and customer records into ranked slot offers."""

    def __init__(self, allocator: Optional[SlotAllocator] = None):
        self.allocator = allocator or SlotAllocator()
        self.logger = get_logger()

    def build_offers(
        self,
        servers: Iterable[ServerCapacity],
        tenant_records: Iterable[CustomerRecord],
        global_records: Iterable[CustomerRecord],
        plan_duration_days: Optional[int] = None,
        service_class: Optional[ServiceClass] = None,
        today: Optional[date] = None,
    ) -> List[SlotOffer]:
        """
        Compute every offer a new customer could be attached to.

        Args:
            servers: Active servers of the tenant
            tenant_records: Decrypted customer records of the tenant
            global_records: Decrypted customer records of every tenant
            plan_duration_days: Nominal duration of the plan being sold
            service_class: Restrict to offers with a slot of this class
            today: Reference day, defaults to the current date

        Returns:
            Offers sorted by expiration, most urgent first
        """
        today = today or date.today()
        groups_by_server = group_by_server(tenant_records)
        usage_index = GlobalUsageIndex(global_records)

        offers: List[SlotOffer] = []
        for server in servers:
            if not server.has_capacity:
                self.logger.debug(
                    "Server skipped: no capacity configured", extra={"server_id": server.id}
                )
                continue

            quote = calculate_pro_rata(server.monthly_price, today)
            for key, members in groups_by_server.get(server.id, {}).items():
                available = self.allocator.allocate(members, server, usage_index.usage(key.login))
                if available is None:
                    continue

                offer = self._make_offer(server, key, members, available, quote, today)
                if offer.remaining_days is not None and offer.duration_category is None:
                    self.logger.debug(
                        "Group skipped: expired or beyond the longest plan",
                        extra={"server_id": server.id, "remaining_days": offer.remaining_days},
                    )
                    continue
                if plan_duration_days is not None and not durations_match(
                    plan_duration_days, offer.remaining_days
                ):
                    continue
                offers.append(offer)

        offers = filter_by_service_class(offers, service_class)
        self.logger.debug(
            "Built slot offers",
            extra={"offer_count": len(offers), "logins_indexed": len(usage_index)},
        )
        return sort_offers(offers)

    def _make_offer(self, server, key: CredentialKey, members, available, quote, today) -> SlotOffer:
        # Members of one group are assumed to share one expiration; the first one represents it
        representative = members[0]
        expiration = representative.expiration_date
        remaining_days = days_until(expiration, today) if expiration is not None else None

        return SlotOffer(
            server_id=server.id,
            server_name=server.name,
            login=key.login,
            password=key.password or None,
            login_ciphertext=representative.login_ciphertext,
            password_ciphertext=representative.password_ciphertext,
            available=available,
            member_names=[member.name for member in members],
            expiration_date=expiration,
            remaining_days=remaining_days,
            duration_category=(
                classify_duration(remaining_days) if remaining_days is not None else None
            ),
            monthly_price=server.monthly_price,
            pro_rata=quote,
        )
