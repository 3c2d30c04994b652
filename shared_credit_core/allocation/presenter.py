"""
Ordering, filtering and selection of slot offers for presentation.
"""

from datetime import date
from typing import Iterable, List, Optional, Tuple

from ..constants import Limits, ServiceClass
from ..exceptions import ErrorCode, ValidationError
from ..schemas.offer_schema import SharedCreditSelection, SlotOffer
from .pricing import calculate_pro_rata


def _expiration_sort_key(offer: SlotOffer):
    # Offers without an expiration go last; ties keep input order
    return (offer.expiration_date is None, offer.expiration_date or date.min)


def sort_offers(offers: Iterable[SlotOffer]) -> List[SlotOffer]:
    """Most urgent expiration first."""
    return sorted(offers, key=_expiration_sort_key)


def filter_by_service_class(
    offers: Iterable[SlotOffer], service_class: Optional[ServiceClass] = None
) -> List[SlotOffer]:
    """
    Keep offers with a free slot in the requested class.

    With no class requested, an offer passes if either class has a slot.
    """
    if service_class is None:
        return [offer for offer in offers if not offer.available.is_empty]
    return [offer for offer in offers if offer.available.get(service_class) > 0]


def visible_members(
    offer: SlotOffer, limit: int = Limits.MAX_MEMBER_NAMES_SHOWN
) -> Tuple[List[str], int]:
    """Split member names into the ones to show and the count left out."""
    shown = offer.member_names[:limit]
    return shown, len(offer.member_names) - len(shown)


def select_offer(
    offer: SlotOffer, service_class: ServiceClass, today: Optional[date] = None
) -> SharedCreditSelection:
    """
    Bind an offer to the service class the user picked.

    The offer's own quote is reused unless a reference day is given, in
    which case the price is recomputed for that day.

    Raises:
        ValidationError: If the offer has no free slot of that class
    """
    if offer.available.get(service_class) <= 0:
        raise ValidationError(
            f"No {service_class.value} slot available on server {offer.server_name}",
            field="service_class",
            error_code=ErrorCode.LIMIT_EXCEEDED,
            server_id=offer.server_id,
            service_class=service_class.value,
        )

    if today is not None or offer.pro_rata is None:
        quote = calculate_pro_rata(offer.monthly_price, today)
    else:
        quote = offer.pro_rata

    return SharedCreditSelection(
        server_id=offer.server_id,
        server_name=offer.server_name,
        service_class=service_class,
        pro_rata_price=quote.price,
        full_price=offer.monthly_price,
        remaining_days=quote.remaining_days,
        existing_members=list(offer.member_names),
        login=offer.login,
        password=offer.password,
        login_ciphertext=offer.login_ciphertext,
        password_ciphertext=offer.password_ciphertext,
    )
