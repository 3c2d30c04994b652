"""Slot allocation and pro-rata pricing engine."""

from .allocator import SlotAllocator, count_used_slots, scale_to_remaining
from .duration import classify_duration, days_until, durations_match
from .engine import OfferBuilder
from .grouping import CredentialKey, credential_key, group_by_credential, group_by_server
from .presenter import filter_by_service_class, select_offer, sort_offers, visible_members
from .pricing import calculate_pro_rata, days_in_month
from .usage import GlobalUsageIndex, count_global_usage

__all__ = [
    "CredentialKey",
    "GlobalUsageIndex",
    "OfferBuilder",
    "SlotAllocator",
    "calculate_pro_rata",
    "classify_duration",
    "count_global_usage",
    "count_used_slots",
    "credential_key",
    "days_in_month",
    "days_until",
    "durations_match",
    "filter_by_service_class",
    "group_by_credential",
    "group_by_server",
    "scale_to_remaining",
    "select_offer",
    "sort_offers",
    "visible_members",
]
