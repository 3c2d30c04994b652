"""
Billing-cycle classification of day counts.
"""

from datetime import date, datetime
from typing import Optional, Union

from ..constants import DurationBounds, DurationCategory


def _as_date(value: Union[date, datetime]) -> date:
    # datetime is a date subclass; drop the time of day
    if isinstance(value, datetime):
        return value.date()
    return value


def days_until(
    expiration: Union[date, datetime], today: Optional[Union[date, datetime]] = None
) -> int:
    """Calendar days from today to expiration, ignoring time of day."""
    start = _as_date(today) if today is not None else date.today()
    return (_as_date(expiration) - start).days


def classify_duration(days: int) -> Optional[DurationCategory]:
    """
    Bucket a day count into a duration category.

    Returns:
        The category, or None for negative counts and counts above one year
    """
    if days < 0:
        return None
    if days <= DurationBounds.MONTHLY:
        return DurationCategory.MONTHLY
    if days <= DurationBounds.QUARTERLY:
        return DurationCategory.QUARTERLY
    if days <= DurationBounds.SEMIANNUAL:
        return DurationCategory.SEMIANNUAL
    if days <= DurationBounds.ANNUAL:
        return DurationCategory.ANNUAL
    return None


def durations_match(plan_days: int, remaining_days: Optional[int]) -> bool:
    """True when a plan and a credential fall into the same category."""
    if remaining_days is None:
        return False
    plan_category = classify_duration(plan_days)
    return plan_category is not None and plan_category == classify_duration(remaining_days)
