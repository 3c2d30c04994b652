"""
Pro-rata pricing for attaching a customer mid-month.
"""

import calendar
from datetime import date
from decimal import Decimal
from typing import Optional, Union

from ..schemas.offer_schema import ProRataQuote


def days_in_month(day: date) -> int:
    return calendar.monthrange(day.year, day.month)[1]


def calculate_pro_rata(
    monthly_price: Union[Decimal, int, float, str, None], today: Optional[date] = None
) -> ProRataQuote:
    """
    Price the rest of the current calendar month, today included.

    The denominator is the length of the current month, so a day in February
    costs more than a day in a 31-day month. No rounding is applied.

    Args:
        monthly_price: Full monthly price, None is priced as zero
        today: Reference day, defaults to the current date

    Returns:
        Quote with price, remaining days and month length
    """
    today = today or date.today()
    total_days = days_in_month(today)
    remaining_days = total_days - today.day + 1

    price = Decimal(str(monthly_price)) if monthly_price is not None else Decimal("0")
    # Multiply before dividing so a full month returns exactly the monthly price
    prorated = price * remaining_days / total_days

    return ProRataQuote(price=prorated, remaining_days=remaining_days, total_days=total_days)
