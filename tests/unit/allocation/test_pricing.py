"""
Tests for pro-rata pricing.
"""

from datetime import date
from decimal import Decimal

import pytest

from shared_credit_core.allocation.pricing import calculate_pro_rata, days_in_month


class TestDaysInMonth:
    @pytest.mark.parametrize(
        "day,expected",
        [
            (date(2024, 2, 10), 29),
            (date(2023, 2, 10), 28),
            (date(2024, 6, 1), 30),
            (date(2024, 12, 31), 31),
        ],
    )
    def test_month_lengths(self, day, expected):
        assert days_in_month(day) == expected


class TestCalculateProRata:
    def test_day_twenty_of_thirty_day_month(self):
        quote = calculate_pro_rata(Decimal("90.00"), today=date(2024, 6, 20))

        assert quote.remaining_days == 11
        assert quote.total_days == 30
        assert quote.price == Decimal("33")

    def test_first_day_charges_full_month(self):
        for month in range(1, 13):
            quote = calculate_pro_rata(Decimal("49.90"), today=date(2024, month, 1))
            assert quote.price == Decimal("49.90")

    def test_last_day_charges_one_day(self):
        quote = calculate_pro_rata(Decimal("31"), today=date(2024, 1, 31))
        assert quote.remaining_days == 1
        assert quote.price == Decimal("1")

    def test_price_non_decreasing_with_remaining_days(self):
        prices = [
            calculate_pro_rata(Decimal("90"), today=date(2024, 3, day)) for day in range(31, 0, -1)
        ]
        remaining = [quote.remaining_days for quote in prices]
        assert remaining == sorted(remaining)
        assert all(a.price <= b.price for a, b in zip(prices, prices[1:]))

    def test_february_day_costs_more(self):
        february = calculate_pro_rata(Decimal("90"), today=date(2023, 2, 28))
        march = calculate_pro_rata(Decimal("90"), today=date(2023, 3, 31))
        assert february.price > march.price

    @pytest.mark.parametrize("price", [None, 0, "0"])
    def test_unset_price_is_zero(self, price):
        assert calculate_pro_rata(price, today=date(2024, 6, 20)).price == Decimal("0")

    def test_no_rounding_applied(self):
        quote = calculate_pro_rata(Decimal("10"), today=date(2024, 6, 20))
        assert quote.price == Decimal("10") * 11 / 30
