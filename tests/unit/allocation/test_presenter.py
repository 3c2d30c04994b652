"""
Tests for offer ordering, filtering and selection.
"""

from datetime import date
from decimal import Decimal

import pytest

from shared_credit_core.allocation.presenter import (
    filter_by_service_class,
    select_offer,
    sort_offers,
    visible_members,
)
from shared_credit_core.constants import ServiceClass
from shared_credit_core.exceptions import ErrorCode, ValidationError
from shared_credit_core.schemas.offer_schema import ProRataQuote, SlotAvailability, SlotOffer


def _offer(label, expiration=None, primary=1, secondary=1, members=None, **overrides):
    values = {
        "server_id": "srv-1",
        "server_name": label,
        "login": f"login-{label}",
        "password": "pw",
        "login_ciphertext": f"cipher-{label}",
        "available": SlotAvailability(primary=primary, secondary=secondary),
        "member_names": members or [],
        "expiration_date": expiration,
        "monthly_price": Decimal("90"),
    }
    values.update(overrides)
    return SlotOffer(**values)


class TestSortOffers:
    def test_most_urgent_first(self):
        offers = [_offer("late", date(2024, 9, 1)), _offer("soon", date(2024, 7, 1))]
        assert [o.server_name for o in sort_offers(offers)] == ["soon", "late"]

    @pytest.mark.parametrize(
        "labels",
        [
            ["n1", "a", "n2", "b"],
            ["n1", "n2", "a", "b"],
            ["a", "b", "n1", "n2"],
        ],
    )
    def test_missing_expiration_last_and_stable(self, labels):
        expirations = {"a": date(2024, 7, 1), "b": date(2024, 8, 1)}
        offers = [_offer(label, expirations.get(label)) for label in labels]

        ordered = [o.server_name for o in sort_offers(offers)]

        assert ordered[:2] == ["a", "b"]
        assert ordered[2:] == ["n1", "n2"]

    def test_ties_keep_input_order(self):
        same_day = date(2024, 7, 1)
        offers = [_offer(label, same_day) for label in ("x", "y", "z")]
        assert [o.server_name for o in sort_offers(offers)] == ["x", "y", "z"]


class TestFilterByServiceClass:
    def setup_method(self):
        self.offers = [
            _offer("primary-only", primary=1, secondary=0),
            _offer("secondary-only", primary=0, secondary=1),
            _offer("empty", primary=0, secondary=0),
        ]

    def test_no_class_keeps_any_availability(self):
        kept = filter_by_service_class(self.offers)
        assert [o.server_name for o in kept] == ["primary-only", "secondary-only"]

    @pytest.mark.parametrize(
        "service_class,expected",
        [(ServiceClass.PRIMARY, "primary-only"), (ServiceClass.SECONDARY, "secondary-only")],
    )
    def test_class_filter(self, service_class, expected):
        kept = filter_by_service_class(self.offers, service_class)
        assert [o.server_name for o in kept] == [expected]


class TestVisibleMembers:
    def test_truncates_after_limit(self):
        offer = _offer("srv", members=[f"m{i}" for i in range(7)])
        shown, hidden = visible_members(offer)
        assert shown == ["m0", "m1", "m2", "m3", "m4"]
        assert hidden == 2

    def test_short_list(self):
        shown, hidden = visible_members(_offer("srv", members=["only"]))
        assert (shown, hidden) == (["only"], 0)


class TestSelectOffer:
    def test_selection_carries_credential_and_price(self):
        offer = _offer("srv", members=["Ann", "Bo"])

        selection = select_offer(offer, ServiceClass.SECONDARY, today=date(2024, 6, 20))

        assert selection.service_class == ServiceClass.SECONDARY
        assert selection.pro_rata_price == Decimal("33")
        assert selection.full_price == Decimal("90")
        assert selection.remaining_days == 11
        assert selection.existing_members == ["Ann", "Bo"]
        assert selection.login == "login-srv"
        assert selection.login_ciphertext == "cipher-srv"

    def test_existing_quote_reused_without_reference_day(self):
        quote = ProRataQuote(price=Decimal("33"), remaining_days=11, total_days=30)
        offer = _offer("srv", pro_rata=quote)

        selection = select_offer(offer, ServiceClass.PRIMARY)

        assert selection.pro_rata_price == Decimal("33")
        assert selection.remaining_days == 11

    def test_reference_day_overrides_existing_quote(self):
        quote = ProRataQuote(price=Decimal("33"), remaining_days=11, total_days=30)
        offer = _offer("srv", pro_rata=quote)

        selection = select_offer(offer, ServiceClass.PRIMARY, today=date(2024, 6, 1))

        assert selection.pro_rata_price == Decimal("90")
        assert selection.remaining_days == 30

    def test_unavailable_class_rejected(self):
        offer = _offer("srv", primary=0, secondary=1)

        with pytest.raises(ValidationError) as exc_info:
            select_offer(offer, ServiceClass.PRIMARY)

        assert exc_info.value.error_code == ErrorCode.LIMIT_EXCEEDED
        assert exc_info.value.context["field"] == "service_class"
