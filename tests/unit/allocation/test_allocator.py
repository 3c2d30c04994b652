"""
Tests for per-credential slot allocation.
"""

import pytest

from shared_credit_core.allocation.allocator import (
    SlotAllocator,
    count_used_slots,
    scale_to_remaining,
)
from shared_credit_core.config import AllocationConfig, AppConfig, set_config
from shared_credit_core.constants import ServiceClass
from shared_credit_core.schemas.offer_schema import SlotAvailability
from tests.fixtures.factories import make_record, make_server

PRIMARY = ServiceClass.PRIMARY
SECONDARY = ServiceClass.SECONDARY


def _members(primary=0, secondary=0):
    return [make_record(service_class=PRIMARY) for _ in range(primary)] + [
        make_record(service_class=SECONDARY) for _ in range(secondary)
    ]


class TestCountUsedSlots:
    def test_counts_per_class(self):
        used = count_used_slots(_members(primary=2, secondary=1))
        assert used == {PRIMARY: 2, SECONDARY: 1}

    def test_empty_group(self):
        assert count_used_slots([]) == {PRIMARY: 0, SECONDARY: 0}


class TestScaleToRemaining:
    @pytest.mark.parametrize(
        "primary,secondary,remaining",
        [
            (p, s, r)
            for p in range(0, 6)
            for s in range(0, 6)
            for r in range(1, 4)
            if p + s > r
        ],
    )
    def test_sum_is_exactly_remaining(self, primary, secondary, remaining):
        scaled_primary, scaled_secondary = scale_to_remaining(primary, secondary, remaining)

        assert scaled_primary + scaled_secondary == remaining
        assert 0 <= scaled_primary <= primary
        assert 0 <= scaled_secondary <= secondary

    @pytest.mark.parametrize(
        "primary,secondary,remaining,expected",
        [
            (1, 1, 1, (0, 1)),
            (2, 1, 1, (0, 1)),
            (2, 1, 2, (1, 1)),
            (3, 1, 2, (1, 1)),
            (4, 0, 2, (2, 0)),
            (0, 4, 1, (0, 1)),
        ],
    )
    def test_primary_floored_secondary_takes_remainder(self, primary, secondary, remaining, expected):
        assert scale_to_remaining(primary, secondary, remaining) == expected

    def test_zero_total(self):
        assert scale_to_remaining(0, 0, 2) == (0, 0)


class TestSlotAllocator:
    """Test allocation for one credential group."""

    def setup_method(self):
        self.allocator = SlotAllocator(max_shares=3)
        self.server = make_server(primary=2, secondary=1)

    def test_room_on_both_classes_within_global_cap(self):
        result = self.allocator.allocate(_members(primary=1), self.server, global_usage=1)
        # naive {1, 1} sums to the 2 shares left, no scaling
        assert result == SlotAvailability(primary=1, secondary=1)

    def test_last_share_goes_to_secondary(self):
        result = self.allocator.allocate(_members(primary=2), self.server, global_usage=2)
        assert result == SlotAvailability(primary=0, secondary=1)

    def test_global_cap_reached_excludes_group(self):
        assert self.allocator.allocate(_members(primary=2), self.server, global_usage=3) is None

    def test_global_cap_checked_before_local_capacity(self):
        """A locally empty credential is still excluded when saturated elsewhere."""
        assert self.allocator.allocate([], self.server, global_usage=3) is None

    def test_local_saturation_excludes_group(self):
        members = _members(primary=2, secondary=1)
        assert self.allocator.allocate(members, self.server, global_usage=0) is None

    def test_scaling_when_naive_exceeds_global_remaining(self):
        server = make_server(primary=3, secondary=3)
        result = self.allocator.allocate(_members(primary=1), server, global_usage=1)

        # naive {2, 3}, 2 shares left: primary floor(2 * 2 / 5) = 0, secondary 2
        assert result == SlotAvailability(primary=0, secondary=2)
        assert result.total == 2

    def test_zero_capacity_server_excludes(self):
        server = make_server(primary=0, secondary=0)
        assert self.allocator.allocate([], server, global_usage=0) is None

    def test_over_used_class_does_not_go_negative(self):
        server = make_server(primary=1, secondary=3)
        result = self.allocator.allocate(_members(primary=2), server, global_usage=0)
        assert result == SlotAvailability(primary=0, secondary=3)

    @pytest.mark.parametrize("global_usage", [0, 1, 2])
    def test_local_cap_invariant(self, global_usage):
        members = _members(primary=1)
        result = self.allocator.allocate(members, self.server, global_usage=global_usage)
        assert result is not None
        assert len(members) + result.total <= self.server.total_capacity
        assert global_usage + result.total <= 3

    def test_max_shares_from_config(self):
        set_config(AppConfig(allocation=AllocationConfig(max_shares=5)))
        allocator = SlotAllocator()
        assert allocator.max_shares == 5
        assert allocator.allocate([], self.server, global_usage=3) is not None
