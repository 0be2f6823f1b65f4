"""
Tests for CapacityLedger: byte-accurate admit/reject decisions.
"""

import pytest

from data_harbor import CapacityLedger


class TestReserve:
    def test_admits_up_to_exact_maximum(self):
        ledger = CapacityLedger(100)
        assert ledger.try_reserve(60) is True
        assert ledger.try_reserve(40) is True
        assert ledger.current == 100
        assert ledger.remaining == 0

    def test_rejection_has_no_side_effect(self):
        ledger = CapacityLedger(100)
        ledger.try_reserve(80)
        assert ledger.try_reserve(21) is False
        assert ledger.current == 80

    def test_oversized_entry_is_permanently_rejected(self):
        ledger = CapacityLedger(10)
        assert ledger.try_reserve(11) is False
        ledger.reset()
        assert ledger.try_reserve(11) is False

    def test_zero_size_always_fits(self):
        ledger = CapacityLedger(1)
        ledger.try_reserve(1)
        assert ledger.try_reserve(0) is True

    def test_negative_size_rejected(self):
        assert CapacityLedger(10).try_reserve(-1) is False


class TestReset:
    def test_reset_zeroes_counter(self):
        ledger = CapacityLedger(50)
        ledger.try_reserve(50)
        ledger.reset()
        assert ledger.current == 0
        assert ledger.try_reserve(50) is True


class TestUnbounded:
    @pytest.mark.parametrize("maximum", [None, 0, -5, 1.5, "100", True])
    def test_invalid_maximum_means_unbounded(self, maximum):
        ledger = CapacityLedger(maximum)
        assert ledger.maximum is None
        assert ledger.remaining is None
        assert ledger.try_reserve(10**9) is True
