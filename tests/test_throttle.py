import time

import pytest

from skycast.errors import RateLimited
from skycast.throttle import ThrottleLedger


class TestThrottleLedger:
    def test_first_call_allowed(self, clock):
        ledger = ThrottleLedger(min_interval=15, clock=clock)
        ledger.check("52.52,13.41")
        assert ledger.remaining("52.52,13.41") == 0.0

    def test_call_within_interval_rejected(self, clock):
        ledger = ThrottleLedger(min_interval=15, clock=clock)
        ledger.record("k")
        clock.advance(5)
        with pytest.raises(RateLimited) as exc_info:
            ledger.check("k")
        assert exc_info.value.retry_after == 10
        assert exc_info.value.key == "k"

    def test_wait_is_rounded_up(self, clock):
        ledger = ThrottleLedger(min_interval=15, clock=clock)
        ledger.record("k")
        clock.advance(5.2)
        with pytest.raises(RateLimited) as exc_info:
            ledger.check("k")
        assert exc_info.value.retry_after == 10

    def test_allowed_after_interval(self, clock):
        ledger = ThrottleLedger(min_interval=15, clock=clock)
        ledger.record("k")
        clock.advance(15)
        ledger.check("k")

    def test_keys_are_independent(self, clock):
        ledger = ThrottleLedger(min_interval=15, clock=clock)
        ledger.record("a")
        ledger.check("b")

    def test_reset(self, clock):
        ledger = ThrottleLedger(min_interval=15, clock=clock)
        ledger.record("k")
        ledger.reset()
        ledger.check("k")

    def test_default_clock_is_monotonic(self):
        assert ThrottleLedger()._clock is time.monotonic

    def test_record_prunes_expired_keys(self, clock):
        ledger = ThrottleLedger(min_interval=15, clock=clock)
        ledger.record("a")
        clock.advance(10)
        ledger.record("b")
        clock.advance(5)
        ledger.record("c")
        assert len(ledger) == 2
        assert ledger.remaining("a") == 0.0
        assert ledger.remaining("b") == 10
