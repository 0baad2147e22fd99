"""Tests for the remaining-time estimator."""

import pytest
from sub_translator.progress import PLEASE_WAIT, Estimate, ProgressEstimator, format_duration


class FakeClock:

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class TestFormatDuration:

    def test_format(self):
        assert format_duration(0) == "0h 0m 0s"
        assert format_duration(3723) == "1h 2m 3s"
        assert format_duration(59.6) == "0h 1m 0s"


class TestProgressEstimator:

    def test_indeterminate_below_min_samples(self):
        clock = FakeClock()
        estimator = ProgressEstimator(total=50, clock=clock)

        for _ in range(9):
            clock.advance(2.0)
            estimate = estimator.record()
            assert estimate.is_indeterminate
            assert str(estimate) == PLEASE_WAIT

    def test_numeric_at_min_samples(self):
        clock = FakeClock()
        estimator = ProgressEstimator(total=50, clock=clock)

        for _ in range(10):
            clock.advance(2.0)
            estimate = estimator.record()

        assert estimate.seconds == pytest.approx(2.0 * 40)

    def test_uniform_timing(self):
        clock = FakeClock()
        estimator = ProgressEstimator(total=30, clock=clock)

        for _ in range(11):
            clock.advance(3.0)
            estimate = estimator.record()

        assert estimate.completed == 11
        assert estimate.remaining == 19
        assert estimate.seconds == pytest.approx(3.0 * 19)
        assert str(estimate) == "0h 0m 57s"

    def test_running_average(self):
        clock = FakeClock()
        estimator = ProgressEstimator(total=4, min_samples=1, clock=clock)

        clock.advance(1.0)
        estimator.record()
        clock.advance(3.0)
        estimate = estimator.record()

        assert estimator.elapsed == pytest.approx(4.0)
        assert estimate.seconds == pytest.approx(2.0 * 2)

    def test_last_item_has_zero_remaining(self):
        clock = FakeClock()
        estimator = ProgressEstimator(total=1, min_samples=1, clock=clock)
        clock.advance(5.0)
        assert estimator.record() == Estimate(1, 0, 0.0)
