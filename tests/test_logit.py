"""
Tests for logit scale conversions.

Tests cover:
- Linear level to logit mapping, including clamping at both ends of the scale
- Percent <-> logit conversions and their domain checks
- Logit to fraction and to the linear range
"""

import math

import pytest

from adaptive_cat.errors import ValidationError
from adaptive_cat.logit import (
    format_logit_as_percent,
    linear_to_logit,
    logit_to_fraction,
    logit_to_percent,
    percent_to_logit,
    scale_logit_to_range,
)


class TestLinearToLogit:
    def test_interior_level(self):
        # (5 - 1) / 9 = 4/9 -> ln(4/5)
        assert linear_to_logit(5, 1, 10) == pytest.approx(math.log(0.8))

    def test_level_one_above_min(self):
        # 1/9 -> ln(1/8)
        assert linear_to_logit(2, 1, 10) == pytest.approx(math.log(1 / 8))

    def test_min_level_is_clamped_to_negative_floor(self):
        # Floor is half the granularity: 1/18 -> ln(1/17)
        result = linear_to_logit(1, 1, 10)
        assert math.isfinite(result)
        assert result == pytest.approx(math.log(1 / 17))

    def test_max_level_is_clamped_to_positive_floor(self):
        result = linear_to_logit(10, 1, 10)
        assert math.isfinite(result)
        assert result == pytest.approx(math.log(17))

    def test_ends_are_symmetric(self):
        assert linear_to_logit(1, 1, 100) == pytest.approx(-linear_to_logit(100, 1, 100))

    def test_floor_for_hundred_levels(self):
        # Levels 1-100: floor of 0.5% of the scale, about 5.3 logits
        assert linear_to_logit(100, 1, 100) == pytest.approx(math.log(197), rel=1e-9)
        assert linear_to_logit(100, 1, 100) == pytest.approx(5.28, abs=0.01)

    def test_monotonically_increasing(self):
        logits = [linear_to_logit(level, 1, 10) for level in range(1, 11)]
        assert all(a < b for a, b in zip(logits, logits[1:]))

    def test_midpoint_is_zero(self):
        assert linear_to_logit(50, 0, 100) == pytest.approx(0.0)

    def test_equal_bounds_raise(self):
        with pytest.raises(ValidationError):
            linear_to_logit(5, 5, 5)

    def test_level_outside_scale_raises(self):
        with pytest.raises(ValidationError):
            linear_to_logit(11, 1, 10)
        with pytest.raises(ValidationError):
            linear_to_logit(0, 1, 10)


class TestRoundTrip:
    @pytest.mark.parametrize("level", [2, 3, 4, 5, 6, 7, 8, 9])
    def test_interior_levels_round_trip(self, level):
        logit = linear_to_logit(level, 1, 10)
        assert logit_to_fraction(logit) * 9 + 1 == pytest.approx(level)

    def test_extremes_stay_within_scale(self):
        low = logit_to_fraction(linear_to_logit(1, 1, 10)) * 9 + 1
        high = logit_to_fraction(linear_to_logit(10, 1, 10)) * 9 + 1
        assert 1 < low < 2
        assert 9 < high < 10


class TestPercentToLogit:
    def test_zero_percent(self):
        assert percent_to_logit(0.0) == pytest.approx(0.0)

    def test_five_percent(self):
        assert percent_to_logit(0.05) == pytest.approx(math.log(0.55 / 0.45))

    def test_half_raises(self):
        with pytest.raises(ValidationError):
            percent_to_logit(0.5)

    @pytest.mark.parametrize("percent", [0.51, 1.0, -0.01])
    def test_out_of_bounds_raises(self, percent):
        with pytest.raises(ValidationError):
            percent_to_logit(percent)

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            percent_to_logit(0.7)


class TestLogitToPercent:
    def test_zero_logit(self):
        assert logit_to_percent(0.0) == pytest.approx(0.0)

    def test_inverse_of_percent_to_logit(self):
        assert logit_to_percent(percent_to_logit(0.15)) == pytest.approx(0.15)

    def test_negative_logit_raises(self):
        with pytest.raises(ValidationError):
            logit_to_percent(-0.1)

    def test_display_percent(self):
        assert format_logit_as_percent(percent_to_logit(0.1234)) == pytest.approx(12.34)


class TestLogitToFraction:
    def test_zero_is_half(self):
        assert logit_to_fraction(0.0) == pytest.approx(0.5)

    def test_bounded(self):
        for logit in (-50.0, -5.0, 5.0, 50.0):
            assert 0.0 <= logit_to_fraction(logit) <= 1.0

    def test_very_large_logit_saturates(self):
        assert logit_to_fraction(1000.0) == pytest.approx(1.0)
        assert logit_to_fraction(-1000.0) == pytest.approx(0.0)


class TestScaleLogitToRange:
    def test_zero_maps_to_middle(self):
        assert scale_logit_to_range(0.0, 10, 1) == pytest.approx(5.5)

    def test_large_logit_approaches_max(self):
        assert scale_logit_to_range(20.0, 10, 1) == pytest.approx(10.0, abs=1e-6)
