"""
Tests for stopping rules.

Tests cover:
- Standard error vs. stopping error comparison (boundary inclusive)
- Display percentages and stop message
- Stopping error validation
- Minimum / maximum question count helpers
"""

import math

import pytest

from adaptive_cat.errors import ValidationError
from adaptive_cat.stopping_rules import (
    ConvergenceCheck,
    check_convergence,
    converged,
    is_ready_to_stop,
    max_questions_reached,
    validate_stopping_error_percent,
)

FIVE_PERCENT_LOGIT = math.log(0.55 / 0.45)  # ~0.20067


class TestConverged:
    def test_error_below_threshold_converges(self):
        is_converged, defined = converged(0.2, 5.0)
        assert is_converged is True
        assert defined == pytest.approx(FIVE_PERCENT_LOGIT)

    def test_error_above_threshold_does_not_converge(self):
        is_converged, _ = converged(0.21, 5.0)
        assert is_converged is False

    def test_boundary_is_inclusive(self):
        is_converged, _ = converged(FIVE_PERCENT_LOGIT, 5.0)
        assert is_converged is True

    def test_zero_percent_only_converges_on_zero_error(self):
        assert converged(0.0, 0.0)[0] is True
        assert converged(0.00001, 0.0)[0] is False

    @pytest.mark.parametrize("percent", [50.0, 75.0, -1.0])
    def test_invalid_percent_raises(self, percent):
        with pytest.raises(ValidationError):
            converged(0.5, percent)


class TestCheckConvergence:
    def test_display_percentages(self):
        check = check_convergence(1.41421, 49.0)
        assert check.converged is True
        # 100 * (1 / (1 + e^-1.41421) - 0.5)
        assert check.calculated_error_percent == pytest.approx(30.44)
        assert check.defined_error_percent == pytest.approx(49.0)

    def test_message_carries_both_percentages(self):
        check = ConvergenceCheck(
            converged=True,
            standard_error_logit=FIVE_PERCENT_LOGIT,
            defined_error_logit=FIVE_PERCENT_LOGIT,
        )
        assert check.message() == (
            "Calculated standard error of 5.0% is within the limits imposed "
            "by the activity (5.0%)"
        )

    def test_not_converged(self):
        check = check_convergence(0.73030, 5.0)
        assert check.converged is False
        assert check.defined_error_logit == pytest.approx(FIVE_PERCENT_LOGIT)


class TestValidateStoppingErrorPercent:
    @pytest.mark.parametrize("percent", [0.0, 5.0, 49.99])
    def test_valid(self, percent):
        validate_stopping_error_percent(percent)

    @pytest.mark.parametrize("percent", [50.0, -0.1])
    def test_invalid(self, percent):
        with pytest.raises(ValidationError):
            validate_stopping_error_percent(percent)


class TestQuestionLimits:
    def test_ready_to_stop_at_minimum(self):
        assert is_ready_to_stop(1, 2) is False
        assert is_ready_to_stop(2, 2) is True
        assert is_ready_to_stop(3, 2) is True

    def test_max_questions_reached(self):
        assert max_questions_reached(9, 10) is False
        assert max_questions_reached(10, 10) is True
