"""
Ability measure and standard error estimation from accumulated answer counts.

Uses the simplified one-parameter (Rasch-like) estimate:

    measure = mean(item difficulty logits) + ln(correct / incorrect)
    SE      = sqrt(attempted / (correct * incorrect))

When every answer so far is correct (or every answer incorrect) one of the
counts is zero and the formulas hit ln(0) or a division by zero. The empty
side then receives a Bayesian 0.5 correction, taken from the other side so
the total stays unchanged. Both estimators share that correction.
"""

import logging
import math
from typing import Tuple

from adaptive_cat.errors import ValidationError
from adaptive_cat.rounding import round_half_up

logger = logging.getLogger(__name__)

# Decimal places kept for the persisted measure and standard error
ESTIMATE_PRECISION = 5

# Bayesian correction applied when one of the answer counts is zero
ZERO_COUNT_CORRECTION = 0.5


def _corrected_counts(sum_correct: int, sum_incorrect: int) -> Tuple[float, float]:
    """Return (correct, incorrect) with the 0.5 correction applied to an empty side."""
    if sum_incorrect == 0:
        return (
            sum_correct - ZERO_COUNT_CORRECTION,
            sum_incorrect + ZERO_COUNT_CORRECTION,
        )
    if sum_correct == 0:
        return (
            sum_correct + ZERO_COUNT_CORRECTION,
            sum_incorrect - ZERO_COUNT_CORRECTION,
        )
    return (float(sum_correct), float(sum_incorrect))


def _validate_counts(questions_attempted: int, sum_correct: int, sum_incorrect: int) -> None:
    if questions_attempted < 1:
        raise ValidationError(
            f"Questions attempted must be >= 1, got {questions_attempted}"
        )
    if sum_correct < 0 or sum_incorrect < 0:
        raise ValidationError(
            f"Answer counts must be non-negative, got correct={sum_correct}, "
            f"incorrect={sum_incorrect}"
        )
    if sum_correct + sum_incorrect == 0:
        raise ValidationError("At least one answer must have been counted")


def estimate_measure(
    difficulty_sum_logits: float,
    questions_attempted: int,
    sum_correct: int,
    sum_incorrect: int,
) -> float:
    """
    Estimate the examinee's ability measure in logits.

    Args:
        difficulty_sum_logits: Sum of the logits of every answered item's level.
        questions_attempted: Number of questions answered.
        sum_correct: Number of correct answers.
        sum_incorrect: Number of incorrect answers.

    Returns:
        The measure rounded half-up to 5 decimal places.

    Raises:
        ValidationError: If no question was attempted or the counts are
            negative or both zero.
    """
    _validate_counts(questions_attempted, sum_correct, sum_incorrect)

    correct, incorrect = _corrected_counts(sum_correct, sum_incorrect)
    measure = (difficulty_sum_logits / questions_attempted) + math.log(
        correct / incorrect
    )

    return round_half_up(measure, ESTIMATE_PRECISION)


def estimate_standard_error(
    questions_attempted: int,
    sum_correct: int,
    sum_incorrect: int,
) -> float:
    """
    Estimate the standard error of the ability measure in logits.

    Raises:
        ValidationError: Under the same conditions as ``estimate_measure``.
    """
    _validate_counts(questions_attempted, sum_correct, sum_incorrect)

    correct, incorrect = _corrected_counts(sum_correct, sum_incorrect)
    standard_error = math.sqrt(questions_attempted / (correct * incorrect))

    return round_half_up(standard_error, ESTIMATE_PRECISION)
