"""
Next-difficulty stepping for the adaptive attempt.

After every answered question the difficulty of that question is mapped onto
the logit scale and nudged up (correct) or down (incorrect) by ``2 / n``,
where ``n`` is the number of questions attempted so far. Early answers move
the difficulty aggressively, later ones cautiously, approximating a
maximum-likelihood update that converges as evidence accumulates. The result
is mapped back onto the activity's integer difficulty range.
"""

import logging
import math
from dataclasses import dataclass
from typing import Tuple

from adaptive_cat.errors import ValidationError
from adaptive_cat.logit import linear_to_logit
from adaptive_cat.rounding import round_half_up

logger = logging.getLogger(__name__)

# Numerator of the diminishing step, in logits
STEP_NUMERATOR = 2.0

# Decimal places kept for the probability before it is scaled onto the range
PROBABILITY_PRECISION = 2


@dataclass(frozen=True)
class DifficultyRange:
    """Inclusive linear difficulty scale of an activity, e.g. levels 1-10."""

    low: int
    high: int

    def __post_init__(self) -> None:
        if isinstance(self.low, bool) or not isinstance(self.low, int):
            raise ValidationError(f"Lowest level must be an integer, got {self.low!r}")
        if isinstance(self.high, bool) or not isinstance(self.high, int):
            raise ValidationError(
                f"Highest level must be an integer, got {self.high!r}"
            )
        if self.low >= self.high:
            raise ValidationError(
                f"Difficulty range must satisfy low < high, got low={self.low}, "
                f"high={self.high}"
            )

    @property
    def span(self) -> int:
        return self.high - self.low

    def contains(self, level: float) -> bool:
        return self.low <= level <= self.high


def _sigmoid(x: float) -> float:
    try:
        return 1 / (1 + math.exp(-x))
    except OverflowError:
        # exp(-x) is beyond float range only for very negative x
        return 0.0


def compute_next_difficulty(
    current_level: int,
    attempted_count: int,
    correct: bool,
    difficulty_range: DifficultyRange,
) -> Tuple[int, float]:
    """
    Compute the integer difficulty level of the next question.

    Args:
        current_level: Difficulty level of the question just answered.
        attempted_count: Number of questions attempted, including this one.
        correct: Whether the question was answered correctly.
        difficulty_range: The activity's difficulty scale.

    Returns:
        Tuple of (next_difficulty, level_logit).
        - next_difficulty: Integer level within the difficulty range
        - level_logit: Logit of ``current_level``; the caller adds it to the
          attempt's running difficulty sum

    Raises:
        ValidationError: If attempted_count < 1 or current_level is off the range.
    """
    if attempted_count < 1:
        raise ValidationError(
            f"Attempted count must be >= 1, got {attempted_count}"
        )
    if not difficulty_range.contains(current_level):
        raise ValidationError(
            f"Level {current_level} is outside the difficulty range "
            f"[{difficulty_range.low}, {difficulty_range.high}]"
        )

    level_logit = linear_to_logit(
        current_level, difficulty_range.low, difficulty_range.high
    )

    if correct:
        step = level_logit + STEP_NUMERATOR / attempted_count
    else:
        step = level_logit - STEP_NUMERATOR / attempted_count

    # The logistic output is bounded to [0, 1] by construction, so no clamp
    probability = round_half_up(_sigmoid(step), PROBABILITY_PRECISION)
    next_difficulty = int(
        round_half_up(difficulty_range.low + probability * difficulty_range.span)
    )

    logger.debug(
        f"Level {current_level} (logit {level_logit:.5f}) answered "
        f"{'correctly' if correct else 'incorrectly'} after {attempted_count} "
        f"question(s): step={step:.5f}, p={probability}, next={next_difficulty}"
    )

    return (next_difficulty, level_logit)
