"""
Adaptive difficulty orchestrator.

Decides, after each answered question, whether the attempt continues (and at
which difficulty level) or stops (and why). The engine is stateless between
calls: the caller owns the ``RunningTotals`` of the attempt, passes them in,
and persists the updated totals returned in the ``DifficultyDecision``.

Decision sequence for one answered question:
    1. Classify the last response (correct / incorrect / undetermined)
    2. Step the difficulty and accumulate the answered item's logit
    3. If the attempt is not yet ready to stop, continue immediately
    4. Recount correct/incorrect answers over the whole history
    5. Estimate the ability measure and its standard error
    6. Stop if the standard error is within the activity's stopping error
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Union

from adaptive_cat.ability_estimation import (
    ESTIMATE_PRECISION,
    estimate_measure,
    estimate_standard_error,
)
from adaptive_cat.difficulty import DifficultyRange, compute_next_difficulty
from adaptive_cat.domain_types import GradedState, ResponseOutcome, StopReason
from adaptive_cat.errors import ValidationError
from adaptive_cat.history import (
    ResponseHistoryProvider,
    classify_last_response,
    count_responses,
    get_question_mark,
    trace_message,
)
from adaptive_cat.rounding import round_half_up
from adaptive_cat.stopping_rules import (
    check_convergence,
    validate_stopping_error_percent,
)

logger = logging.getLogger(__name__)

# Standard error stored on an attempt before any estimate exists
INITIAL_STANDARD_ERROR = 999.0

# Decimal places kept for the stored difficulty sum
DIFFICULTY_SUM_PRECISION = 7


@dataclass(frozen=True)
class RunningTotals:
    """Accumulators carried by the caller from one decision to the next."""

    difficulty_sum_logits: float = 0.0
    questions_attempted: int = 0
    sum_correct: int = 0
    sum_incorrect: int = 0

    def __post_init__(self) -> None:
        if self.questions_attempted < 0:
            raise ValidationError(
                f"Questions attempted must be non-negative, got {self.questions_attempted}"
            )
        if self.sum_correct < 0 or self.sum_incorrect < 0:
            raise ValidationError(
                f"Answer counts must be non-negative, got correct={self.sum_correct}, "
                f"incorrect={self.sum_incorrect}"
            )


@dataclass(frozen=True)
class ContinueResult:
    """The attempt continues with a question of ``next_difficulty``."""

    next_difficulty: int

    @property
    def should_stop(self) -> bool:
        return False


@dataclass(frozen=True)
class StopResult:
    """
    The attempt stops.

    Attributes:
        reason: Why the attempt stopped.
        message: Human-readable description for the examinee or operator.
        measure: Ability measure, when it was estimated.
        standard_error: Standard error of the measure, when it was estimated.
        calculated_error_percent: Standard error as a display percent.
        defined_error_percent: Activity stopping error as a display percent.
    """

    reason: StopReason
    message: str
    measure: Optional[float] = None
    standard_error: Optional[float] = None
    calculated_error_percent: Optional[float] = None
    defined_error_percent: Optional[float] = None

    @property
    def should_stop(self) -> bool:
        return True


CalculationResult = Union[ContinueResult, StopResult]


@dataclass(frozen=True)
class DifficultyDecision:
    """
    Everything one decision call produces.

    Attributes:
        result: Continue with a new difficulty, or stop with a reason.
        totals: Updated running totals to persist for the next call.
        level_logit: Logit of the answered question's level (None if undetermined).
        measure: Ability measure, if estimation ran.
        standard_error: Standard error of the measure, if estimation ran.
    """

    result: CalculationResult
    totals: RunningTotals
    level_logit: Optional[float] = None
    measure: Optional[float] = None
    standard_error: Optional[float] = None


@dataclass(frozen=True)
class AttemptStatistics:
    """
    Statistics stored on an attempt after each answered question.

    A fresh attempt carries the placeholder standard error of 999.
    """

    difficulty_sum: float = 0.0
    questions_attempted: int = 0
    standard_error: float = INITIAL_STANDARD_ERROR
    measure: float = 0.0

    def record_question_answered(
        self, difficulty_logit: float, standard_error: float, measure: float
    ) -> "AttemptStatistics":
        """Return the statistics after one more answered question."""
        return AttemptStatistics(
            difficulty_sum=round_half_up(
                self.difficulty_sum + difficulty_logit, DIFFICULTY_SUM_PRECISION
            ),
            questions_attempted=self.questions_attempted + 1,
            standard_error=round_half_up(standard_error, ESTIMATE_PRECISION),
            measure=round_half_up(measure, ESTIMATE_PRECISION),
        )


def _validate_level(level: int, name: str) -> None:
    if isinstance(level, bool) or not isinstance(level, int) or level <= 0:
        raise ValidationError(f"{name} must be a positive integer, got {level!r}")


def _stop(
    reason: StopReason,
    totals: RunningTotals,
    level_logit: Optional[float] = None,
) -> DifficultyDecision:
    logger.warning(
        f"Stopping attempt: {reason.value} "
        f"(attempted={totals.questions_attempted}, correct={totals.sum_correct}, "
        f"incorrect={totals.sum_incorrect})"
    )
    return DifficultyDecision(
        result=StopResult(reason=reason, message=reason.value),
        totals=totals,
        level_logit=level_logit,
    )


def determine_next_difficulty_level(
    totals: RunningTotals,
    difficulty_range: DifficultyRange,
    stopping_error_percent: float,
    ready_to_stop: bool,
    level: int,
    history: ResponseHistoryProvider,
    trace: Optional[List[str]] = None,
) -> DifficultyDecision:
    """
    Decide the next difficulty level, or that the attempt should stop.

    Args:
        totals: Running totals persisted after the previous decision.
        difficulty_range: The activity's difficulty scale.
        stopping_error_percent: Stopping error as a percent in [0, 50).
        ready_to_stop: Whether the attempt has met its minimum requirements,
            so that the standard error may be compared with the stopping error.
        level: Difficulty level of the question just answered.
        history: The attempt's response history.
        trace: Optional list collecting diagnostic messages.

    Returns:
        DifficultyDecision carrying the result and the updated totals.

    Raises:
        ValidationError: If level is not a positive integer or the stopping
            error percent is out of bounds.
    """
    _validate_level(level, "Level")
    validate_stopping_error_percent(stopping_error_percent)

    outcome = classify_last_response(history, trace)
    if outcome is ResponseOutcome.UNDETERMINED:
        return _stop(StopReason.UNDETERMINED_LAST_RESPONSE, totals)

    correct = outcome is ResponseOutcome.CORRECT
    questions_attempted = totals.questions_attempted + 1

    next_difficulty, level_logit = compute_next_difficulty(
        level, questions_attempted, correct, difficulty_range
    )

    updated = RunningTotals(
        difficulty_sum_logits=totals.difficulty_sum_logits + level_logit,
        questions_attempted=questions_attempted,
        sum_correct=totals.sum_correct + (1 if correct else 0),
        sum_incorrect=totals.sum_incorrect + (0 if correct else 1),
    )
    trace_message(
        trace,
        f"determine_next_difficulty_level() - level {level} answered "
        f"{outcome.value}, next difficulty {next_difficulty}, "
        f"difficulty sum {updated.difficulty_sum_logits:.7f}",
    )

    if not ready_to_stop:
        return DifficultyDecision(
            result=ContinueResult(next_difficulty=next_difficulty),
            totals=updated,
            level_logit=level_logit,
        )

    sum_correct, sum_incorrect = count_responses(history, trace)
    updated = replace(updated, sum_correct=sum_correct, sum_incorrect=sum_incorrect)

    if questions_attempted == 0:
        return _stop(StopReason.ZERO_QUESTIONS_ATTEMPTED, updated, level_logit)

    if sum_correct + sum_incorrect != questions_attempted:
        return _stop(StopReason.ANSWER_COUNT_MISMATCH, updated, level_logit)

    measure = estimate_measure(
        updated.difficulty_sum_logits, questions_attempted, sum_correct, sum_incorrect
    )
    standard_error = estimate_standard_error(
        questions_attempted, sum_correct, sum_incorrect
    )
    trace_message(
        trace,
        f"determine_next_difficulty_level() - measure {measure}, "
        f"standard error {standard_error}",
    )

    check = check_convergence(standard_error, stopping_error_percent)
    if check.converged:
        logger.info(
            f"Stopping attempt after {questions_attempted} questions: "
            f"{check.message()}"
        )
        return DifficultyDecision(
            result=StopResult(
                reason=StopReason.ERROR_WITHIN_LIMITS,
                message=check.message(),
                measure=measure,
                standard_error=standard_error,
                calculated_error_percent=check.calculated_error_percent,
                defined_error_percent=check.defined_error_percent,
            ),
            totals=updated,
            level_logit=level_logit,
            measure=measure,
            standard_error=standard_error,
        )

    return DifficultyDecision(
        result=ContinueResult(next_difficulty=next_difficulty),
        totals=updated,
        level_logit=level_logit,
        measure=measure,
        standard_error=standard_error,
    )


def get_current_diff_level(
    history: ResponseHistoryProvider,
    starting_level: int,
    difficulty_range: DifficultyRange,
) -> int:
    """
    Recompute the attempt's current difficulty level from its history alone.

    Replays every answered slot through the difficulty stepper, starting from
    ``starting_level``. A final slot that was never answered is left out.
    Used to recover the running difficulty without trusting a stored value.

    Returns:
        The current difficulty level, or 0 for an empty history.

    Raises:
        ValidationError: If starting_level is not a positive integer.
    """
    _validate_level(starting_level, "Starting level")

    slots = list(history.ordered_slots())
    if not slots:
        return 0

    if history.graded_state(slots[-1]) is GradedState.UNANSWERED:
        slots.pop()

    current_level = starting_level
    for questions_attempted, slot in enumerate(slots, start=1):
        mark = get_question_mark(history, slot)
        correct = mark is not None and mark > 0.0
        current_level, _ = compute_next_difficulty(
            current_level, questions_attempted, correct, difficulty_range
        )

    return current_level
