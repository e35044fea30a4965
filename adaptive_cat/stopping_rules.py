"""
Stopping rules for the adaptive attempt.

The primary criterion compares the estimated standard error of the ability
measure against the stopping error configured for the activity. The activity
expresses that error as a percentage (e.g. 5.0 for 5%); it is converted onto
the logit scale before the comparison.

The minimum and maximum question counts are applied by the calling loop: the
minimum decides when the comparison is allowed to run at all (the
``ready_to_stop`` flag), the maximum is a hard cap on the attempt length.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from adaptive_cat.errors import ValidationError
from adaptive_cat.logit import format_logit_as_percent, percent_to_logit

logger = logging.getLogger(__name__)

# Stopping errors are percentages in [0, MAX_STOPPING_ERROR_PERCENT)
MAX_STOPPING_ERROR_PERCENT = 50.0


@dataclass(frozen=True)
class ConvergenceCheck:
    """
    Result of comparing the calculated standard error with the stopping error.

    Attributes:
        converged: Whether the calculated error is within the stopping error.
        standard_error_logit: Calculated standard error of the measure.
        defined_error_logit: Stopping error converted to a logit.
    """

    converged: bool
    standard_error_logit: float
    defined_error_logit: float

    @property
    def calculated_error_percent(self) -> float:
        return format_logit_as_percent(self.standard_error_logit)

    @property
    def defined_error_percent(self) -> float:
        return format_logit_as_percent(self.defined_error_logit)

    def message(self) -> str:
        """Human-readable stop message carrying both percentages."""
        return (
            f"Calculated standard error of {self.calculated_error_percent}% is "
            f"within the limits imposed by the activity ({self.defined_error_percent}%)"
        )


def validate_stopping_error_percent(stopping_error_percent: float) -> None:
    """Raise ValidationError unless the percent is within [0, 50)."""
    if not 0 <= stopping_error_percent < MAX_STOPPING_ERROR_PERCENT:
        raise ValidationError(
            f"Stopping error percent must satisfy 0 <= percent < "
            f"{MAX_STOPPING_ERROR_PERCENT}, got {stopping_error_percent}"
        )


def converged(
    standard_error_logit: float, stopping_error_percent: float
) -> Tuple[bool, float]:
    """
    Check whether the calculated standard error is within the stopping error.

    Args:
        standard_error_logit: Estimated standard error of the measure (logits).
        stopping_error_percent: Configured stopping error as a percent, e.g. 5.0.

    Returns:
        Tuple of (converged, defined_error_logit).

    Raises:
        ValidationError: If stopping_error_percent is outside [0, 50).
    """
    validate_stopping_error_percent(stopping_error_percent)
    defined_error_logit = percent_to_logit(stopping_error_percent / 100)
    return (standard_error_logit <= defined_error_logit, defined_error_logit)


def check_convergence(
    standard_error_logit: float, stopping_error_percent: float
) -> ConvergenceCheck:
    """Same comparison as ``converged``, packaged with display helpers."""
    is_converged, defined_error_logit = converged(
        standard_error_logit, stopping_error_percent
    )

    if is_converged:
        logger.info(
            f"Standard error {standard_error_logit:.5f} is within the stopping "
            f"error {defined_error_logit:.5f} ({stopping_error_percent}%)"
        )
    else:
        logger.debug(
            f"Standard error {standard_error_logit:.5f} exceeds the stopping "
            f"error {defined_error_logit:.5f} ({stopping_error_percent}%)"
        )

    return ConvergenceCheck(
        converged=is_converged,
        standard_error_logit=standard_error_logit,
        defined_error_logit=defined_error_logit,
    )


def is_ready_to_stop(questions_attempted: int, minimum_questions: int) -> bool:
    """Whether enough questions were answered for the error check to apply."""
    return questions_attempted >= minimum_questions


def max_questions_reached(questions_attempted: int, maximum_questions: int) -> bool:
    """Whether the attempt has hit its question cap."""
    return questions_attempted >= maximum_questions
