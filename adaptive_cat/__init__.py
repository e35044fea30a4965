"""
Adaptive difficulty core for computerized adaptive testing.

After each answered question this package estimates the difficulty of the
next question to present and whether the attempt has gathered enough
information to stop, using a simplified one-parameter (Rasch-like) update on
the logit scale.
"""

from .ability_estimation import estimate_measure, estimate_standard_error
from .difficulty import DifficultyRange, compute_next_difficulty
from .domain_types import GradedState, ResponseOutcome, StopReason
from .engine import (
    AttemptStatistics,
    CalculationResult,
    ContinueResult,
    DifficultyDecision,
    RunningTotals,
    StopResult,
    determine_next_difficulty_level,
    get_current_diff_level,
)
from .errors import ValidationError
from .history import (
    InMemoryResponseHistory,
    ResponseHistoryProvider,
    SlotRecord,
    classify_last_response,
    count_responses,
)
from .logit import (
    linear_to_logit,
    logit_to_fraction,
    logit_to_percent,
    percent_to_logit,
    scale_logit_to_range,
)
from .stopping_rules import (
    ConvergenceCheck,
    check_convergence,
    converged,
    is_ready_to_stop,
    max_questions_reached,
)

__all__ = [
    "linear_to_logit",
    "percent_to_logit",
    "logit_to_percent",
    "logit_to_fraction",
    "scale_logit_to_range",
    "estimate_measure",
    "estimate_standard_error",
    "DifficultyRange",
    "compute_next_difficulty",
    "converged",
    "check_convergence",
    "ConvergenceCheck",
    "is_ready_to_stop",
    "max_questions_reached",
    "ResponseHistoryProvider",
    "InMemoryResponseHistory",
    "SlotRecord",
    "classify_last_response",
    "count_responses",
    "determine_next_difficulty_level",
    "get_current_diff_level",
    "RunningTotals",
    "ContinueResult",
    "StopResult",
    "CalculationResult",
    "DifficultyDecision",
    "AttemptStatistics",
    "GradedState",
    "ResponseOutcome",
    "StopReason",
    "ValidationError",
]
