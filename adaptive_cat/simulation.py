"""
Monte Carlo simulation of examinees taking an adaptive attempt.

Draws N examinees with known ability, lets each answer questions at the
difficulty the engine asks for (Rasch model: P(correct) = sigmoid(ability -
item logit)), and drives ``determine_next_difficulty_level`` until it stops or
the maximum question count is reached. Used to check that the stopping error
and question limits of an activity produce sensible attempt lengths.
"""

import logging
import math
import statistics
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from adaptive_cat.ability_estimation import estimate_measure, estimate_standard_error
from adaptive_cat.config import Settings
from adaptive_cat.difficulty import DifficultyRange
from adaptive_cat.domain_types import GradedState, StopReason
from adaptive_cat.engine import RunningTotals, determine_next_difficulty_level
from adaptive_cat.errors import ValidationError
from adaptive_cat.history import InMemoryResponseHistory
from adaptive_cat.logit import linear_to_logit, scale_logit_to_range
from adaptive_cat.stopping_rules import (
    is_ready_to_stop,
    max_questions_reached,
    validate_stopping_error_percent,
)

logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    """Configuration for a simulation run."""

    n_examinees: int = 200
    ability_mean: float = 0.0  # Mean of the ability distribution (logits)
    ability_sd: float = 1.0
    lowest_level: int = 1
    highest_level: int = 10
    starting_level: int = 5
    standard_error_percent: float = 10.0
    minimum_questions: int = 2
    maximum_questions: int = 50
    seed: int = 42

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> "SimulationConfig":
        """Build a config from the activity settings, with optional overrides."""
        values: Dict[str, Any] = {
            "lowest_level": settings.LOWEST_LEVEL,
            "highest_level": settings.HIGHEST_LEVEL,
            "starting_level": settings.STARTING_LEVEL,
            "standard_error_percent": settings.STANDARD_ERROR_PERCENT,
            "minimum_questions": settings.MINIMUM_QUESTIONS,
            "maximum_questions": settings.MAXIMUM_QUESTIONS,
        }
        values.update(overrides)
        return cls(**values)

    def __post_init__(self) -> None:
        validate_stopping_error_percent(self.standard_error_percent)
        difficulty_range = self.difficulty_range()
        if not difficulty_range.contains(self.starting_level):
            raise ValidationError(
                f"Starting level {self.starting_level} is outside "
                f"[{self.lowest_level}, {self.highest_level}]"
            )
        if self.minimum_questions > self.maximum_questions:
            raise ValidationError(
                f"minimum_questions ({self.minimum_questions}) must not exceed "
                f"maximum_questions ({self.maximum_questions})"
            )

    def difficulty_range(self) -> DifficultyRange:
        return DifficultyRange(low=self.lowest_level, high=self.highest_level)


@dataclass
class ExamineeResult:
    """Per-examinee simulation results."""

    true_ability: float
    measure: float
    standard_error: float
    items_administered: int
    stop_reason: StopReason
    final_level: int
    estimated_level: float  # Measure mapped back onto the difficulty range
    levels: List[int] = field(default_factory=list)  # Level of each question shown

    @property
    def converged(self) -> bool:
        return self.stop_reason is StopReason.ERROR_WITHIN_LIMITS


@dataclass
class SimulationResult:
    """Aggregate simulation results."""

    config: SimulationConfig
    examinee_results: List[ExamineeResult]
    mean_items: float
    median_items: float
    mean_standard_error: float
    rmse: float
    convergence_rate: float
    stop_reason_counts: Dict[str, int]

    def summary(self) -> Dict[str, Any]:
        """JSON-serialisable summary without per-examinee details."""
        return {
            "config": asdict(self.config),
            "n_examinees": len(self.examinee_results),
            "mean_items": round(self.mean_items, 2),
            "median_items": self.median_items,
            "mean_standard_error": round(self.mean_standard_error, 5),
            "rmse": round(self.rmse, 5),
            "convergence_rate": round(self.convergence_rate, 4),
            "stop_reason_counts": self.stop_reason_counts,
        }


def simulate_response(
    true_ability: float,
    level: int,
    difficulty_range: DifficultyRange,
    rng: np.random.Generator,
) -> bool:
    """
    Draw a response to a question of ``level`` under the Rasch model.

    Returns:
        True if the simulated response is correct.
    """
    item_logit = linear_to_logit(level, difficulty_range.low, difficulty_range.high)
    x = true_ability - item_logit

    if x >= 0:
        prob = 1.0 / (1.0 + math.exp(-x))
    else:
        exp_x = math.exp(x)
        prob = exp_x / (1.0 + exp_x)

    return bool(rng.random() < prob)


def simulate_examinee(
    true_ability: float,
    config: SimulationConfig,
    rng: np.random.Generator,
) -> ExamineeResult:
    """Run one examinee through an attempt until it stops."""
    difficulty_range = config.difficulty_range()
    history = InMemoryResponseHistory()
    totals = RunningTotals()
    level = config.starting_level
    levels: List[int] = []
    stop_reason: Optional[StopReason] = None

    while stop_reason is None:
        levels.append(level)
        if simulate_response(true_ability, level, difficulty_range, rng):
            history.record(GradedState.CORRECT_GRADED, 1.0)
        else:
            history.record(GradedState.WRONG_GRADED, 0.0)

        decision = determine_next_difficulty_level(
            totals=totals,
            difficulty_range=difficulty_range,
            stopping_error_percent=config.standard_error_percent,
            ready_to_stop=is_ready_to_stop(
                totals.questions_attempted + 1, config.minimum_questions
            ),
            level=level,
            history=history,
        )
        totals = decision.totals

        if decision.result.should_stop:
            stop_reason = decision.result.reason
        elif max_questions_reached(totals.questions_attempted, config.maximum_questions):
            stop_reason = StopReason.MAX_QUESTIONS_REACHED
        else:
            level = decision.result.next_difficulty

    measure = estimate_measure(
        totals.difficulty_sum_logits,
        totals.questions_attempted,
        totals.sum_correct,
        totals.sum_incorrect,
    )
    standard_error = estimate_standard_error(
        totals.questions_attempted, totals.sum_correct, totals.sum_incorrect
    )

    return ExamineeResult(
        true_ability=true_ability,
        measure=measure,
        standard_error=standard_error,
        items_administered=totals.questions_attempted,
        stop_reason=stop_reason,
        final_level=level,
        estimated_level=scale_logit_to_range(
            measure, difficulty_range.high, difficulty_range.low
        ),
        levels=levels,
    )


def run_simulation(config: SimulationConfig) -> SimulationResult:
    """
    Simulate ``config.n_examinees`` attempts.

    Abilities are drawn from N(config.ability_mean, config.ability_sd²) with a
    seeded generator, so a given config always produces the same result.
    """
    if config.n_examinees < 1:
        raise ValueError(f"n_examinees must be >= 1, got {config.n_examinees}")

    logger.info(
        f"Starting CAT simulation: N={config.n_examinees}, "
        f"ability ~ N({config.ability_mean}, {config.ability_sd}²), "
        f"levels {config.lowest_level}-{config.highest_level}"
    )

    rng = np.random.default_rng(config.seed)
    examinee_results = []

    for examinee_id in range(1, config.n_examinees + 1):
        true_ability = float(rng.normal(loc=config.ability_mean, scale=config.ability_sd))
        examinee_results.append(simulate_examinee(true_ability, config, rng))

        if examinee_id % 100 == 0:
            logger.info(f"Completed {examinee_id}/{config.n_examinees} examinees")

    return _aggregate_results(config, examinee_results)


def _aggregate_results(
    config: SimulationConfig, examinee_results: List[ExamineeResult]
) -> SimulationResult:
    items = [r.items_administered for r in examinee_results]
    errors = np.array([r.measure - r.true_ability for r in examinee_results])

    reason_counts = Counter(r.stop_reason.value for r in examinee_results)

    return SimulationResult(
        config=config,
        examinee_results=examinee_results,
        mean_items=float(np.mean(items)),
        median_items=float(statistics.median(items)),
        mean_standard_error=float(np.mean([r.standard_error for r in examinee_results])),
        rmse=float(np.sqrt(np.mean(errors**2))),
        convergence_rate=sum(r.converged for r in examinee_results) / len(examinee_results),
        stop_reason_counts=dict(reason_counts),
    )
