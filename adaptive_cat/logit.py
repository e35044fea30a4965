"""
Conversions between the linear difficulty scale, the logit scale, percentages
and probability fractions.

Question difficulty and examinee ability are both tracked on the logit scale
(log-odds, ``ln(p / (1 - p))``). The activity itself presents difficulty as an
integer level on an inclusive linear range such as 1-10, so every answered
question is mapped onto the logit scale before it contributes to the ability
estimate.
"""

import logging
import math

from adaptive_cat.errors import ValidationError
from adaptive_cat.rounding import round_half_up

logger = logging.getLogger(__name__)


def linear_to_logit(level: float, min_level: int, max_level: int) -> float:
    """
    Map a level on the linear difficulty scale onto the logit scale.

    Both ends of the scale are asymptotes of the logit function. Instead of
    returning an infinite logit they are pinned to a floor that is half the
    granularity of the scale: for levels 1-100 the floor is 0.5% (about 5.3
    logits), for 1-1000 it is 0.05% (about 7.6 logits). A floor this close to
    the edge lets answers at the extremes still move the ability measure,
    while a couple of spurious edge answers remain recoverable by the answers
    that follow.

    Args:
        level: Difficulty level, within [min_level, max_level].
        min_level: Lowest level of the scale.
        max_level: Highest level of the scale.

    Returns:
        The logit of the level's position on the scale.

    Raises:
        ValidationError: If the scale is empty or the level is off the scale.
    """
    if max_level <= min_level:
        raise ValidationError(
            f"Difficulty scale must satisfy min < max, got min={min_level}, max={max_level}"
        )
    if not min_level <= level <= max_level:
        raise ValidationError(
            f"Level {level} is outside the difficulty scale [{min_level}, {max_level}]"
        )

    percent = (level - min_level) / (max_level - min_level)

    granularity = 1 / (max_level - min_level)
    percent_floor = granularity / 2

    # The top of the scale would divide by zero below
    if percent == 1:
        percent = 1 - percent_floor

    if percent == 0:
        logit = -math.inf
    else:
        logit = math.log(percent / (1 - percent))

    if math.isinf(logit):
        logit_floor = math.log(percent_floor / (1 - percent_floor))
        logger.debug(
            f"Level {level} sits on the edge of [{min_level}, {max_level}], "
            f"clamping logit to floor {logit_floor:.5f}"
        )
        if logit > 0:
            return -logit_floor
        return logit_floor

    return logit


def percent_to_logit(percent: float) -> float:
    """
    Convert a percentage, expressed as a fraction in [0, 0.5), into a logit.

    A standard error of 15% is passed as 0.15.

    Raises:
        ValidationError: If percent is negative or not below 0.5.
    """
    if percent < 0 or percent >= 0.5:
        raise ValidationError(
            f"Percent must satisfy 0 <= percent < 0.5, got {percent}"
        )
    return math.log((0.5 + percent) / (0.5 - percent))


def logit_to_percent(logit: float) -> float:
    """
    Convert a non-negative logit back into a fraction in [0, 0.5).

    Inverse of ``percent_to_logit``.

    Raises:
        ValidationError: If logit is negative.
    """
    if logit < 0:
        raise ValidationError(f"Logit must be >= 0, got {logit}")
    return (1 / (1 + math.exp(-logit))) - 0.5


def logit_to_fraction(logit: float) -> float:
    """Map any logit onto a fraction in (0, 1)."""
    # exp() overflows past ~709; the fraction has saturated long before that
    if logit > 700:
        return 1.0
    return math.exp(logit) / (1 + math.exp(logit))


def scale_logit_to_range(logit: float, max_level: int, min_level: int) -> float:
    """
    Map a logit onto the linear scale [min_level, max_level].

    Note the argument order: the upper bound comes first.
    """
    fraction = logit_to_fraction(logit)
    return ((max_level - min_level) * fraction) + min_level


def format_logit_as_percent(logit: float) -> float:
    """
    Display value for a non-negative logit: ``100 * logit_to_percent`` to 2 places.

    A fraction of 0.1234 is shown as 12.34.
    """
    return round_half_up(100 * logit_to_percent(logit), 2)
