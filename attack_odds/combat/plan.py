"""Multi-attack plans.

A plan is a sequence of attacks, each optionally repeated as independent
identical trials. Steps are assumed independent of one another, so the plan's
damage is the convolution of every step's repeated distribution.
"""

import logging
import math
from collections.abc import Iterable

from attack_odds.combat.damage import calculate_attack_damage
from attack_odds.combat.types import (
    AttackDamagePlanResult,
    AttackDamagePlanStep,
    AttackDamagePlanStepResult,
)
from attack_odds.prob import InvalidArgumentError, constant, convolve, expectation, repeat_convolve


logger = logging.getLogger(__name__)


def normalize_step_repeat(repeat: float | None) -> int:
    """Resolve a step's repeat count.

    None means once; fractional counts are floored.

    Raises:
        InvalidArgumentError: If repeat is not finite or is below 1 after flooring.

    Examples:
        >>> normalize_step_repeat(None)
        1
        >>> normalize_step_repeat(2.7)
        2
    """
    if repeat is None:
        return 1

    if isinstance(repeat, bool) or not math.isfinite(repeat):
        raise InvalidArgumentError(f"repeat must be a finite number, got {repeat!r}")

    normalized = math.floor(repeat)
    if normalized < 1:
        raise InvalidArgumentError(f"repeat must be at least 1, got {repeat!r}")

    return normalized


def calculate_attack_damage_plan(
    steps: Iterable[AttackDamagePlanStep],
) -> AttackDamagePlanResult:
    """Damage distribution and expectation over a whole plan.

    Args:
        steps: Plan steps in order.

    Returns:
        AttackDamagePlanResult with per-step results and the combined total.

    Raises:
        InvalidArgumentError: If a repeat count or any request is invalid.
    """
    total = constant(0)
    resolved: list[AttackDamagePlanStepResult] = []

    for step in steps:
        repeat = normalize_step_repeat(step.repeat)
        result = calculate_attack_damage(step.request)
        repeated = repeat_convolve(result.total_damage_distribution, repeat)

        resolved.append(
            AttackDamagePlanStepResult(
                request=step.request,
                repeat=repeat,
                result=result,
                total_damage_distribution=repeated,
                expected_damage_total=result.expected_damage_per_attack * repeat,
            )
        )
        total = convolve(total, repeated)

    expected = expectation(total)
    logger.debug(f"Plan of {len(resolved)} step(s): E[damage]={expected:.3f}")

    return AttackDamagePlanResult(
        steps=tuple(resolved),
        total_damage_distribution=total,
        expected_damage_per_plan=expected,
    )
