"""Damage distributions for an attack.

Builds separate hit and critical damage distributions and weights them by the
attack's outcome probabilities.

Rules encoded here:
- Critical hits multiply dice, never flat bonuses
- Reroll-low changes each die's distribution before dice are summed
- Damage advantage/disadvantage keeps the best/worst of several whole-expression
  totals, not the best face of each die
- Resistance, vulnerability and immunity apply to the summed damage
"""

import logging
import math

from attack_odds.combat.attack import calculate_attack_outcome_probabilities
from attack_odds.combat.types import (
    AttackDamageRequest,
    AttackDamageResult,
    DamageModifier,
)
from attack_odds.dice.types import (
    AdvantageType,
    ConstantTerm,
    DiceExpressionInput,
    DiceTerm,
    as_components,
)
from attack_odds.prob import (
    ProbabilityDistribution,
    constant,
    convolve,
    expectation,
    from_entries,
    map_outcomes,
    max_of_independent,
    min_of_independent,
    repeat_convolve,
    require_integer,
    shift,
    uniform_die,
)


logger = logging.getLogger(__name__)


def build_reroll_low_die_distribution(
    sides: int,
    reroll_low_threshold: int | None = None,
) -> ProbabilityDistribution:
    """One die that is rerolled once when it shows the threshold or lower.

    Low faces are only kept after rolling low twice (t / sides^2); high faces
    are reached directly or after a low first roll (1/sides + t / sides^2).
    Without a positive threshold this is a fair die.

    Examples:
        >>> d = build_reroll_low_die_distribution(6, 2)
        >>> round(d.probability_of(1), 4), round(d.probability_of(6), 4)
        (0.0556, 0.2222)
    """
    if reroll_low_threshold is None or reroll_low_threshold <= 0:
        return uniform_die(sides)

    threshold = min(sides, math.floor(reroll_low_threshold))
    low = threshold / (sides * sides)
    high = 1 / sides + low

    return from_entries(
        (face, low if face <= threshold else high) for face in range(1, sides + 1)
    )


def build_damage_distribution(
    expression: DiceExpressionInput,
    critical_dice_multiplier: int,
    reroll_low_threshold: int | None = None,
) -> ProbabilityDistribution:
    """Distribution of a damage expression's total.

    Args:
        expression: Damage dice and flat bonuses.
        critical_dice_multiplier: Dice count multiplier (1 for a normal hit).
        reroll_low_threshold: Reroll each die once at or below this face.

    Returns:
        ProbabilityDistribution of the raw damage total.

    Raises:
        InvalidArgumentError: If the multiplier or a dice count is not a positive integer.

    Examples:
        >>> from attack_odds.dice import parse_dice_expression
        >>> crit = build_damage_distribution(parse_dice_expression("1d6+2"), 2)
        >>> crit.min_outcome, crit.max_outcome
        (4, 14)
    """
    multiplier = require_integer(critical_dice_multiplier, "critical_dice_multiplier", 1)

    distribution = constant(0)

    for component in as_components(expression):
        if isinstance(component, ConstantTerm):
            # Flat bonuses are never multiplied
            distribution = shift(distribution, component.value)
        elif isinstance(component, DiceTerm):
            die = build_reroll_low_die_distribution(component.sides, reroll_low_threshold)
            count = require_integer(component.count, "count", 1)
            dice = repeat_convolve(die, count * multiplier)
            if component.sign < 0:
                dice = map_outcomes(dice, lambda outcome: -outcome)
            distribution = convolve(distribution, dice)
        else:
            raise TypeError(f"Unknown expression component: {component!r}")

    return distribution


def apply_damage_dice_roll_mode(
    distribution: ProbabilityDistribution,
    mode: AdvantageType,
    roll_count: int = 2,
) -> ProbabilityDistribution:
    """Keep the best or worst of several independent damage totals.

    Args:
        distribution: Distribution of one full damage roll.
        mode: ADVANTAGE keeps the highest total, DISADVANTAGE the lowest.
        roll_count: Number of full rolls made.

    Returns:
        The order statistic, or distribution unchanged for NORMAL or a single roll.
    """
    if mode == AdvantageType.NORMAL or roll_count <= 1:
        return distribution

    if mode == AdvantageType.DISADVANTAGE:
        return min_of_independent(distribution, roll_count)

    return max_of_independent(distribution, roll_count)


def apply_damage_modifier(raw_damage: float, modifier: DamageModifier) -> int:
    """Apply resistance, vulnerability or immunity to a damage total.

    Damage is floored to a non-negative integer first.

    Examples:
        >>> apply_damage_modifier(5, DamageModifier.RESISTANT)
        2
        >>> apply_damage_modifier(-3, DamageModifier.VULNERABLE)
        0
    """
    sanitized = max(0, math.floor(raw_damage))

    if modifier == DamageModifier.IMMUNE:
        return 0
    if modifier == DamageModifier.RESISTANT:
        return sanitized // 2
    if modifier == DamageModifier.VULNERABLE:
        return sanitized * 2
    return sanitized


def apply_modifier_to_distribution(
    distribution: ProbabilityDistribution,
    modifier: DamageModifier,
) -> ProbabilityDistribution:
    """Apply a damage modifier to every outcome of a summed distribution."""
    return map_outcomes(distribution, lambda outcome: apply_damage_modifier(outcome, modifier))


def resolve_damage_roll_count(mode: AdvantageType, count: float | None) -> int:
    """Number of full damage rolls: explicit count (at least 1), else 1 or 2 by mode."""
    if count is not None:
        return max(1, math.floor(count))
    return 1 if mode == AdvantageType.NORMAL else 2


def _build_branch_distribution(
    request: AttackDamageRequest,
    critical_dice_multiplier: int,
    mode: AdvantageType,
    roll_count: int,
) -> ProbabilityDistribution:
    damage = request.damage
    raw = build_damage_distribution(
        damage.expression,
        critical_dice_multiplier,
        damage.reroll_low_threshold,
    )
    rolled = apply_damage_dice_roll_mode(raw, mode, roll_count)
    return apply_modifier_to_distribution(rolled, damage.modifier)


def calculate_attack_damage(request: AttackDamageRequest) -> AttackDamageResult:
    """Outcome chances and damage distributions for one attack.

    The hit and critical branches are built independently so reroll-low and
    multi-roll apply at each branch's own dice count.

    Args:
        request: Attack roll and damage model.

    Returns:
        AttackDamageResult with per-branch and combined distributions.

    Raises:
        InvalidArgumentError: If the die rules or multiplier are invalid.
    """
    probabilities = calculate_attack_outcome_probabilities(request.attack)

    mode = request.damage.dice_roll_mode or AdvantageType.NORMAL
    roll_count = resolve_damage_roll_count(mode, request.damage.damage_roll_count)

    hit_distribution = _build_branch_distribution(request, 1, mode, roll_count)
    critical_distribution = _build_branch_distribution(
        request, request.damage.critical_dice_multiplier, mode, roll_count
    )

    weighted = [(0, probabilities.miss)]
    weighted.extend(
        (entry.outcome, entry.probability * probabilities.hit)
        for entry in hit_distribution.entries
    )
    weighted.extend(
        (entry.outcome, entry.probability * probabilities.critical)
        for entry in critical_distribution.entries
    )
    total_distribution = from_entries(weighted)

    expected_on_hit = expectation(hit_distribution)
    expected_on_critical = expectation(critical_distribution)
    expected_per_attack = (
        probabilities.hit * expected_on_hit + probabilities.critical * expected_on_critical
    )

    logger.debug(
        f"Attack damage: E[hit]={expected_on_hit:.3f} E[crit]={expected_on_critical:.3f} "
        f"E[attack]={expected_per_attack:.3f} (rolls={roll_count})"
    )

    return AttackDamageResult(
        probabilities=probabilities,
        hit_damage_distribution=hit_distribution,
        critical_damage_distribution=critical_distribution,
        total_damage_distribution=total_distribution,
        expected_damage_on_hit=expected_on_hit,
        expected_damage_on_critical=expected_on_critical,
        expected_damage_per_attack=expected_per_attack,
    )


def expected_single_die_mean(sides: int) -> float:
    """Mean of a fair die."""
    return (sides + 1) / 2


def expected_gwf_single_die_mean(sides: int) -> float:
    """Mean of a die whose 1s and 2s are rerolled once."""
    return ((sides + 1) * (sides + 2) - 6) / (2 * sides)


def expected_max_of_two_single_die_mean(sides: int) -> float:
    """Mean of the higher of two fair dice."""
    return ((sides + 1) * (4 * sides - 1)) / (6 * sides)
