"""Attack roll outcome probabilities.

Computes exact miss/hit/critical chances for a single attack die plus a
bonus expression, with advantage/disadvantage, auto-miss and auto-crit faces,
and the reroll-a-natural-1 luck mechanic.
"""

import logging

from attack_odds.combat.types import (
    AttackCheckInput,
    AttackOutcomeProbabilities,
    AttackRollRuleConfig,
)
from attack_odds.dice.types import (
    AdvantageType,
    ConstantTerm,
    DiceExpressionInput,
    DiceTerm,
    as_components,
)
from attack_odds.prob import (
    InvalidArgumentError,
    ProbabilityDistribution,
    constant,
    convolve,
    map_outcomes,
    probability_at_least,
    repeat_convolve,
    require_integer,
    shift,
    uniform_die,
)


logger = logging.getLogger(__name__)


def clamp01(value: float) -> float:
    """Clamp a probability into [0, 1]."""
    return max(0.0, min(1.0, value))


def validate_attack_rules(rules: AttackRollRuleConfig) -> int:
    """Check the attack die configuration and return the die size.

    Raises:
        InvalidArgumentError: If die_sides is not an integer greater than 1.
    """
    return require_integer(rules.die_sides, "die_sides", 2)


def resolve_advantage_state(state: AdvantageType | str) -> AdvantageType:
    """Coerce an advantage state, rejecting unknown values."""
    try:
        return AdvantageType(state)
    except ValueError:
        raise InvalidArgumentError(f"Unknown advantage state: {state!r}") from None


def build_expression_distribution(expression: DiceExpressionInput) -> ProbabilityDistribution:
    """Distribution of a dice expression's total with fair dice.

    Constant terms shift the running total; dice terms are summed copies of a
    fair die, negated when subtracted.
    """
    distribution = constant(0)

    for component in as_components(expression):
        if isinstance(component, ConstantTerm):
            distribution = shift(distribution, component.value)
        elif isinstance(component, DiceTerm):
            count = require_integer(component.count, "count", 1)
            dice = repeat_convolve(uniform_die(component.sides), count)
            if component.sign < 0:
                dice = map_outcomes(dice, lambda outcome: -outcome)
            distribution = convolve(distribution, dice)
        else:
            raise TypeError(f"Unknown expression component: {component!r}")

    return distribution


def build_single_die_face_probabilities(die_sides: int, halfling_lucky: bool) -> list[float]:
    """Per-face probabilities of one attack die, indexed by face (index 0 unused).

    With halfling_lucky a natural 1 is rerolled once: face 1 needs two 1s in a
    row (p^2), every other face is reached directly or after the reroll
    (p + p^2).
    """
    probabilities = [0.0] * (die_sides + 1)
    base = 1 / die_sides

    if not halfling_lucky:
        for face in range(1, die_sides + 1):
            probabilities[face] = base
        return probabilities

    reroll_same_face = base * base
    probabilities[1] = reroll_same_face
    for face in range(2, die_sides + 1):
        probabilities[face] = base + reroll_same_face

    return probabilities


def face_probabilities_for_advantage(
    single_die: list[float],
    advantage_state: AdvantageType,
) -> list[float]:
    """Probability each face is the kept result under the advantage state.

    Advantage keeps the higher of two dice: F(x)^2 - F(x-1)^2.
    Disadvantage keeps the lower: (1 - F(x-1))^2 - (1 - F(x))^2.
    """
    advantage_state = resolve_advantage_state(advantage_state)
    if advantage_state == AdvantageType.NORMAL:
        return list(single_die)

    kept = [0.0] * len(single_die)
    cdf_before = 0.0
    for face in range(1, len(single_die)):
        cdf_at = cdf_before + single_die[face]
        if advantage_state == AdvantageType.ADVANTAGE:
            kept[face] = cdf_at * cdf_at - cdf_before * cdf_before
        else:
            at_least = 1 - cdf_before
            above = 1 - cdf_at
            kept[face] = at_least * at_least - above * above
        cdf_before = cdf_at

    return kept


def calculate_attack_outcome_probabilities(
    attack: AttackCheckInput,
) -> AttackOutcomeProbabilities:
    """Exact miss/hit/critical chances for one attack roll.

    Each face of the attack die is classified in order: auto-miss faces miss,
    auto-crit faces crit, and every other face hits when the bonus
    distribution reaches armor_class - face. A face listed as both auto-miss
    and auto-crit misses.

    Args:
        attack: Armor class, bonus expression, advantage state and die rules.

    Returns:
        AttackOutcomeProbabilities summing to 1.

    Raises:
        InvalidArgumentError: If the die configuration or advantage state is invalid.
    """
    die_sides = validate_attack_rules(attack.rules)
    advantage_state = resolve_advantage_state(attack.advantage_state)

    bonus = build_expression_distribution(attack.attack_bonus_expression)
    auto_miss = set(attack.rules.auto_miss_faces)
    auto_crit = set(attack.rules.auto_crit_faces)

    single_die = build_single_die_face_probabilities(
        die_sides, attack.halfling_lucky is True
    )
    face_chances = face_probabilities_for_advantage(single_die, advantage_state)

    miss = 0.0
    hit = 0.0
    critical = 0.0

    for face in range(1, die_sides + 1):
        chance = face_chances[face]

        if face in auto_miss:
            miss += chance
            continue

        if face in auto_crit:
            critical += chance
            continue

        hit_given_face = probability_at_least(bonus, attack.armor_class - face)
        hit += chance * hit_given_face
        miss += chance * (1 - hit_given_face)

    logger.debug(
        f"Attack vs AC {attack.armor_class} ({advantage_state.value}): "
        f"miss={miss:.4f} hit={hit:.4f} crit={critical:.4f}"
    )

    return AttackOutcomeProbabilities(miss=miss, hit=hit, critical=critical)


def calculate_single_roll_attack_probabilities(
    armor_class: int,
    attack_bonus: int,
    critical_threshold: int,
) -> AttackOutcomeProbabilities:
    """Closed-form d20 chances for a flat bonus.

    A natural 1 always misses and faces at or above critical_threshold crit.

    Examples:
        >>> p = calculate_single_roll_attack_probabilities(15, 5, 20)
        >>> round(p.hit, 2), round(p.critical, 2)
        (0.5, 0.05)
    """
    threshold = armor_class - attack_bonus
    crit_chance = clamp01((21 - critical_threshold) / 20)
    non_crit_chance = clamp01(max(0, critical_threshold - max(2, threshold)) / 20)

    return AttackOutcomeProbabilities(
        miss=clamp01(1 - crit_chance - non_crit_chance),
        hit=non_crit_chance,
        critical=crit_chance,
    )
