"""Saving-throw damage.

Scalar estimates only: the chance a target makes its save and the mean damage
given caller-supplied fail and success damage means.
"""

import logging
import math

from attack_odds.combat.attack import clamp01
from attack_odds.combat.types import SaveCheckInput, SaveDamageResult


logger = logging.getLogger(__name__)


def calculate_save_success_probability(save: SaveCheckInput) -> float:
    """Chance a d20 save meets the difficulty class.

    The net threshold DC - bonus is rounded up before it is compared against
    the die.

    Examples:
        >>> calculate_save_success_probability(SaveCheckInput(difficulty_class=15, save_bonus=3))
        0.45
    """
    threshold = save.difficulty_class - save.save_bonus
    return clamp01((21 - math.ceil(threshold)) / 20)


def calculate_save_expected_damage(
    save: SaveCheckInput,
    fail_damage_mean: float,
    success_damage_mean: float,
) -> SaveDamageResult:
    """Mean damage of a save-or-suffer effect.

    Args:
        save: Difficulty class and the target's save bonus.
        fail_damage_mean: Mean damage when the save fails.
        success_damage_mean: Mean damage when the save succeeds.

    Returns:
        SaveDamageResult with both save chances and the weighted mean.
    """
    success = calculate_save_success_probability(save)
    fail = 1 - success
    expected = fail * fail_damage_mean + success * success_damage_mean

    logger.debug(
        f"Save DC {save.difficulty_class} vs {save.save_bonus:+}: "
        f"success={success:.3f} E[damage]={expected:.3f}"
    )

    return SaveDamageResult(
        save_success_probability=success,
        save_fail_probability=fail,
        expected_damage=expected,
    )
