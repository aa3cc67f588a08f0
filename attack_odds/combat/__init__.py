"""Attack, damage and saving-throw calculations.

Usage:
    >>> from attack_odds.combat import AttackCheckInput, calculate_attack_outcome_probabilities
    >>> from attack_odds.dice import parse_dice_expression
    >>> attack = AttackCheckInput(armor_class=15, attack_bonus_expression=parse_dice_expression("5"))
    >>> round(calculate_attack_outcome_probabilities(attack).hit, 2)
    0.5
"""

# Types
from attack_odds.combat.types import (
    AttackCheckInput,
    AttackDamagePlanResult,
    AttackDamagePlanStep,
    AttackDamagePlanStepResult,
    AttackDamageRequest,
    AttackDamageResult,
    AttackOutcomeProbabilities,
    AttackRollRuleConfig,
    DamageModel,
    DamageModifier,
    SaveCheckInput,
    SaveDamageResult,
)

# Attack rolls
from attack_odds.combat.attack import (
    build_expression_distribution,
    calculate_attack_outcome_probabilities,
    calculate_single_roll_attack_probabilities,
)

# Damage
from attack_odds.combat.damage import (
    apply_damage_dice_roll_mode,
    apply_damage_modifier,
    apply_modifier_to_distribution,
    build_damage_distribution,
    build_reroll_low_die_distribution,
    calculate_attack_damage,
    expected_gwf_single_die_mean,
    expected_max_of_two_single_die_mean,
    expected_single_die_mean,
    resolve_damage_roll_count,
)

# Plans
from attack_odds.combat.plan import calculate_attack_damage_plan, normalize_step_repeat

# Saving throws
from attack_odds.combat.saves import (
    calculate_save_expected_damage,
    calculate_save_success_probability,
)

__all__ = [
    # Types
    "AttackCheckInput",
    "AttackDamagePlanResult",
    "AttackDamagePlanStep",
    "AttackDamagePlanStepResult",
    "AttackDamageRequest",
    "AttackDamageResult",
    "AttackOutcomeProbabilities",
    "AttackRollRuleConfig",
    "DamageModel",
    "DamageModifier",
    "SaveCheckInput",
    "SaveDamageResult",
    # Attack rolls
    "build_expression_distribution",
    "calculate_attack_outcome_probabilities",
    "calculate_single_roll_attack_probabilities",
    # Damage
    "apply_damage_dice_roll_mode",
    "apply_damage_modifier",
    "apply_modifier_to_distribution",
    "build_damage_distribution",
    "build_reroll_low_die_distribution",
    "calculate_attack_damage",
    "expected_gwf_single_die_mean",
    "expected_max_of_two_single_die_mean",
    "expected_single_die_mean",
    "resolve_damage_roll_count",
    # Plans
    "calculate_attack_damage_plan",
    "normalize_step_repeat",
    # Saving throws
    "calculate_save_expected_damage",
    "calculate_save_success_probability",
]
