"""Rule effects and attack templates.

Builds attack/damage requests from reusable effects and resolves templates
into attack plans.

Usage:
    from attack_odds.rules import RuleContext, make_attack_bonus_effect, resolve_attack

    resolved = resolve_attack(RuleContext(attack=attack, damage=damage), [make_attack_bonus_effect("bless", 2)])
    resolved.result.expected_damage_per_attack
"""

from attack_odds.rules.effects import (
    BG3_ATTACK_RULES,
    MIN_CRITICAL_THRESHOLD,
    ResolveResult,
    RuleContext,
    RuleEffect,
    RuleMutation,
    append_constant,
    apply_effects,
    build_critical_faces,
    make_attack_bonus_effect,
    make_critical_dice_multiplier_effect,
    make_critical_threshold_effect,
    make_damage_dice_roll_mode_effect,
    make_damage_modifier_effect,
    make_damage_roll_count_effect,
    make_halfling_lucky_effect,
    make_reroll_low_effect,
    merge_attack,
    merge_damage,
    normalize_critical_threshold,
    resolve_attack,
)
from attack_odds.rules.templates import (
    AttackTemplate,
    AttackTemplateStep,
    AttackTemplateStepResult,
    ResolveTemplateResult,
    make_dual_wield_template,
    resolve_attack_template,
)
from attack_odds.rules.summary import format_percent, summarize_probabilities

__all__ = [
    # Effects
    "BG3_ATTACK_RULES",
    "MIN_CRITICAL_THRESHOLD",
    "ResolveResult",
    "RuleContext",
    "RuleEffect",
    "RuleMutation",
    "append_constant",
    "apply_effects",
    "build_critical_faces",
    "make_attack_bonus_effect",
    "make_critical_dice_multiplier_effect",
    "make_critical_threshold_effect",
    "make_damage_dice_roll_mode_effect",
    "make_damage_modifier_effect",
    "make_damage_roll_count_effect",
    "make_halfling_lucky_effect",
    "make_reroll_low_effect",
    "merge_attack",
    "merge_damage",
    "normalize_critical_threshold",
    "resolve_attack",
    # Templates
    "AttackTemplate",
    "AttackTemplateStep",
    "AttackTemplateStepResult",
    "ResolveTemplateResult",
    "make_dual_wield_template",
    "resolve_attack_template",
    # Summaries
    "format_percent",
    "summarize_probabilities",
]
