"""Reusable rule effects.

An effect looks at the current attack/damage context and returns field
overrides. Effects are applied left to right, each seeing the result of the
previous one.
"""

import logging
import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from attack_odds.combat import (
    AttackCheckInput,
    AttackDamageRequest,
    AttackDamageResult,
    AttackRollRuleConfig,
    DamageModel,
    DamageModifier,
    calculate_attack_damage,
)
from attack_odds.dice import (
    AdvantageType,
    ConstantTerm,
    DiceExpressionInput,
    ParsedDiceExpression,
    as_components,
    format_dice_expression,
)


logger = logging.getLogger(__name__)


# Baldur's Gate 3 style attack die: natural 1 misses, natural 20 crits
BG3_ATTACK_RULES = AttackRollRuleConfig(
    die_sides=20,
    auto_miss_faces=frozenset({1}),
    auto_crit_faces=frozenset({20}),
)

# Lowest face a critical threshold can be lowered to
MIN_CRITICAL_THRESHOLD = 17


@dataclass(frozen=True)
class RuleContext:
    """Attack and damage inputs being assembled."""

    attack: AttackCheckInput
    damage: DamageModel


@dataclass(frozen=True)
class RuleMutation:
    """Field overrides produced by an effect.

    Attributes:
        attack: AttackCheckInput field name -> new value.
        damage: DamageModel field name -> new value.
    """

    attack: Mapping[str, Any] | None = None
    damage: Mapping[str, Any] | None = None


@dataclass(frozen=True)
class RuleEffect:
    """A named modification of the rule context."""

    id: str
    description: str
    apply: Callable[[RuleContext], RuleMutation]


@dataclass(frozen=True)
class ResolveResult:
    """A request assembled from effects and its calculated result."""

    request: AttackDamageRequest
    applied_effects: tuple[RuleEffect, ...]
    result: AttackDamageResult


def merge_attack(current: AttackCheckInput, patch: Mapping[str, Any] | None) -> AttackCheckInput:
    """Overlay attack field overrides."""
    if not patch:
        return current
    return replace(current, **patch)


def merge_damage(current: DamageModel, patch: Mapping[str, Any] | None) -> DamageModel:
    """Overlay damage field overrides."""
    if not patch:
        return current
    return replace(current, **patch)


def apply_effects(base: RuleContext, effects: Iterable[RuleEffect]) -> RuleContext:
    """Apply effects in order and return the resulting context."""
    current = base
    for effect in effects:
        mutation = effect.apply(current)
        current = RuleContext(
            attack=merge_attack(current.attack, mutation.attack),
            damage=merge_damage(current.damage, mutation.damage),
        )
        logger.debug(f"Applied effect '{effect.id}': {effect.description}")
    return current


def resolve_attack(base: RuleContext, effects: Iterable[RuleEffect]) -> ResolveResult:
    """Apply effects to a context and calculate the attack.

    Raises:
        InvalidArgumentError: If the resulting request is invalid.
    """
    effects = tuple(effects)
    resolved = apply_effects(base, effects)
    request = AttackDamageRequest(attack=resolved.attack, damage=resolved.damage)

    return ResolveResult(
        request=request,
        applied_effects=effects,
        result=calculate_attack_damage(request),
    )


def append_constant(expression: DiceExpressionInput, value: int) -> DiceExpressionInput:
    """Add a flat term to an expression, keeping its wrapper type."""
    components = as_components(expression) + (ConstantTerm(value=value),)

    if isinstance(expression, ParsedDiceExpression):
        return replace(
            expression,
            components=components,
            normalized=format_dice_expression(components),
        )
    return components


def make_attack_bonus_effect(id: str, bonus_delta: int) -> RuleEffect:
    """Add a flat amount to the attack bonus."""

    def apply(context: RuleContext) -> RuleMutation:
        return RuleMutation(
            attack={
                "attack_bonus_expression": append_constant(
                    context.attack.attack_bonus_expression, bonus_delta
                )
            }
        )

    sign = "+" if bonus_delta >= 0 else ""
    return RuleEffect(id=id, description=f"Attack bonus {sign}{bonus_delta}", apply=apply)


def make_critical_dice_multiplier_effect(id: str, multiplier: int) -> RuleEffect:
    """Set the critical dice multiplier."""
    return RuleEffect(
        id=id,
        description=f"Critical dice x{multiplier}",
        apply=lambda context: RuleMutation(damage={"critical_dice_multiplier": multiplier}),
    )


def make_damage_modifier_effect(id: str, modifier: DamageModifier) -> RuleEffect:
    """Set resistance, vulnerability or immunity."""
    modifier = DamageModifier(modifier)
    return RuleEffect(
        id=id,
        description=f"Damage modifier: {modifier.value}",
        apply=lambda context: RuleMutation(damage={"modifier": modifier}),
    )


def make_damage_dice_roll_mode_effect(id: str, mode: AdvantageType) -> RuleEffect:
    """Roll damage with advantage or disadvantage."""
    mode = AdvantageType(mode)
    return RuleEffect(
        id=id,
        description=f"Damage dice mode: {mode.value}",
        apply=lambda context: RuleMutation(damage={"dice_roll_mode": mode}),
    )


def normalize_critical_threshold(threshold: float) -> int:
    """Clamp a critical threshold to 17..20.

    Examples:
        >>> normalize_critical_threshold(15)
        17
        >>> normalize_critical_threshold(19.5)
        19
    """
    return max(MIN_CRITICAL_THRESHOLD, min(20, math.floor(threshold)))


def build_critical_faces(threshold: float) -> frozenset[int]:
    """Faces from the normalized threshold up to 20."""
    return frozenset(range(normalize_critical_threshold(threshold), 21))


def make_critical_threshold_effect(id: str, threshold: float) -> RuleEffect:
    """Crit on the given face or higher."""

    def apply(context: RuleContext) -> RuleMutation:
        rules = replace(context.attack.rules, auto_crit_faces=build_critical_faces(threshold))
        return RuleMutation(attack={"rules": rules})

    return RuleEffect(
        id=id,
        description=f"Critical threshold: {normalize_critical_threshold(threshold)}+",
        apply=apply,
    )


def make_halfling_lucky_effect(id: str, enabled: bool) -> RuleEffect:
    """Toggle rerolling natural 1s on the attack die."""
    return RuleEffect(
        id=id,
        description="Halfling lucky enabled" if enabled else "Halfling lucky disabled",
        apply=lambda context: RuleMutation(attack={"halfling_lucky": enabled}),
    )


def make_damage_roll_count_effect(id: str, count: int) -> RuleEffect:
    """Set how many full damage rolls the roll mode picks from."""
    return RuleEffect(
        id=id,
        description=f"Damage roll count: {count}",
        apply=lambda context: RuleMutation(damage={"damage_roll_count": count}),
    )


def make_reroll_low_effect(id: str, threshold: int) -> RuleEffect:
    """Reroll damage dice once at or below threshold."""
    return RuleEffect(
        id=id,
        description=f"Reroll damage dice of {threshold} or lower",
        apply=lambda context: RuleMutation(damage={"reroll_low_threshold": threshold}),
    )
