"""Attack templates.

A template is a named list of steps. Each step patches the base context,
applies its own effects and becomes one step of an attack plan.
"""

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from attack_odds.combat import (
    AttackDamagePlanResult,
    AttackDamagePlanStep,
    AttackDamageRequest,
    AttackDamageResult,
    calculate_attack_damage_plan,
)
from attack_odds.rules.effects import (
    RuleContext,
    RuleEffect,
    apply_effects,
    merge_attack,
    merge_damage,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttackTemplateStep:
    """One step of a template.

    Attributes:
        id: Step identifier (e.g., "main-hand").
        repeat: Number of identical attacks; floored, minimum 1.
        attack: AttackCheckInput overrides applied before effects.
        damage: DamageModel overrides applied before effects.
        effects: Effects applied after the overrides.
    """

    id: str
    repeat: float | None = None
    attack: Mapping[str, Any] | None = None
    damage: Mapping[str, Any] | None = None
    effects: tuple[RuleEffect, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AttackTemplate:
    """A named sequence of attack steps."""

    id: str
    name: str
    steps: tuple[AttackTemplateStep, ...]


@dataclass(frozen=True)
class AttackTemplateStepResult:
    """A resolved template step."""

    step: AttackTemplateStep
    context: RuleContext
    request: AttackDamageRequest
    applied_effects: tuple[RuleEffect, ...]
    repeat: int
    result: AttackDamageResult
    expected_damage_total: float


@dataclass(frozen=True)
class ResolveTemplateResult:
    """Every resolved step plus the combined plan."""

    template: AttackTemplate
    steps: tuple[AttackTemplateStepResult, ...]
    total_result: AttackDamagePlanResult


def _step_context(base: RuleContext, step: AttackTemplateStep) -> RuleContext:
    patched = RuleContext(
        attack=merge_attack(base.attack, step.attack),
        damage=merge_damage(base.damage, step.damage),
    )
    return apply_effects(patched, step.effects)


def _step_repeat(repeat: float | None) -> int:
    if repeat is None:
        return 1
    return max(1, math.floor(repeat))


def resolve_attack_template(base: RuleContext, template: AttackTemplate) -> ResolveTemplateResult:
    """Resolve every step of a template into one attack plan.

    Args:
        base: Context every step starts from.
        template: Steps to resolve.

    Returns:
        ResolveTemplateResult with per-step results and the plan total.

    Raises:
        InvalidArgumentError: If any resulting request is invalid.
    """
    contexts = [_step_context(base, step) for step in template.steps]
    requests = [
        AttackDamageRequest(attack=context.attack, damage=context.damage) for context in contexts
    ]
    plan = calculate_attack_damage_plan(
        AttackDamagePlanStep(request=request, repeat=_step_repeat(step.repeat))
        for step, request in zip(template.steps, requests)
    )

    results = tuple(
        AttackTemplateStepResult(
            step=step,
            context=context,
            request=request,
            applied_effects=step.effects,
            repeat=plan_step.repeat,
            result=plan_step.result,
            expected_damage_total=plan_step.expected_damage_total,
        )
        for step, context, request, plan_step in zip(
            template.steps, contexts, requests, plan.steps, strict=True
        )
    )

    logger.debug(
        f"Template '{template.id}': {len(results)} step(s), "
        f"E[damage]={plan.expected_damage_per_plan:.3f}"
    )

    return ResolveTemplateResult(template=template, steps=results, total_result=plan)


def make_dual_wield_template(
    main_hand_effects: Sequence[RuleEffect] = (),
    off_hand_effects: Sequence[RuleEffect] = (),
    off_hand_attack_patch: Mapping[str, Any] | None = None,
    off_hand_damage_patch: Mapping[str, Any] | None = None,
    main_hand_repeat: float | None = None,
    off_hand_repeat: float | None = None,
) -> AttackTemplate:
    """Main-hand attack, plus an off-hand attack when it has effects or a repeat.

    Examples:
        >>> [step.id for step in make_dual_wield_template().steps]
        ['main-hand']
        >>> [step.id for step in make_dual_wield_template(off_hand_repeat=1).steps]
        ['main-hand', 'off-hand']
    """
    steps = [
        AttackTemplateStep(
            id="main-hand",
            repeat=main_hand_repeat,
            effects=tuple(main_hand_effects),
        )
    ]

    if off_hand_effects or off_hand_repeat is not None:
        steps.append(
            AttackTemplateStep(
                id="off-hand",
                repeat=off_hand_repeat,
                attack=off_hand_attack_patch,
                damage=off_hand_damage_patch,
                effects=tuple(off_hand_effects),
            )
        )

    return AttackTemplate(id="dual-wield", name="Dual Wield", steps=tuple(steps))
