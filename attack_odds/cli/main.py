"""Main CLI application for attack odds."""

import logging
from dataclasses import replace
from typing import Optional

import typer

from attack_odds.cli.display import (
    console,
    display_damage_summary,
    display_distribution,
    display_error,
    display_info,
    display_outcome_probabilities,
    display_plan_summary,
    display_save_result,
    display_success,
)
from attack_odds.combat import (
    AttackCheckInput,
    AttackRollRuleConfig,
    DamageModel,
    DamageModifier,
    SaveCheckInput,
    build_damage_distribution,
    calculate_attack_outcome_probabilities,
    calculate_save_expected_damage,
)
from attack_odds.config import Settings, get_settings
from attack_odds.dice import (
    AdvantageType,
    ConstantTerm,
    DiceParseError,
    DiceTerm,
    parse_dice_expression,
)
from attack_odds.prob import InvalidArgumentError, expectation
from attack_odds.rules import (
    RuleContext,
    RuleEffect,
    build_critical_faces,
    make_critical_threshold_effect,
    make_damage_dice_roll_mode_effect,
    make_damage_modifier_effect,
    make_damage_roll_count_effect,
    make_dual_wield_template,
    make_reroll_low_effect,
    resolve_attack_template,
    summarize_probabilities,
)


# Create main app
app = typer.Typer(
    name="attack-odds",
    help="Exact hit, critical and damage odds for tabletop attacks",
    add_completion=False,
)


def _rules_from_settings(settings: Settings) -> AttackRollRuleConfig:
    return AttackRollRuleConfig(
        die_sides=settings.die_sides,
        auto_miss_faces=frozenset(settings.auto_miss_faces),
        auto_crit_faces=frozenset(settings.auto_crit_faces),
    )


def _advantage_state(advantage: bool, disadvantage: bool) -> AdvantageType:
    if advantage and disadvantage:
        # Both cancel out
        return AdvantageType.NORMAL
    if advantage:
        return AdvantageType.ADVANTAGE
    if disadvantage:
        return AdvantageType.DISADVANTAGE
    return AdvantageType.NORMAL


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log calculation details"),
) -> None:
    """Attack Odds - exact attack and damage probabilities.

    Use 'attack-odds attack 15 5' for hit chances, or
    'attack-odds damage 15 5 1d8+3' for damage.
    """
    settings = get_settings()
    level = "DEBUG" if verbose else settings.effective_log_level
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def attack(
    armor_class: int = typer.Argument(..., help="Target armor class"),
    bonus: str = typer.Argument(..., help="Attack bonus, e.g. 5 or 5+1d4"),
    advantage: bool = typer.Option(False, "--advantage", "-a", help="Roll the attack with advantage"),
    disadvantage: bool = typer.Option(False, "--disadvantage", "-d", help="Roll the attack with disadvantage"),
    lucky: bool = typer.Option(False, "--lucky", help="Reroll natural 1s once"),
    crit_threshold: Optional[int] = typer.Option(None, "--crit-threshold", "-c", help="Crit on this face or higher (17-20)"),
) -> None:
    """Show miss, hit and critical chances for one attack roll."""
    settings = get_settings()

    try:
        rules = _rules_from_settings(settings)
        if crit_threshold is not None:
            rules = replace(rules, auto_crit_faces=build_critical_faces(crit_threshold))

        check = AttackCheckInput(
            armor_class=armor_class,
            attack_bonus_expression=parse_dice_expression(bonus),
            advantage_state=_advantage_state(advantage, disadvantage),
            rules=rules,
            halfling_lucky=lucky,
        )
        probabilities = calculate_attack_outcome_probabilities(check)
    except (DiceParseError, InvalidArgumentError) as e:
        display_error(str(e))
        raise typer.Exit(1)

    console.print()
    display_outcome_probabilities(probabilities, settings.display_precision)
    display_info(summarize_probabilities(probabilities, settings.display_precision))


@app.command()
def damage(
    armor_class: int = typer.Argument(..., help="Target armor class"),
    bonus: str = typer.Argument(..., help="Attack bonus, e.g. 5 or 5+1d4"),
    damage_dice: str = typer.Argument(..., help="Damage dice, e.g. 1d8+3"),
    advantage: bool = typer.Option(False, "--advantage", "-a", help="Roll the attack with advantage"),
    disadvantage: bool = typer.Option(False, "--disadvantage", "-d", help="Roll the attack with disadvantage"),
    lucky: bool = typer.Option(False, "--lucky", help="Reroll natural 1s once"),
    crit_threshold: Optional[int] = typer.Option(None, "--crit-threshold", "-c", help="Crit on this face or higher (17-20)"),
    crit_multiplier: Optional[int] = typer.Option(None, "--crit-multiplier", help="Dice multiplier on a critical hit"),
    modifier: DamageModifier = typer.Option(DamageModifier.NORMAL, "--modifier", "-m", help="Target resistance/vulnerability/immunity"),
    damage_mode: AdvantageType = typer.Option(AdvantageType.NORMAL, "--damage-mode", help="Keep the best or worst damage roll"),
    damage_rolls: Optional[int] = typer.Option(None, "--damage-rolls", help="Damage rolls made for --damage-mode"),
    reroll_low: Optional[int] = typer.Option(None, "--reroll-low", help="Reroll damage dice once at or below this face"),
    repeat: int = typer.Option(1, "--repeat", "-r", help="Number of identical attacks"),
    off_hand: Optional[str] = typer.Option(None, "--off-hand", help="Add an off-hand attack with this damage"),
    show_distribution: bool = typer.Option(False, "--show-distribution", "-s", help="Print the total damage distribution"),
) -> None:
    """Show hit chances and the damage distribution of an attack plan."""
    settings = get_settings()

    effects: list[RuleEffect] = []
    if crit_threshold is not None:
        effects.append(make_critical_threshold_effect("crit-threshold", crit_threshold))
    if modifier != DamageModifier.NORMAL:
        effects.append(make_damage_modifier_effect("damage-modifier", modifier))
    if damage_mode != AdvantageType.NORMAL:
        effects.append(make_damage_dice_roll_mode_effect("damage-mode", damage_mode))
    if damage_rolls is not None:
        effects.append(make_damage_roll_count_effect("damage-rolls", damage_rolls))
    if reroll_low is not None:
        effects.append(make_reroll_low_effect("reroll-low", reroll_low))

    try:
        base = RuleContext(
            attack=AttackCheckInput(
                armor_class=armor_class,
                attack_bonus_expression=parse_dice_expression(bonus),
                advantage_state=_advantage_state(advantage, disadvantage),
                rules=_rules_from_settings(settings),
                halfling_lucky=lucky,
            ),
            damage=DamageModel(
                expression=parse_dice_expression(damage_dice),
                critical_dice_multiplier=(
                    crit_multiplier if crit_multiplier is not None else settings.critical_dice_multiplier
                ),
            ),
        )

        if off_hand is not None:
            template = make_dual_wield_template(
                main_hand_effects=effects,
                off_hand_effects=effects,
                off_hand_damage_patch={"expression": parse_dice_expression(off_hand)},
                main_hand_repeat=repeat,
                off_hand_repeat=1,
            )
        else:
            template = make_dual_wield_template(main_hand_effects=effects, main_hand_repeat=repeat)

        resolved = resolve_attack_template(base, template)
    except (DiceParseError, InvalidArgumentError) as e:
        display_error(str(e))
        raise typer.Exit(1)

    precision = settings.display_precision
    first = resolved.steps[0].result

    console.print()
    display_outcome_probabilities(first.probabilities, precision)
    display_damage_summary(first, precision)

    plan = resolved.total_result
    if len(plan.steps) > 1 or plan.steps[0].repeat > 1:
        display_plan_summary(plan, precision)

    if show_distribution:
        display_distribution(
            plan.total_damage_distribution,
            precision=precision,
            max_rows=settings.distribution_rows,
        )

    display_success(f"Expected damage: {plan.expected_damage_per_plan:.{precision}f}")


@app.command()
def save(
    difficulty_class: float = typer.Argument(..., help="Save difficulty class"),
    save_bonus: float = typer.Argument(..., help="Target's save bonus"),
    fail_damage: str = typer.Argument(..., help="Damage on a failed save, e.g. 8d6"),
    half_on_success: bool = typer.Option(False, "--half-on-success", "--half", help="Half damage on a successful save"),
) -> None:
    """Show save chances and expected damage of a save-or-suffer effect."""
    settings = get_settings()

    try:
        expression = parse_dice_expression(fail_damage)
        fail_mean = expectation(build_damage_distribution(expression, 1))
    except (DiceParseError, InvalidArgumentError) as e:
        display_error(str(e))
        raise typer.Exit(1)

    success_mean = fail_mean / 2 if half_on_success else 0.0
    result = calculate_save_expected_damage(
        SaveCheckInput(difficulty_class=difficulty_class, save_bonus=save_bonus),
        fail_mean,
        success_mean,
    )

    console.print()
    display_save_result(result, settings.display_precision)


@app.command()
def parse(
    expression: str = typer.Argument(..., help="Dice expression to check"),
) -> None:
    """Check a dice expression and show its terms."""
    try:
        parsed = parse_dice_expression(expression)
    except DiceParseError as e:
        display_error(str(e))
        raise typer.Exit(1)

    display_success(parsed.normalized)
    for component in parsed.components:
        if isinstance(component, DiceTerm):
            sign = "-" if component.sign < 0 else "+"
            display_info(f"{sign} {component.count} x d{component.sides}")
        elif isinstance(component, ConstantTerm):
            display_info(f"{'-' if component.value < 0 else '+'} {abs(component.value)}")


if __name__ == "__main__":
    app()
