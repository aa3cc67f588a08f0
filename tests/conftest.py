"""Core test fixtures for attack odds tests."""

import pytest

from attack_odds.combat import (
    AttackCheckInput,
    AttackDamageRequest,
    AttackRollRuleConfig,
    DamageModel,
)
from attack_odds.config import get_settings
from attack_odds.dice import AdvantageType, ConstantTerm, parse_dice_expression


@pytest.fixture
def d20_rules() -> AttackRollRuleConfig:
    """Standard d20: natural 1 misses, natural 20 crits."""
    return AttackRollRuleConfig(
        die_sides=20,
        auto_miss_faces=frozenset({1}),
        auto_crit_faces=frozenset({20}),
    )


@pytest.fixture
def make_attack(d20_rules):
    """Factory for attack inputs with a flat or dice bonus."""

    def _make(
        armor_class: int = 15,
        bonus: str | int = 5,
        advantage_state: AdvantageType = AdvantageType.NORMAL,
        rules: AttackRollRuleConfig | None = None,
        halfling_lucky: bool = False,
    ) -> AttackCheckInput:
        if isinstance(bonus, int):
            expression = (ConstantTerm(value=bonus),)
        else:
            expression = parse_dice_expression(bonus)
        return AttackCheckInput(
            armor_class=armor_class,
            attack_bonus_expression=expression,
            advantage_state=advantage_state,
            rules=rules or d20_rules,
            halfling_lucky=halfling_lucky,
        )

    return _make


@pytest.fixture
def make_request(make_attack):
    """Factory for attack + damage requests."""

    def _make(damage: str = "1d8+3", armor_class: int = 15, bonus: str | int = 5, **damage_fields):
        return AttackDamageRequest(
            attack=make_attack(armor_class=armor_class, bonus=bonus),
            damage=DamageModel(expression=parse_dice_expression(damage), **damage_fields),
        )

    return _make


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Ensure every test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
