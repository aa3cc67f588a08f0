"""Attack and damage calculation type definitions.

Immutable dataclasses for requests and results. Every value is created fresh
per calculation and never mutated.
"""

from dataclasses import dataclass, field
from enum import Enum

from attack_odds.dice.types import AdvantageType, DiceExpressionInput
from attack_odds.prob import ProbabilityDistribution


class DamageModifier(str, Enum):
    """Damage-type interaction applied to final damage."""

    NORMAL = "normal"
    RESISTANT = "resistant"  # halved, rounded down
    VULNERABLE = "vulnerable"  # doubled
    IMMUNE = "immune"  # zero


@dataclass(frozen=True)
class AttackRollRuleConfig:
    """How the attack die behaves.

    Attributes:
        die_sides: Faces on the attack die (must be an integer > 1).
        auto_miss_faces: Natural faces that always miss.
        auto_crit_faces: Natural faces that always crit.
    """

    die_sides: int = 20
    auto_miss_faces: frozenset[int] = field(default_factory=lambda: frozenset({1}))
    auto_crit_faces: frozenset[int] = field(default_factory=lambda: frozenset({20}))


@dataclass(frozen=True)
class AttackCheckInput:
    """One attack roll against an armor class.

    Attributes:
        armor_class: Target's Armor Class.
        attack_bonus_expression: Bonus added to the die (may contain dice).
        advantage_state: Normal, advantage or disadvantage on the attack die.
        rules: Attack die configuration.
        halfling_lucky: Reroll a natural 1 once.
    """

    armor_class: int
    attack_bonus_expression: DiceExpressionInput
    advantage_state: AdvantageType = AdvantageType.NORMAL
    rules: AttackRollRuleConfig = field(default_factory=AttackRollRuleConfig)
    halfling_lucky: bool = False


@dataclass(frozen=True)
class AttackOutcomeProbabilities:
    """Chance of each attack outcome. The three values sum to 1."""

    miss: float
    hit: float
    critical: float

    @property
    def hit_or_critical(self) -> float:
        """Chance the attack connects at all."""
        return self.hit + self.critical


@dataclass(frozen=True)
class DamageModel:
    """Damage dealt when an attack connects.

    Attributes:
        expression: Damage dice and flat bonuses.
        critical_dice_multiplier: Dice count multiplier on a critical hit.
        modifier: Resistance, vulnerability or immunity.
        dice_roll_mode: Roll the whole expression several times and keep the
            best (advantage) or worst (disadvantage) total.
        damage_roll_count: How many totals are rolled for dice_roll_mode.
            Defaults to 2 when a mode is set.
        reroll_low_threshold: Reroll each die once when it shows this or lower.
    """

    expression: DiceExpressionInput
    critical_dice_multiplier: int = 2
    modifier: DamageModifier = DamageModifier.NORMAL
    dice_roll_mode: AdvantageType | None = None
    damage_roll_count: int | None = None
    reroll_low_threshold: int | None = None


@dataclass(frozen=True)
class AttackDamageRequest:
    """An attack roll paired with the damage it deals."""

    attack: AttackCheckInput
    damage: DamageModel


@dataclass(frozen=True)
class AttackDamageResult:
    """Outcome chances and damage distributions for one attack.

    Attributes:
        probabilities: Miss/hit/critical chances.
        hit_damage_distribution: Damage on a normal hit.
        critical_damage_distribution: Damage on a critical hit.
        total_damage_distribution: Damage per attack, misses counted as 0.
        expected_damage_on_hit: Mean of the hit distribution.
        expected_damage_on_critical: Mean of the critical distribution.
        expected_damage_per_attack: hit * E[hit] + critical * E[critical].
    """

    probabilities: AttackOutcomeProbabilities
    hit_damage_distribution: ProbabilityDistribution
    critical_damage_distribution: ProbabilityDistribution
    total_damage_distribution: ProbabilityDistribution
    expected_damage_on_hit: float
    expected_damage_on_critical: float
    expected_damage_per_attack: float


@dataclass(frozen=True)
class AttackDamagePlanStep:
    """A request repeated as independent identical attacks."""

    request: AttackDamageRequest
    repeat: int | None = 1


@dataclass(frozen=True)
class AttackDamagePlanStepResult:
    """Resolved plan step.

    Attributes:
        request: The step's request.
        repeat: Normalized repeat count.
        result: Single-attack result.
        total_damage_distribution: Damage over all repeats of this step.
        expected_damage_total: expected_damage_per_attack * repeat.
    """

    request: AttackDamageRequest
    repeat: int
    result: AttackDamageResult
    total_damage_distribution: ProbabilityDistribution
    expected_damage_total: float


@dataclass(frozen=True)
class AttackDamagePlanResult:
    """Damage over every step of a plan."""

    steps: tuple[AttackDamagePlanStepResult, ...]
    total_damage_distribution: ProbabilityDistribution
    expected_damage_per_plan: float


@dataclass(frozen=True)
class SaveCheckInput:
    """A saving throw against a difficulty class."""

    difficulty_class: float
    save_bonus: float


@dataclass(frozen=True)
class SaveDamageResult:
    """Save chances and the resulting mean damage."""

    save_success_probability: float
    save_fail_probability: float
    expected_damage: float
