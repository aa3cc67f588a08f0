"""Tests for attack outcome probabilities."""

import pytest

from attack_odds.combat.attack import (
    build_expression_distribution,
    build_single_die_face_probabilities,
    calculate_attack_outcome_probabilities,
    calculate_single_roll_attack_probabilities,
    face_probabilities_for_advantage,
)
from attack_odds.combat.types import AttackOutcomeProbabilities, AttackRollRuleConfig
from attack_odds.dice import AdvantageType, ConstantTerm, DiceTerm, parse_dice_expression
from attack_odds.prob import InvalidArgumentError, expectation


def _total(p: AttackOutcomeProbabilities) -> float:
    return p.miss + p.hit + p.critical


class TestFlatBonus:
    """Tests with a flat attack bonus on a d20."""

    def test_standard_attack(self, make_attack):
        """Test AC 15 with +5: need a 10 or better."""
        p = calculate_attack_outcome_probabilities(make_attack(armor_class=15, bonus=5))
        assert p.miss == pytest.approx(0.45)
        assert p.hit == pytest.approx(0.50)
        assert p.critical == pytest.approx(0.05)

    def test_expanded_crit_range(self, make_attack):
        """Test crits on 19-20 take mass from hits only."""
        rules = AttackRollRuleConfig(
            die_sides=20,
            auto_miss_faces=frozenset({1}),
            auto_crit_faces=frozenset({19, 20}),
        )
        p = calculate_attack_outcome_probabilities(make_attack(rules=rules))
        assert p.critical == pytest.approx(0.10)
        assert p.hit == pytest.approx(0.45)
        assert p.miss == pytest.approx(0.45)

    def test_unreachable_armor_class_only_crits(self, make_attack):
        """Test only natural 20s land against huge AC."""
        p = calculate_attack_outcome_probabilities(make_attack(armor_class=100, bonus=0))
        assert p.hit == 0.0
        assert p.critical == pytest.approx(0.05)
        assert p.miss == pytest.approx(0.95)

    def test_trivial_armor_class_still_misses_on_one(self, make_attack):
        """Test a natural 1 misses even when any roll would hit."""
        p = calculate_attack_outcome_probabilities(make_attack(armor_class=-50, bonus=0))
        assert p.miss == pytest.approx(0.05)
        assert p.hit == pytest.approx(0.90)

    def test_no_auto_faces(self, make_attack):
        """Test a die without auto-miss or auto-crit faces."""
        rules = AttackRollRuleConfig(die_sides=20, auto_miss_faces=frozenset(), auto_crit_faces=frozenset())
        p = calculate_attack_outcome_probabilities(make_attack(armor_class=11, bonus=0, rules=rules))
        assert p.hit == pytest.approx(0.5)
        assert p.critical == 0.0

    def test_face_in_both_sets_misses(self, make_attack):
        """Test auto-miss is checked before auto-crit."""
        rules = AttackRollRuleConfig(
            die_sides=20,
            auto_miss_faces=frozenset({1, 20}),
            auto_crit_faces=frozenset({20}),
        )
        p = calculate_attack_outcome_probabilities(make_attack(rules=rules))
        assert p.critical == 0.0
        assert p.miss == pytest.approx(0.50)

    def test_custom_die_size(self, make_attack):
        """Test a d10 attack die."""
        rules = AttackRollRuleConfig(die_sides=10, auto_miss_faces=frozenset({1}), auto_crit_faces=frozenset({10}))
        p = calculate_attack_outcome_probabilities(make_attack(armor_class=8, bonus=2, rules=rules))
        # Faces 6-9 hit, 10 crits
        assert p.hit == pytest.approx(0.4)
        assert p.critical == pytest.approx(0.1)
        assert _total(p) == pytest.approx(1.0)


class TestAdvantage:
    """Tests for advantage and disadvantage on the attack die."""

    def test_advantage_exact_values(self, make_attack):
        """Test keeping the higher of two d20s."""
        p = calculate_attack_outcome_probabilities(
            make_attack(advantage_state=AdvantageType.ADVANTAGE)
        )
        assert p.critical == pytest.approx(39 / 400)
        assert p.hit == pytest.approx(280 / 400)
        assert p.miss == pytest.approx(81 / 400)

    def test_disadvantage_exact_values(self, make_attack):
        """Test keeping the lower of two d20s."""
        p = calculate_attack_outcome_probabilities(
            make_attack(advantage_state=AdvantageType.DISADVANTAGE)
        )
        assert p.critical == pytest.approx(1 / 400)
        assert p.hit == pytest.approx(120 / 400)
        assert p.miss == pytest.approx(279 / 400)

    @pytest.mark.parametrize("armor_class", [8, 12, 15, 18, 22])
    def test_advantage_ordering(self, make_attack, armor_class):
        """Test advantage > normal > disadvantage for landing the attack."""
        chances = [
            calculate_attack_outcome_probabilities(
                make_attack(armor_class=armor_class, bonus=4, advantage_state=state)
            ).hit_or_critical
            for state in (AdvantageType.ADVANTAGE, AdvantageType.NORMAL, AdvantageType.DISADVANTAGE)
        ]
        assert chances[0] > chances[1] > chances[2]

    def test_accepts_plain_string_state(self, make_attack):
        """Test advantage given as a plain string."""
        p = calculate_attack_outcome_probabilities(make_attack(advantage_state="advantage"))
        assert p.critical == pytest.approx(39 / 400)


class TestHalflingLucky:
    """Tests for rerolling natural 1s."""

    def test_face_probabilities(self):
        """Test a 1 needs two 1s in a row."""
        faces = build_single_die_face_probabilities(20, halfling_lucky=True)
        assert faces[1] == pytest.approx(1 / 400)
        assert faces[2] == pytest.approx(21 / 400)
        assert sum(faces) == pytest.approx(1.0)

    def test_lucky_attack(self, make_attack):
        """Test lucky reduces misses and raises hits and crits."""
        p = calculate_attack_outcome_probabilities(make_attack(halfling_lucky=True))
        assert p.miss == pytest.approx(169 / 400)
        assert p.hit == pytest.approx(210 / 400)
        assert p.critical == pytest.approx(21 / 400)

    @pytest.mark.parametrize(
        "state", [AdvantageType.NORMAL, AdvantageType.ADVANTAGE, AdvantageType.DISADVANTAGE]
    )
    def test_lucky_with_advantage_states_sums_to_one(self, make_attack, state):
        """Test lucky combined with each advantage state stays normalized."""
        p = calculate_attack_outcome_probabilities(
            make_attack(bonus="3+1d4", advantage_state=state, halfling_lucky=True)
        )
        assert _total(p) == pytest.approx(1.0, abs=1e-10)


class TestDiceBonus:
    """Tests for attack bonuses containing dice."""

    def test_bonus_distribution(self):
        """Test 5+1d4 spans 6..9."""
        d = build_expression_distribution(parse_dice_expression("5+1d4"))
        assert d.outcomes == (6, 7, 8, 9)
        assert expectation(d) == pytest.approx(7.5)

    def test_subtracted_dice(self):
        """Test 5-1d4 spans 1..4."""
        d = build_expression_distribution((ConstantTerm(5), DiceTerm(1, 4, sign=-1)))
        assert d.outcomes == (1, 2, 3, 4)

    def test_bless_improves_hit_chance(self, make_attack):
        """Test adding 1d4 lands more attacks."""
        flat = calculate_attack_outcome_probabilities(make_attack(bonus=5))
        blessed = calculate_attack_outcome_probabilities(make_attack(bonus="5+1d4"))
        assert blessed.hit > flat.hit
        assert blessed.critical == pytest.approx(flat.critical)

    def test_exact_dice_bonus(self, make_attack):
        """Test 1d4 bonus against AC 12: sum of per-face chances."""
        p = calculate_attack_outcome_probabilities(make_attack(armor_class=12, bonus="1d4"))
        # Faces 11-19 always hit; 10, 9, 8 hit 3/4, 2/4, 1/4 of the time
        assert p.hit == pytest.approx((9 + 0.75 + 0.5 + 0.25) / 20)

    @pytest.mark.parametrize("bonus", ["0", "7", "2+2d6", "10-1d8", "1d4+1d6+3"])
    @pytest.mark.parametrize("armor_class", [5, 14, 21])
    def test_outcomes_sum_to_one(self, make_attack, bonus, armor_class):
        """Test miss + hit + critical = 1."""
        p = calculate_attack_outcome_probabilities(make_attack(armor_class=armor_class, bonus=bonus))
        assert _total(p) == pytest.approx(1.0, abs=1e-10)


class TestRuleValidation:
    """Tests for invalid die configuration."""

    @pytest.mark.parametrize("sides", [1, 0, -20, 2.5, True])
    def test_rejects_invalid_die_sides(self, make_attack, sides):
        """Test die sides must be an integer greater than 1."""
        rules = AttackRollRuleConfig(die_sides=sides)
        with pytest.raises(InvalidArgumentError):
            calculate_attack_outcome_probabilities(make_attack(rules=rules))

    def test_accepts_integral_float_die_sides(self, make_attack):
        """Test 20.0 sides behaves like a d20."""
        rules = AttackRollRuleConfig(die_sides=20.0)
        p = calculate_attack_outcome_probabilities(make_attack(rules=rules))
        assert p.miss == pytest.approx(0.45)
        assert p.hit == pytest.approx(0.50)
        assert p.critical == pytest.approx(0.05)

    def test_rejects_unknown_advantage_state(self, make_attack):
        """Test an unrecognized advantage state is rejected, not treated as disadvantage."""
        with pytest.raises(InvalidArgumentError, match="advantage state"):
            calculate_attack_outcome_probabilities(make_attack(advantage_state="double"))

    def test_face_probabilities_reject_unknown_state(self):
        """Test the per-face helper validates its state too."""
        base = build_single_die_face_probabilities(20, halfling_lucky=False)
        with pytest.raises(InvalidArgumentError):
            face_probabilities_for_advantage(base, "double")

    @pytest.mark.parametrize("count", [0, -1])
    def test_rejects_non_positive_bonus_dice_count(self, count):
        """Test a bonus die term needs at least one die."""
        with pytest.raises(InvalidArgumentError, match="count"):
            build_expression_distribution((DiceTerm(count=count, sides=4), ConstantTerm(5)))


class TestFaceProbabilities:
    """Tests for per-face order statistics."""

    def test_normal_is_unchanged(self):
        """Test normal returns the base faces."""
        base = build_single_die_face_probabilities(6, halfling_lucky=False)
        assert face_probabilities_for_advantage(base, AdvantageType.NORMAL) == base

    @pytest.mark.parametrize("state", [AdvantageType.ADVANTAGE, AdvantageType.DISADVANTAGE])
    def test_order_statistics_sum_to_one(self, state):
        """Test kept-face chances are normalized."""
        base = build_single_die_face_probabilities(20, halfling_lucky=False)
        assert sum(face_probabilities_for_advantage(base, state)) == pytest.approx(1.0)


class TestSingleRollClosedForm:
    """Tests for the closed-form flat-bonus estimate."""

    @pytest.mark.parametrize("armor_class", [5, 10, 15, 20, 25, 30])
    @pytest.mark.parametrize("critical_threshold", [19, 20])
    def test_matches_exact_calculation(self, make_attack, armor_class, critical_threshold):
        """Test closed form agrees with the face-by-face model."""
        rules = AttackRollRuleConfig(
            die_sides=20,
            auto_miss_faces=frozenset({1}),
            auto_crit_faces=frozenset(range(critical_threshold, 21)),
        )
        exact = calculate_attack_outcome_probabilities(
            make_attack(armor_class=armor_class, bonus=5, rules=rules)
        )
        closed = calculate_single_roll_attack_probabilities(armor_class, 5, critical_threshold)

        assert closed.hit == pytest.approx(exact.hit)
        assert closed.critical == pytest.approx(exact.critical)
        assert closed.miss == pytest.approx(exact.miss)

    def test_results_are_clamped(self):
        """Test probabilities stay within [0, 1]."""
        p = calculate_single_roll_attack_probabilities(0, 0, 25)
        assert p.critical == 0.0
        assert 0.0 <= p.miss <= 1.0
