"""Tests for attack-odds CLI commands."""

from typer.testing import CliRunner

from attack_odds.cli.main import app


runner = CliRunner()


class TestAttackCommand:
    """Tests for the attack command."""

    def test_shows_outcome_chances(self):
        """Verify AC 15 with +5 prints the standard odds."""
        result = runner.invoke(app, ["attack", "15", "5"])
        assert result.exit_code == 0
        assert "miss 45.00% | hit 50.00% | crit 5.00%" in result.stdout

    def test_advantage(self):
        """Verify advantage raises the crit chance."""
        result = runner.invoke(app, ["attack", "15", "5", "--advantage"])
        assert result.exit_code == 0
        assert "crit 9.75%" in result.stdout

    def test_advantage_and_disadvantage_cancel(self):
        """Verify both flags give a normal roll."""
        result = runner.invoke(app, ["attack", "15", "5", "-a", "-d"])
        assert result.exit_code == 0
        assert "crit 5.00%" in result.stdout

    def test_crit_threshold(self):
        """Verify a 19-20 crit range."""
        result = runner.invoke(app, ["attack", "15", "5", "--crit-threshold", "19"])
        assert result.exit_code == 0
        assert "crit 10.00%" in result.stdout

    def test_invalid_bonus(self):
        """Verify a bad expression exits with an error."""
        result = runner.invoke(app, ["attack", "15", "1d"])
        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_precision_from_environment(self):
        """Verify display precision comes from settings."""
        result = runner.invoke(
            app, ["attack", "15", "5"], env={"ATTACK_ODDS_DISPLAY_PRECISION": "1"}
        )
        assert result.exit_code == 0
        assert "miss 45.0% | hit 50.0% | crit 5.0%" in result.stdout


class TestDamageCommand:
    """Tests for the damage command."""

    def test_expected_damage(self):
        """Verify 1d6+2 at +5 against AC 15."""
        result = runner.invoke(app, ["damage", "15", "5", "1d6+2"])
        assert result.exit_code == 0
        assert "Expected damage: 3.20" in result.stdout

    def test_repeat(self):
        """Verify repeated attacks add up and show the plan."""
        result = runner.invoke(app, ["damage", "15", "5", "1d6+2", "--repeat", "2"])
        assert result.exit_code == 0
        assert "Attack Plan" in result.stdout
        assert "Expected damage: 6.40" in result.stdout

    def test_off_hand(self):
        """Verify an off-hand attack is added to the plan."""
        result = runner.invoke(app, ["damage", "15", "5", "1d6+2", "--off-hand", "1d6"])
        assert result.exit_code == 0
        assert "Expected damage: 5.30" in result.stdout

    def test_immune_target(self):
        """Verify immunity zeroes the damage."""
        result = runner.invoke(app, ["damage", "15", "5", "1d6+2", "--modifier", "immune"])
        assert result.exit_code == 0
        assert "Expected damage: 0.00" in result.stdout

    def test_show_distribution(self):
        """Verify the distribution table is printed."""
        result = runner.invoke(app, ["damage", "15", "5", "1d4", "-s"])
        assert result.exit_code == 0
        assert "Damage Distribution" in result.stdout

    def test_invalid_crit_multiplier(self):
        """Verify a zero multiplier is rejected."""
        result = runner.invoke(app, ["damage", "15", "5", "1d6", "--crit-multiplier", "0"])
        assert result.exit_code == 1
        assert "critical_dice_multiplier" in result.stdout

    def test_invalid_damage_expression(self):
        """Verify a bad damage expression exits with an error."""
        result = runner.invoke(app, ["damage", "15", "5", "1d6+"])
        assert result.exit_code == 1


class TestSaveCommand:
    """Tests for the save command."""

    def test_half_on_success(self):
        """Verify DC 15 against +3 with 8d6 and half on a save."""
        result = runner.invoke(app, ["save", "15", "3", "8d6", "--half"])
        assert result.exit_code == 0
        assert "45.00%" in result.stdout
        assert "21.70" in result.stdout

    def test_nothing_on_success(self):
        """Verify save-or-nothing damage."""
        result = runner.invoke(app, ["save", "13", "2", "10"])
        assert result.exit_code == 0
        assert "5.00" in result.stdout


class TestParseCommand:
    """Tests for the parse command."""

    def test_valid_expression(self):
        """Verify the normalized form and terms are shown."""
        result = runner.invoke(app, ["parse", "2d6 + 3"])
        assert result.exit_code == 0
        assert "2d6+3" in result.stdout
        assert "2 x d6" in result.stdout

    def test_invalid_expression(self):
        """Verify parse errors exit with code 1."""
        result = runner.invoke(app, ["parse", "1d6+"])
        assert result.exit_code == 1
        assert "index 3" in result.stdout
