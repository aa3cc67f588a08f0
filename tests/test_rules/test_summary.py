"""Tests for text summaries."""

import pytest

from attack_odds.combat import AttackOutcomeProbabilities
from attack_odds.rules import format_percent, summarize_probabilities


class TestFormatPercent:
    """Tests for format_percent."""

    @pytest.mark.parametrize(
        "probability,precision,expected",
        [(0.455, 2, "45.50%"), (1.0, 0, "100%"), (0.123, 1, "12.3%"), (0.0, 2, "0.00%")],
    )
    def test_format(self, probability, precision, expected):
        """Test percentage formatting."""
        assert format_percent(probability, precision) == expected


class TestSummarizeProbabilities:
    """Tests for summarize_probabilities."""

    def test_summary_line(self):
        """Test the one-line summary."""
        p = AttackOutcomeProbabilities(miss=0.45, hit=0.5, critical=0.05)
        assert summarize_probabilities(p) == "miss 45.00% | hit 50.00% | crit 5.00%"

    def test_precision(self):
        """Test precision is applied to each value."""
        p = AttackOutcomeProbabilities(miss=0.25, hit=0.5, critical=0.25)
        assert summarize_probabilities(p, 0) == "miss 25% | hit 50% | crit 25%"
