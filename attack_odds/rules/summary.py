"""Plain-text summaries of calculation results."""

from attack_odds.combat import AttackOutcomeProbabilities


def format_percent(probability: float, precision: int = 2) -> str:
    """Format a probability as a percentage (0.455 -> '45.50%')."""
    return f"{probability * 100:.{precision}f}%"


def summarize_probabilities(
    probabilities: AttackOutcomeProbabilities,
    precision: int = 2,
) -> str:
    """One-line summary of attack outcome chances.

    Examples:
        >>> summarize_probabilities(AttackOutcomeProbabilities(miss=0.45, hit=0.5, critical=0.05))
        'miss 45.00% | hit 50.00% | crit 5.00%'
    """
    miss = format_percent(probabilities.miss, precision)
    hit = format_percent(probabilities.hit, precision)
    critical = format_percent(probabilities.critical, precision)
    return f"miss {miss} | hit {hit} | crit {critical}"
