"""Exact discrete probability distributions.

Usage:
    >>> from attack_odds.prob import uniform_die, repeat_convolve, expectation
    >>> two_d6 = repeat_convolve(uniform_die(6), 2)
    >>> round(expectation(two_d6), 6)
    7.0
"""

from attack_odds.prob.distribution import (
    PROBABILITY_EPSILON,
    DistributionEntry,
    InvalidArgumentError,
    ProbabilityDistribution,
    constant,
    convolve,
    expectation,
    from_entries,
    map_outcomes,
    max_of_independent,
    min_of_independent,
    multiply_independent,
    probability_at_least,
    probability_at_most,
    repeat_convolve,
    require_integer,
    scale_outcomes,
    shift,
    uniform_die,
)

__all__ = [
    "PROBABILITY_EPSILON",
    "DistributionEntry",
    "InvalidArgumentError",
    "ProbabilityDistribution",
    "require_integer",
    # Construction
    "constant",
    "uniform_die",
    "from_entries",
    # Transforms
    "shift",
    "scale_outcomes",
    "map_outcomes",
    "convolve",
    "multiply_independent",
    "repeat_convolve",
    "max_of_independent",
    "min_of_independent",
    # Queries
    "expectation",
    "probability_at_least",
    "probability_at_most",
]
