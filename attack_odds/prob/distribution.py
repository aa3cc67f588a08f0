"""Exact discrete probability distributions.

Distributions are immutable value objects mapping integer outcomes to
probabilities. Every operation returns a new distribution; nothing is sampled.

Sums of independent variables are computed on a dense, offset-indexed list of
probabilities and converted back to the sparse ordered form afterwards, with
near-zero entries pruned.
"""

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from functools import cached_property
from types import MappingProxyType


# Entries at or below this magnitude are dropped when leaving dense form
PROBABILITY_EPSILON = 1e-15


class InvalidArgumentError(ValueError):
    """Precondition violation at a calculation boundary."""

    pass


@dataclass(frozen=True)
class DistributionEntry:
    """A single outcome and its probability."""

    outcome: int
    probability: float


@dataclass(frozen=True)
class ProbabilityDistribution:
    """Discrete distribution over integer outcomes.

    Attributes:
        entries: Entries in ascending outcome order, outcomes unique.
        total_probability: Sum of all entry probabilities.
    """

    entries: tuple[DistributionEntry, ...]
    total_probability: float

    @cached_property
    def map(self) -> Mapping[int, float]:
        """Read-only mapping of outcome to probability."""
        return MappingProxyType({entry.outcome: entry.probability for entry in self.entries})

    @property
    def outcomes(self) -> tuple[int, ...]:
        """Outcomes in ascending order."""
        return tuple(entry.outcome for entry in self.entries)

    @property
    def probabilities(self) -> tuple[float, ...]:
        """Probabilities in outcome order."""
        return tuple(entry.probability for entry in self.entries)

    @property
    def min_outcome(self) -> int | None:
        return self.entries[0].outcome if self.entries else None

    @property
    def max_outcome(self) -> int | None:
        return self.entries[-1].outcome if self.entries else None

    def probability_of(self, outcome: int) -> float:
        """Probability of exactly this outcome (0.0 if absent)."""
        return self.map.get(outcome, 0.0)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[DistributionEntry]:
        return iter(self.entries)


@dataclass(frozen=True)
class _Dense:
    """Contiguous probabilities starting at ``offset``."""

    offset: int
    values: list[float]


def require_integer(value: object, name: str, minimum: int) -> int:
    """Reject anything that is not an integral value >= minimum.

    Integral floats such as 3.0 are accepted; bools, NaN, infinities and
    fractional values are not.
    """
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise InvalidArgumentError(f"{name} must be an integer >= {minimum}, got {value!r}")
    return value


def _normalize(entries: Iterable[tuple[int, float]]) -> ProbabilityDistribution:
    """Merge duplicate outcomes by summing, drop negligible ones and sort ascending."""
    merged: dict[int, float] = {}
    for outcome, probability in entries:
        merged[outcome] = merged.get(outcome, 0.0) + probability

    ordered = tuple(
        DistributionEntry(outcome=outcome, probability=merged[outcome])
        for outcome in sorted(merged)
        if abs(merged[outcome]) > PROBABILITY_EPSILON
    )
    total = 0.0
    for entry in ordered:
        total += entry.probability

    return ProbabilityDistribution(entries=ordered, total_probability=total)


def _to_dense(distribution: ProbabilityDistribution) -> _Dense:
    if not distribution.entries:
        return _Dense(offset=0, values=[0.0])

    first = distribution.entries[0].outcome
    last = distribution.entries[-1].outcome
    values = [0.0] * (last - first + 1)
    for entry in distribution.entries:
        values[entry.outcome - first] = entry.probability

    return _Dense(offset=first, values=values)


def _from_dense(dense: _Dense) -> ProbabilityDistribution:
    return _normalize(
        (dense.offset + index, probability)
        for index, probability in enumerate(dense.values)
    )


def _convolve_dense(left: _Dense, right: _Dense) -> _Dense:
    values = [0.0] * (len(left.values) + len(right.values) - 1)

    for left_index, left_probability in enumerate(left.values):
        if abs(left_probability) <= PROBABILITY_EPSILON:
            continue
        for right_index, right_probability in enumerate(right.values):
            if abs(right_probability) <= PROBABILITY_EPSILON:
                continue
            values[left_index + right_index] += left_probability * right_probability

    return _Dense(offset=left.offset + right.offset, values=values)


def from_entries(
    entries: Iterable[DistributionEntry | tuple[int, float]],
) -> ProbabilityDistribution:
    """Build a distribution from (outcome, probability) pairs.

    Duplicate outcomes are summed. No renormalization is performed, so the
    caller is responsible for supplying probabilities that sum to 1.
    """
    pairs = []
    for entry in entries:
        if isinstance(entry, DistributionEntry):
            pairs.append((entry.outcome, entry.probability))
        else:
            outcome, probability = entry
            pairs.append((outcome, probability))
    return _normalize(pairs)


def constant(value: int) -> ProbabilityDistribution:
    """Distribution with all mass on ``value``."""
    return _normalize([(value, 1.0)])


def uniform_die(sides: int) -> ProbabilityDistribution:
    """Fair die with faces 1..sides.

    Raises:
        InvalidArgumentError: If sides is not a positive integer.
    """
    sides = require_integer(sides, "sides", 1)
    probability = 1 / sides
    return _normalize((face, probability) for face in range(1, sides + 1))


def shift(distribution: ProbabilityDistribution, amount: int) -> ProbabilityDistribution:
    """Translate every outcome by ``amount``."""
    return _normalize(
        (entry.outcome + amount, entry.probability) for entry in distribution.entries
    )


def scale_outcomes(distribution: ProbabilityDistribution, factor: int) -> ProbabilityDistribution:
    """Multiply every outcome by ``factor``."""
    return _normalize(
        (entry.outcome * factor, entry.probability) for entry in distribution.entries
    )


def map_outcomes(
    distribution: ProbabilityDistribution,
    transform: Callable[[int], int],
) -> ProbabilityDistribution:
    """Apply ``transform`` to every outcome.

    Outcomes that collide after the transform have their probabilities summed.
    """
    return _normalize(
        (transform(entry.outcome), entry.probability) for entry in distribution.entries
    )


def convolve(
    left: ProbabilityDistribution,
    right: ProbabilityDistribution,
) -> ProbabilityDistribution:
    """Distribution of the sum of two independent variables."""
    return _from_dense(_convolve_dense(_to_dense(left), _to_dense(right)))


def multiply_independent(
    left: ProbabilityDistribution,
    right: ProbabilityDistribution,
) -> ProbabilityDistribution:
    """Distribution of the product of two independent variables."""
    return _normalize(
        (left_entry.outcome * right_entry.outcome, left_entry.probability * right_entry.probability)
        for left_entry in left.entries
        for right_entry in right.entries
    )


def repeat_convolve(base: ProbabilityDistribution, times: int) -> ProbabilityDistribution:
    """Sum of ``times`` independent copies of ``base``.

    Convolves sequentially, one copy at a time. ``times`` of 0 gives the
    constant 0.

    Raises:
        InvalidArgumentError: If times is not a non-negative integer.
    """
    times = require_integer(times, "times", 0)
    if times == 0:
        return constant(0)

    dense_base = _to_dense(base)
    result = _Dense(offset=0, values=[1.0])
    for _ in range(times):
        result = _convolve_dense(result, dense_base)

    return _from_dense(result)


def expectation(distribution: ProbabilityDistribution) -> float:
    """Mean outcome."""
    total = 0.0
    for entry in distribution.entries:
        total += entry.outcome * entry.probability
    return total


def probability_at_least(distribution: ProbabilityDistribution, threshold: float) -> float:
    """P(X >= threshold)."""
    total = 0.0
    for entry in distribution.entries:
        if entry.outcome >= threshold:
            total += entry.probability
    return total


def probability_at_most(distribution: ProbabilityDistribution, threshold: float) -> float:
    """P(X <= threshold)."""
    total = 0.0
    for entry in distribution.entries:
        if entry.outcome <= threshold:
            total += entry.probability
    return total


def max_of_independent(distribution: ProbabilityDistribution, count: int) -> ProbabilityDistribution:
    """Distribution of the maximum of ``count`` i.i.d. copies.

    P(max = x) = F(x)^n - F(x-)^n, with F accumulated in ascending order.

    Raises:
        InvalidArgumentError: If count is not a positive integer.
    """
    count = require_integer(count, "count", 1)
    if count == 1:
        return distribution

    pairs = []
    previous_cdf = 0.0
    cumulative = 0.0
    for entry in distribution.entries:
        cumulative += entry.probability
        pairs.append((entry.outcome, cumulative**count - previous_cdf**count))
        previous_cdf = cumulative

    return _normalize(pairs)


def min_of_independent(distribution: ProbabilityDistribution, count: int) -> ProbabilityDistribution:
    """Distribution of the minimum of ``count`` i.i.d. copies.

    P(min = x) = (1 - F(x-))^n - (1 - F(x))^n.

    Raises:
        InvalidArgumentError: If count is not a positive integer.
    """
    count = require_integer(count, "count", 1)
    if count == 1:
        return distribution

    pairs = []
    previous_cdf = 0.0
    cumulative = 0.0
    for entry in distribution.entries:
        cumulative += entry.probability
        pairs.append((entry.outcome, (1 - previous_cdf) ** count - (1 - cumulative) ** count))
        previous_cdf = cumulative

    return _normalize(pairs)
