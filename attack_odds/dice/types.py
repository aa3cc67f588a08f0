"""Dice expression type definitions.

Immutable dataclasses for the terms of a parsed dice expression.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Literal, Union


TermSign = Literal[1, -1]


class AdvantageType(str, Enum):
    """How many rolls are made and which one is kept."""

    NORMAL = "normal"
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"


@dataclass(frozen=True)
class DiceTerm:
    """A group of identical dice like 2d6 or -1d4.

    Attributes:
        count: Number of dice rolled.
        sides: Faces on each die.
        sign: +1 to add the dice, -1 to subtract them.
    """

    count: int
    sides: int
    sign: TermSign = 1


@dataclass(frozen=True)
class ConstantTerm:
    """A flat bonus or penalty. Negative values subtract."""

    value: int


ExpressionComponent = Union[DiceTerm, ConstantTerm]


@dataclass(frozen=True)
class ParsedDiceExpression:
    """A parsed dice expression.

    Attributes:
        source: The text as it was given.
        normalized: Canonical text form (e.g., "1d8+3").
        components: Terms in source order.
    """

    source: str
    normalized: str
    components: tuple[ExpressionComponent, ...]


DiceExpressionInput = Union[ParsedDiceExpression, Sequence[ExpressionComponent]]


def as_components(expression: DiceExpressionInput) -> tuple[ExpressionComponent, ...]:
    """Unwrap a parsed expression or component sequence into its terms."""
    if isinstance(expression, ParsedDiceExpression):
        return expression.components
    return tuple(expression)
