"""Dice expressions.

Provides the term types shared by every calculation and a parser for
dice notation.

Usage:
    >>> from attack_odds.dice import parse_dice_expression
    >>> expression = parse_dice_expression("1d8+3")
    >>> expression.normalized
    '1d8+3'
"""

# Types
from attack_odds.dice.types import (
    AdvantageType,
    ConstantTerm,
    DiceExpressionInput,
    DiceTerm,
    ExpressionComponent,
    ParsedDiceExpression,
    TermSign,
    as_components,
)

# Parser
from attack_odds.dice.parser import (
    DiceParseError,
    DiceParseIssue,
    DiceParseResult,
    format_dice_expression,
    is_dice_expression,
    parse_dice_expression,
    try_parse_dice_expression,
)

__all__ = [
    # Types
    "AdvantageType",
    "ConstantTerm",
    "DiceExpressionInput",
    "DiceTerm",
    "ExpressionComponent",
    "ParsedDiceExpression",
    "TermSign",
    "as_components",
    # Parser
    "DiceParseError",
    "DiceParseIssue",
    "DiceParseResult",
    "format_dice_expression",
    "is_dice_expression",
    "parse_dice_expression",
    "try_parse_dice_expression",
]
