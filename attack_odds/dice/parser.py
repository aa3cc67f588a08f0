"""Dice expression parser.

Parses sums of dice and constants like 1d20+5, 2d6 - 1d4 + 3, d8, 1d8,1d6.
A comma separates terms the same way '+' does.
"""

from dataclasses import dataclass

from attack_odds.dice.types import (
    ConstantTerm,
    DiceExpressionInput,
    DiceTerm,
    ExpressionComponent,
    ParsedDiceExpression,
    TermSign,
    as_components,
)


@dataclass(frozen=True)
class DiceParseIssue:
    """What went wrong and at which character index."""

    message: str
    index: int


class DiceParseError(ValueError):
    """Error parsing dice notation."""

    def __init__(self, issue: DiceParseIssue):
        super().__init__(f"{issue.message} (index {issue.index})")
        self.issue = issue


@dataclass(frozen=True)
class DiceParseResult:
    """Outcome of a non-raising parse.

    Exactly one of value and error is set.
    """

    ok: bool
    value: ParsedDiceExpression | None = None
    error: DiceParseError | None = None


def _skip_whitespace(text: str, index: int) -> int:
    while index < len(text) and text[index].isspace():
        index += 1
    return index


def _read_unsigned_integer(text: str, index: int) -> tuple[int, int] | None:
    """Read a run of ASCII digits. Returns (value, next_index) or None."""
    end = index
    while end < len(text) and text[end] in "0123456789":
        end += 1
    if end == index:
        return None
    return int(text[index:end]), end


def _format_component(component: ExpressionComponent) -> str:
    if isinstance(component, DiceTerm):
        return f"{component.count}d{component.sides}"
    if isinstance(component, ConstantTerm):
        return str(abs(component.value))
    raise TypeError(f"Unknown expression component: {component!r}")


def _is_negative(component: ExpressionComponent) -> bool:
    if isinstance(component, DiceTerm):
        return component.sign < 0
    if isinstance(component, ConstantTerm):
        return component.value < 0
    raise TypeError(f"Unknown expression component: {component!r}")


def format_dice_expression(expression: DiceExpressionInput) -> str:
    """Render terms in canonical form.

    Examples:
        >>> format_dice_expression([DiceTerm(1, 8), ConstantTerm(3)])
        '1d8+3'
        >>> format_dice_expression([])
        '0'
    """
    components = as_components(expression)
    if not components:
        return "0"

    fragments = []
    for index, component in enumerate(components):
        body = _format_component(component)
        negative = _is_negative(component)
        if index == 0:
            fragments.append(f"-{body}" if negative else body)
        else:
            fragments.append(f"{'-' if negative else '+'}{body}")

    return "".join(fragments)


def parse_dice_expression(text: str) -> ParsedDiceExpression:
    """Parse dice notation into its terms.

    Args:
        text: Dice notation (e.g., "1d20+5", "2d6 - 1d4", "d8").

    Returns:
        ParsedDiceExpression with source, normalized text and terms.

    Raises:
        DiceParseError: If the notation is invalid.

    Examples:
        >>> parse_dice_expression("2d6 + 3").normalized
        '2d6+3'
        >>> parse_dice_expression("-1d4").components
        (DiceTerm(count=1, sides=4, sign=-1),)
    """
    index = 0
    first_term = True
    pending_sign: TermSign = 1
    components: list[ExpressionComponent] = []

    while True:
        index = _skip_whitespace(text, index)

        if index >= len(text):
            if first_term:
                raise DiceParseError(DiceParseIssue("Expression cannot be empty", 0))
            raise DiceParseError(
                DiceParseIssue("Expression cannot end with an operator", len(text) - 1)
            )

        # Only the first term may carry its own sign
        if first_term and text[index] in "+-":
            pending_sign = -1 if text[index] == "-" else 1
            index = _skip_whitespace(text, index + 1)

        term_start = index
        count_token = _read_unsigned_integer(text, index)
        count = None
        if count_token is not None:
            count, index = count_token

        if index < len(text) and text[index] in "dD":
            index += 1
            sides_token = _read_unsigned_integer(text, index)
            if sides_token is None:
                raise DiceParseError(DiceParseIssue("Missing number of die sides", index))

            sides, next_index = sides_token
            dice_count = 1 if count is None else count

            if dice_count <= 0:
                raise DiceParseError(
                    DiceParseIssue("Number of dice must be greater than 0", term_start)
                )
            if sides <= 0:
                raise DiceParseError(
                    DiceParseIssue("Number of die sides must be greater than 0", index)
                )

            components.append(DiceTerm(count=dice_count, sides=sides, sign=pending_sign))
            index = next_index
        elif count is not None:
            components.append(ConstantTerm(value=pending_sign * count))
        else:
            raise DiceParseError(DiceParseIssue("Expected a dice term or a number", index))

        pending_sign = 1
        first_term = False
        index = _skip_whitespace(text, index)

        if index >= len(text):
            break

        operator = text[index]
        if operator not in "+-,":
            raise DiceParseError(DiceParseIssue(f"Unexpected character '{operator}'", index))

        pending_sign = -1 if operator == "-" else 1
        index = _skip_whitespace(text, index + 1)

        if index >= len(text):
            raise DiceParseError(
                DiceParseIssue("Expression cannot end with an operator", len(text) - 1)
            )

    return ParsedDiceExpression(
        source=text,
        normalized=format_dice_expression(components),
        components=tuple(components),
    )


def try_parse_dice_expression(text: str) -> DiceParseResult:
    """Parse without raising.

    Examples:
        >>> try_parse_dice_expression("1d").ok
        False
    """
    try:
        return DiceParseResult(ok=True, value=parse_dice_expression(text))
    except DiceParseError as e:
        return DiceParseResult(ok=False, error=e)


def is_dice_expression(text: str) -> bool:
    """Check whether text is valid dice notation."""
    return try_parse_dice_expression(text).ok
