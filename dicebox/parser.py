"""Dice notation parser.

Supports sums of dice groups and flat modifiers: NdX, NdX+Z, NdX+MdY-Z.
Examples: 2d6, 1d20+5, 2d6 + 1d4 + 3.

Parsing happens in two passes. `tokenize` turns a normalized string into a
stream of DiceToken / ModifierToken / InvalidToken, and `parse` validates that
stream into a ParsedExpression. Malformed input never raises; it yields an
invalid ParsedExpression listing every problem found. Only a dice group over
the count or sides ceiling raises (ResourceLimitError), immediately.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from dicebox.config import settings
from dicebox.errors import ResourceLimitError
from dicebox.expression import DiceGroup, FieldError, ParsedExpression

logger = logging.getLogger(__name__)

_DIGITS = frozenset("0123456789")
_SIGNS = frozenset("+-")
_TOKEN_STARTS = _SIGNS | _DIGITS

# Longest literal that always fits a signed 64-bit integer.
_MAX_LITERAL_DIGITS = 18


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DiceToken:
    count: int
    sides: int
    text: str


@dataclass(frozen=True)
class ModifierToken:
    value: int
    text: str


@dataclass(frozen=True)
class InvalidToken:
    text: str


Token = DiceToken | ModifierToken | InvalidToken


def normalize(raw: str) -> str:
    """Trim, collapse internal whitespace to single spaces and lower-case."""
    return " ".join(raw.split()).lower()


def _read_digits(text: str, pos: int) -> int:
    """Return the index just past the run of ASCII digits starting at pos."""
    while pos < len(text) and text[pos] in _DIGITS:
        pos += 1
    return pos


def _skip_spaces(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] == " ":
        pos += 1
    return pos


def _literal(sign: str, digits: str) -> int | None:
    """Convert a signed digit run to int, or None if it is too long to be a sane value."""
    digits = digits.lstrip("0") or "0"
    if len(digits) > _MAX_LITERAL_DIGITS:
        return None
    value = int(digits)
    return -value if sign == "-" else value


def _scan_invalid(text: str, start: int, pos: int) -> tuple[InvalidToken, int]:
    """Extend an unrecognised run up to the next whitespace, sign or digit."""
    pos = max(pos, start + 1)
    while pos < len(text) and text[pos] != " " and text[pos] not in _TOKEN_STARTS:
        pos += 1
    return InvalidToken(text[start:pos]), pos


def _scan_token(text: str, start: int) -> tuple[Token, int]:
    """Scan one token beginning at start; return it with the index past it."""
    pos = start
    sign = ""
    if text[pos] in _SIGNS:
        sign = text[pos]
        pos = _skip_spaces(text, pos + 1)

    digits_end = _read_digits(text, pos)
    if digits_end == pos:
        return _scan_invalid(text, start, pos)
    count_digits = text[pos:digits_end]
    pos = digits_end

    if pos < len(text) and text[pos] == "d":
        pos += 1
        sides_sign = ""
        if pos < len(text) and text[pos] == "-":
            sides_sign = text[pos]
            pos += 1
        sides_end = _read_digits(text, pos)
        if sides_end == pos:
            return _scan_invalid(text, start, pos)
        sides_digits = text[pos:sides_end]
        count = _literal(sign, count_digits)
        sides = _literal(sides_sign, sides_digits)
        # Over-long literals are always beyond any resource limit.
        if count is None:
            count = int(sign + "9" * (_MAX_LITERAL_DIGITS + 1))
        if sides is None:
            sides = int(sides_sign + "9" * (_MAX_LITERAL_DIGITS + 1))
        return DiceToken(count=count, sides=sides, text=text[start:sides_end]), sides_end

    if not sign:
        # A bare number is neither a dice group nor a signed modifier.
        return _scan_invalid(text, start, pos)

    value = _literal(sign, count_digits)
    if value is None:
        return InvalidToken(text[start:pos]), pos
    return ModifierToken(value=value, text=text[start:pos]), pos


def tokenize(text: str) -> list[Token]:
    """Split normalized notation into tokens, left to right.

    Whitespace separates tokens but is otherwise ignored, so "2d6 + 1d4"
    and "2d6+1d4" produce the same stream.
    """
    tokens: list[Token] = []
    pos = 0
    while pos < len(text):
        if text[pos] == " ":
            pos += 1
            continue
        token, pos = _scan_token(text, pos)
        tokens.append(token)
    return tokens


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _check_limits(token: DiceToken, max_dice: int, max_sides: int) -> None:
    if token.count > max_dice:
        raise ResourceLimitError(
            "count", max_dice, f"Dice count exceeds maximum of {max_dice}"
        )
    if token.sides > max_sides:
        raise ResourceLimitError(
            "sides", max_sides, f"Die sides exceed maximum of {max_sides}"
        )


def _literal_texts(token: DiceToken) -> tuple[str, str]:
    """Return the count and sides literals as the caller wrote them."""
    head, _, sides = token.text.partition("d")
    return head.replace(" ", "").lstrip("+"), sides


def _invalid_token_error(token: InvalidToken) -> FieldError:
    stripped = token.text.lstrip("+- ")
    signed = token.text[0] in _SIGNS
    if signed and stripped and set(stripped) <= _DIGITS:
        digits = stripped.lstrip("0")
        if len(digits) > _MAX_LITERAL_DIGITS:
            return FieldError("modifier", f"Modifier out of range: {token.text}")
    return FieldError("expression", f"Unrecognized token '{token.text}'")


def parse(
    raw: str,
    *,
    max_dice: int | None = None,
    max_sides: int | None = None,
) -> ParsedExpression:
    """Parse dice notation into a ParsedExpression.

    Args:
        raw: Dice notation string, e.g. "2d6+1d4+3". Case and whitespace
            are not significant.
        max_dice: Per-group dice count ceiling. Defaults to settings.max_dice.
        max_sides: Per-group sides ceiling. Defaults to settings.max_sides.

    Returns:
        A ParsedExpression. Check `.valid`; when False, `.errors` lists every
        problem and no dice groups or modifiers are carried.

    Raises:
        ResourceLimitError: If any dice group exceeds max_dice or max_sides.
    """
    if max_dice is None:
        max_dice = settings.max_dice
    if max_sides is None:
        max_sides = settings.max_sides

    text = normalize(raw)
    if not text:
        return ParsedExpression.invalid(
            raw, [FieldError("expression", "Expression cannot be empty")]
        )

    tokens = tokenize(text)
    if not any(isinstance(t, (DiceToken, ModifierToken)) for t in tokens):
        return ParsedExpression.invalid(
            raw, [FieldError("expression", "Invalid dice notation format")]
        )

    dice_groups: list[DiceGroup] = []
    modifiers: list[int] = []
    errors: list[FieldError] = []

    for token in tokens:
        if isinstance(token, DiceToken):
            count_text, sides_text = _literal_texts(token)
            if token.count <= 0:
                errors.append(
                    FieldError("count", f"Invalid dice count: {count_text}. Must be positive.")
                )
            if token.sides <= 0:
                errors.append(
                    FieldError("sides", f"Invalid die sides: {sides_text}. Must be positive.")
                )
            _check_limits(token, max_dice, max_sides)
            if token.count > 0 and token.sides > 0:
                dice_groups.append(DiceGroup(count=token.count, sides=token.sides))
        elif isinstance(token, ModifierToken):
            modifiers.append(token.value)
        else:
            errors.append(_invalid_token_error(token))

    if not dice_groups:
        errors.append(
            FieldError("expression", "Expression must contain at least one dice group")
        )

    if errors:
        logger.debug("Rejected dice expression %r: %d error(s)", raw, len(errors))
        return ParsedExpression.invalid(raw, errors)

    return ParsedExpression(
        original=raw,
        dice_groups=tuple(dice_groups),
        modifiers=tuple(modifiers),
    )
