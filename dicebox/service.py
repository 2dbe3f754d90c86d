"""Roll aggregation and advantage/disadvantage selection.

`roll` is the single entry point used by the HTTP layer: it parses the
expression, rolls each dice group and adds the modifiers.

Advantage / disadvantage
------------------------
Only expressions with exactly one dice group qualify. The group is rolled
twice with independent draws and the modifiers are added to both sides
before comparing totals:

  advantage     → keep the larger total
  disadvantage  → keep the smaller total
  tie           → keep the first roll

The kept side becomes the RollRecord; the other is attached as `alternate`.
"""

from __future__ import annotations

import logging

from dicebox.errors import ValidationError
from dicebox.expression import (
    AlternateRoll,
    FieldError,
    ParsedExpression,
    RollMode,
    RollRecord,
    RollResult,
)
from dicebox.parser import parse
from dicebox.rng import RandomSource, default_source
from dicebox.roller import roll_group

logger = logging.getLogger(__name__)


def coerce_mode(mode: RollMode | str) -> RollMode:
    """Return mode as a RollMode, raising ValidationError for unknown values."""
    if isinstance(mode, RollMode):
        return mode
    try:
        return RollMode(mode)
    except ValueError:
        allowed = ", ".join(m.value for m in RollMode)
        message = f"Invalid advantageMode. Must be one of: {allowed}"
        raise ValidationError(message, [FieldError("advantageMode", message)]) from None


def _total(results: tuple[RollResult, ...], parsed: ParsedExpression) -> int:
    return sum(r.subtotal for r in results) + parsed.modifier_total


def select_roll(first: int, second: int, mode: RollMode) -> int:
    """Return 0 to keep the first total or 1 to keep the second.

    Ties keep the first roll.

    Raises:
        ValueError: If mode is RollMode.none.
    """
    if mode == RollMode.advantage:
        return 0 if first >= second else 1
    if mode == RollMode.disadvantage:
        return 0 if first <= second else 1
    raise ValueError(f"select_roll needs advantage or disadvantage, got {mode.value!r}")


def _roll_plain(parsed: ParsedExpression, source: RandomSource) -> RollRecord:
    results = tuple(roll_group(group, source) for group in parsed.dice_groups)
    return RollRecord(
        expression=parsed.original,
        results=results,
        modifiers=parsed.modifiers,
        total=_total(results, parsed),
    )


def _roll_twice(parsed: ParsedExpression, mode: RollMode, source: RandomSource) -> RollRecord:
    if len(parsed.dice_groups) != 1:
        message = "Advantage/disadvantage only supports single dice group (e.g., 1d20)"
        raise ValidationError(message, [FieldError("advantageMode", message)])

    group = parsed.dice_groups[0]
    candidates = [(roll_group(group, source),) for _ in range(2)]
    totals = [_total(results, parsed) for results in candidates]
    kept = select_roll(totals[0], totals[1], mode)
    other = 1 - kept

    alternate = AlternateRoll(
        expression=parsed.original,
        results=candidates[other],
        modifiers=parsed.modifiers,
        total=totals[other],
        mode=mode,
    )
    return RollRecord(
        expression=parsed.original,
        results=candidates[kept],
        modifiers=parsed.modifiers,
        total=totals[kept],
        mode=mode,
        alternate=alternate,
    )


def roll(
    expression: str,
    mode: RollMode | str = RollMode.none,
    *,
    source: RandomSource | None = None,
) -> RollRecord:
    """Evaluate a dice expression.

    Args:
        expression: Dice notation, e.g. "2d6+1d4+3".
        mode: RollMode or its string value.
        source: Random source to draw from. Defaults to the system CSPRNG.

    Returns:
        The RollRecord. For advantage/disadvantage its `alternate` holds the
        roll that was not kept.

    Raises:
        ValidationError: If the expression is invalid (carrying every parser
            error), the mode is unknown, or advantage/disadvantage is used with
            more than one dice group.
        ResourceLimitError: If a dice group exceeds the configured ceilings.
        RandomSourceError: If the random source fails.
    """
    mode = coerce_mode(mode)
    if source is None:
        source = default_source()

    parsed = parse(expression)
    if not parsed.valid:
        raise ValidationError.from_errors(list(parsed.errors))

    if mode == RollMode.none:
        record = _roll_plain(parsed, source)
    else:
        record = _roll_twice(parsed, mode, source)

    logger.debug(
        "Rolled %r (%s): total %d", expression, record.mode.value, record.total
    )
    return record
