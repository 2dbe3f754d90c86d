"""Roll a single dice group against an injected random source."""

from __future__ import annotations

from dicebox.expression import DiceGroup, RollResult
from dicebox.rng import RandomSource, checked_draw


def roll_group(group: DiceGroup, source: RandomSource) -> RollResult:
    """Roll every die in group and return the individual values and their sum.

    Args:
        group: The dice group to roll.
        source: Random source; each die is one draw in [1, group.sides].

    Returns:
        RollResult with rolls in draw order and notation "{count}d{sides}".

    Raises:
        RandomSourceError: If the source fails or breaks its range contract.
    """
    rolls = tuple(checked_draw(source, 1, group.sides) for _ in range(group.count))
    return RollResult(notation=group.notation, rolls=rolls, subtotal=sum(rolls))
