"""Value types flowing through parse -> roll -> aggregate.

All records are frozen; sequences are stored as tuples.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone


class RollMode(str, enum.Enum):
    """How many times a single-group expression is rolled and which side is kept."""

    none = "none"
    advantage = "advantage"
    disadvantage = "disadvantage"


@dataclass(frozen=True)
class DiceGroup:
    """One `NdX` term: roll `count` dice with `sides` faces."""

    count: int
    sides: int

    @property
    def notation(self) -> str:
        return f"{self.count}d{self.sides}"


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


@dataclass(frozen=True)
class ParsedExpression:
    original: str
    dice_groups: tuple[DiceGroup, ...] = ()
    modifiers: tuple[int, ...] = ()
    errors: tuple[FieldError, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.errors and bool(self.dice_groups)

    @property
    def modifier_total(self) -> int:
        return sum(self.modifiers)

    @classmethod
    def invalid(cls, original: str, errors: list[FieldError]) -> ParsedExpression:
        return cls(original=original, errors=tuple(errors))


@dataclass(frozen=True)
class RollResult:
    """Individual dice of one group, in draw order."""

    notation: str
    rolls: tuple[int, ...]
    subtotal: int


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AlternateRoll:
    """The non-selected side of an advantage/disadvantage roll.

    Has no `alternate` field of its own.
    """

    expression: str
    results: tuple[RollResult, ...]
    modifiers: tuple[int, ...]
    total: int
    mode: RollMode = RollMode.none
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class RollRecord:
    """Top-level result of one roll request."""

    expression: str
    results: tuple[RollResult, ...]
    modifiers: tuple[int, ...]
    total: int
    mode: RollMode = RollMode.none
    alternate: AlternateRoll | None = None
    timestamp: datetime = field(default_factory=_utcnow)
