"""Random source abstraction for dice draws.

Production draws come from the operating system CSPRNG through the
`secrets` module, so a sequence of rolls cannot be predicted from earlier
rolls or from timing. Callers receive the source as an argument; tests pass
a scripted stub implementing the same protocol.
"""

from __future__ import annotations

import secrets
from typing import Protocol

from dicebox.errors import DiceboxError


class RandomRangeError(ValueError):
    """Raised when a draw is requested with low > high."""


class RandomSourceError(DiceboxError):
    """Raised when a random source fails or returns an out-of-contract value."""


class RandomSource(Protocol):
    def draw(self, low: int, high: int) -> int:
        """Return a uniformly distributed integer in [low, high]."""
        ...


class SystemRandomSource:
    """Stateless CSPRNG-backed source, safe to share across threads."""

    def draw(self, low: int, high: int) -> int:
        if low > high:
            raise RandomRangeError(f"Invalid range: low {low} > high {high}")
        # randbelow(1) still consumes entropy and always returns 0.
        return low + secrets.randbelow(high - low + 1)


_default_source = SystemRandomSource()


def default_source() -> SystemRandomSource:
    """Return the process-wide production random source."""
    return _default_source


def checked_draw(source: RandomSource, low: int, high: int) -> int:
    """Draw from source and enforce the [low, high] contract.

    Raises:
        RandomRangeError: If low > high.
        RandomSourceError: If the source raises or returns a value outside
            the requested range.
    """
    if low > high:
        raise RandomRangeError(f"Invalid range: low {low} > high {high}")
    try:
        value = source.draw(low, high)
    except RandomRangeError:
        raise
    except Exception as exc:
        raise RandomSourceError(f"Random source failed: {exc}") from exc
    if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
        raise RandomSourceError(
            f"Random source returned {value!r}, expected an integer in [{low}, {high}]"
        )
    return value
