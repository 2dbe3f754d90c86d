"""FastAPI dependencies for Dicebox."""

from __future__ import annotations

from dicebox.rng import RandomSource, default_source


def get_random_source() -> RandomSource:
    """Return the random source used for request rolls.

    Tests override this via app.dependency_overrides to script dice values.
    """
    return default_source()
