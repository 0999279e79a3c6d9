"""Number allocation for set numbers and patient codes."""

from __future__ import annotations

from typing import Iterable


def next_available(taken: Iterable[int]) -> int:
    """
    Smallest positive integer not present in ``taken``.

    Gaps left by deleted rows are reused, so ``{1, 2, 4}`` yields 3.
    Non-positive values in ``taken`` are ignored.
    """

    used = {value for value in taken if value > 0}
    candidate = 1
    while candidate in used:
        candidate += 1
    return candidate
