from __future__ import annotations

from .base import PercentageCalculator


class StandardPercentageCalculator(PercentageCalculator):
    """present / total * 100, rounded half-up; 0 when nothing was marked.

    Integer arithmetic so 2.5 -> 3 (builtin round() would give 2).
    """

    def percentage(self, present: int, total: int) -> int:
        present = int(present)
        total = int(total)
        if total <= 0:
            return 0
        return (present * 200 + total) // (2 * total)
