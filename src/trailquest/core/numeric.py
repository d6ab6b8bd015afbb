"""
Shared numeric helpers.

- `clamp01`: keep normalized values (snap intensity) within 0..1
- `clamp_int`: keep integer scores (star ratings) inside a closed range
- `round_half_up`: rounding that matches what map clients expect (0.5 goes up)
"""

from __future__ import annotations

import math


def clamp01(x: float) -> float:
    """Clamp a number into the [0.0, 1.0] range."""
    return max(0.0, min(1.0, float(x)))


def clamp_int(x: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, int(x)))


def round_half_up(x: float, decimals: int = 0) -> float:
    """Round `x` to `decimals` places with ties going toward +infinity.

    Python's built-in `round` uses banker's rounding, which would make preview
    coordinates depend on the parity of the last kept digit.
    """
    factor = 10**decimals
    return math.floor(float(x) * factor + 0.5) / factor
