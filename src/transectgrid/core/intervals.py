from __future__ import annotations

import math

import numpy as np

from transectgrid.core.errors import DegenerateSequenceError

# Absorbs float noise in (end - start) / step so exactly reachable ends are kept.
_COUNT_EPS = 1e-10


def _end_tolerance(start: float, end: float, step: float) -> float:
    return 4 * np.finfo(float).eps * max(abs(start), abs(end), step)


def interval_count(start: float, end: float, step: float) -> int:
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    if start > end:
        raise DegenerateSequenceError(f"Interval start {start} lies beyond end {end}")
    n = int(math.floor((end - start) / step + _COUNT_EPS)) + 1
    # The count fudge must not admit a final term beyond end
    if n > 1 and start + step * (n - 1) > end + _end_tolerance(start, end, step):
        n -= 1
    return n


def sequence(start: float, end: float, step: float) -> np.ndarray:
    """
    Offsets start, start+step, ... truncated at the last term <= end.

    end is only included when an integer number of steps reaches it:
      sequence(0.003, 0.1, 0.006) -> 17 terms, last 0.099
    """
    n = interval_count(start, end, step)
    return np.minimum(start + step * np.arange(n, dtype=float), end)
