"""Linear interpolation over stored time points."""

from __future__ import annotations

from collections.abc import Sequence
from itertools import pairwise


def approximate_delay_linearly(
    delayed_time: float,
    history: Sequence[Sequence[float]],
    rk_order: int,
    times: Sequence[float],
    cycle: int,
    print_interval: int,
    err_zero: bool,
) -> float:
    """Interpolate a delayed value at ``delayed_time``.

    ``times`` holds the first ``cycle`` stored time points and ``history``
    the per-step stage values; when ``err_zero`` is set, history rows are
    ``print_interval`` apart. Returns 0.0 when no interval contains the time.
    """
    stride = print_interval if err_zero else 1
    for i, (t0, t1) in enumerate(pairwise(times[:cycle]), start=1):
        if t0 <= delayed_time < t1:
            v0 = history[(i - 1) * stride][rk_order]
            v1 = history[i * stride][rk_order]
            grad = (v1 - v0) / (t1 - t0)
            return v0 + grad * (delayed_time - t0)
    return 0.0


def approximate_print_result_linearly(
    value: float,
    temp_value: float,
    value_time: float,
    temp_value_time: float,
    fixed_time: float,
) -> float:
    """Estimate the value at ``fixed_time`` along the line through two samples."""
    grad = (temp_value - value) / (value_time - temp_value_time)
    return value + grad * (fixed_time - temp_value_time)