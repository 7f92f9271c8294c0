"""Simulation results and queries over them."""

from __future__ import annotations

import math
import os
import sys
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

DBL_MIN = sys.float_info.min
DBL_MAX = sys.float_info.max


class _Named(Protocol):
    id: str
    name: str


@dataclass
class SimulationResult:
    """Time courses of species, parameters and compartments.

    ``values_sp``, ``values_param`` and ``values_comp`` hold one row per
    output time point and one column per object.
    """

    column_name_time: str = "time"
    column_name_sp: list[str] = field(default_factory=list)
    column_name_param: list[str] = field(default_factory=list)
    column_name_comp: list[str] = field(default_factory=list)
    values_time: list[float] = field(default_factory=list)
    values_sp: list[list[float]] = field(default_factory=list)
    values_param: list[list[float]] = field(default_factory=list)
    values_comp: list[list[float]] = field(default_factory=list)
    values_time_fordelay: list[float] = field(default_factory=list)
    num_of_delay_rows: int = 0

    @property
    def num_of_rows(self) -> int:
        """Number of stored time points."""
        return len(self.values_time)

    @property
    def num_of_columns_sp(self) -> int:
        return len(self.column_name_sp)

    @property
    def num_of_columns_param(self) -> int:
        return len(self.column_name_param)

    @property
    def num_of_columns_comp(self) -> int:
        return len(self.column_name_comp)


def search_max(result: SimulationResult, column: int) -> float:
    """Largest value of a species column; ``DBL_MIN`` when there are no rows."""
    rows = result.values_sp[: result.num_of_rows]
    return max((row[column] for row in rows), default=DBL_MIN)


def _local_extreme(
    result: SimulationResult,
    column: int,
    transition_time: float,
    sim_time: float,
    initial: float,
    better: Callable[[float, float], bool],
) -> float:
    times = result.values_time
    n = result.num_of_rows
    best = initial
    for i, row in enumerate(result.values_sp[:n]):
        value = row[column]
        t = times[i]
        previous = times[i - 1] if i > 0 else -math.inf
        # The first point inside the window restarts the search.
        if transition_time < t < sim_time and transition_time > previous:
            best = value
        # Candidates are accepted when the following time point lies in the window.
        if i + 1 < n:
            following = times[i + 1]
            if better(value, best) and transition_time < following < sim_time:
                best = value
    return best


def search_local_max(
    result: SimulationResult, column: int, transition_time: float, sim_time: float
) -> float:
    """Maximum of a species column between ``transition_time`` and ``sim_time``."""
    return _local_extreme(
        result, column, transition_time, sim_time, DBL_MIN, lambda v, best: best < v
    )


def search_local_min(
    result: SimulationResult, column: int, transition_time: float, sim_time: float
) -> float:
    """Minimum of a species column between ``transition_time`` and ``sim_time``."""
    return _local_extreme(
        result, column, transition_time, sim_time, DBL_MAX, lambda v, best: best > v
    )


def _column_lines(objects: Iterable[_Named]) -> list[str]:
    return [
        f"column {column} : ID={obj.id} Name={obj.name}\n"
        for column, obj in enumerate(objects, start=2)
    ]


def write_result_list(
    path: str | os.PathLike[str],
    species: Iterable[_Named],
    parameters: Iterable[_Named],
    compartments: Iterable[_Named],
) -> None:
    """Write the list of result columns to ``path``.

    Raises :class:`OSError` when the file cannot be opened.
    """
    with Path(path).open("w", encoding="utf-8") as fp:
        fp.write("Result : Species List\n")
        fp.writelines(_column_lines(species))
        fp.write("\n")
        fp.write("Result : Parameter List\n")
        fp.writelines(_column_lines(parameters))
        fp.write("Result : Compartment List\n")
        fp.writelines(_column_lines(compartments))