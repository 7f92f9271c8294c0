"""Initial filling of the histories that delayed expressions read from."""

from __future__ import annotations

from collections.abc import Iterable
from itertools import chain

from .model import Compartment, Parameter, Reaction, Species, StateVariable


def initialize_delay_values(
    species: Iterable[Species],
    parameters: Iterable[Parameter],
    compartments: Iterable[Compartment],
    reactions: Iterable[Reaction],
    sim_time: float,
    dt: float,
    last_call: bool,
    stages: int,
) -> None:
    """Fill the delay history of every object that keeps one with its ``value``.

    The first ``stages`` entries of a row are set (4 for the fixed step-size
    integrator, 6 for the variable one). With ``last_call`` every row up to
    ``sim_time / dt`` is filled; otherwise only the first row.
    """
    if stages < 1:
        raise ValueError("stages must be positive")
    rows = max(0, int(sim_time / dt + 1)) if last_call else 1
    objects: Iterable[StateVariable] = chain(
        species,
        parameters,
        compartments,
        chain.from_iterable(re.references() for re in reactions),
    )
    for obj in objects:
        history = obj.delay_val
        if history is None:
            continue
        for row in history[:rows]:
            row[:stages] = [obj.value] * stages