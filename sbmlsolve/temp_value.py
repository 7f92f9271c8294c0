"""State updates after the Runge-Kutta stages and step-size error control."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from itertools import chain

from .model import Compartment, Parameter, Species, SpeciesReference, StateVariable

# Weights of the embedded pairs: the first row advances the state, the
# second gives the comparison solution for the error estimate.
_FEHLBERG_B = (
    (16.0 / 135.0, 0.0, 6656.0 / 12825.0, 28561.0 / 56430.0, -9.0 / 50.0, 2.0 / 55.0),
    (25.0 / 216.0, 0.0, 1408.0 / 2565.0, 2197.0 / 4104.0, -1.0 / 5.0, 0.0),
)
_CASH_KARP_B = (
    (2825.0 / 27648.0, 0.0, 18575.0 / 48384.0, 13525.0 / 55296.0, 277.0 / 14336.0, 1.0 / 4.0),
    (37.0 / 378.0, 0.0, 250.0 / 621.0, 125.0 / 594.0, 0.0, 512.0 / 1771.0),
)

ERROR_WEIGHTS: dict[int, tuple[tuple[float, ...], tuple[float, ...]]] = {
    5: _FEHLBERG_B,
    6: _CASH_KARP_B,
}


def _div(a: float, b: float) -> float:
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _not_rate_driven(obj: StateVariable) -> bool:
    rule = obj.depending_rule
    return rule is not None and not rule.is_rate


def _advance(obj: StateVariable, slope: float, dt: float) -> None:
    if _not_rate_driven(obj):
        obj.temp_value = slope
    else:
        obj.temp_value = obj.value + slope * dt


def _rescale_species(comp: Compartment) -> None:
    for sp in comp.including_species:
        if sp.is_concentration:
            sp.temp_value = _div(sp.temp_value * comp.value, comp.temp_value)


def _apply_slopes(
    species: Iterable[Species],
    parameters: Iterable[Parameter],
    compartments: Iterable[Compartment],
    species_references: Iterable[SpeciesReference],
    slope_of,
    dt: float,
) -> None:
    for obj in chain(species, parameters):
        _advance(obj, slope_of(obj), dt)
    for comp in compartments:
        _advance(comp, slope_of(comp), dt)
        _rescale_species(comp)
    for ref in species_references:
        _advance(ref, slope_of(ref), dt)


def calc_temp_value(
    species: Iterable[Species],
    parameters: Iterable[Parameter],
    compartments: Iterable[Compartment],
    species_references: Iterable[SpeciesReference],
    dt: float,
    use_rk: bool,
) -> None:
    """Combine the stage derivatives into the next state, stored in ``temp_value``.

    With ``use_rk`` the classical fourth-order weights are used, otherwise
    the Euler stage. Objects set by a non-rate rule take the combined value
    itself; concentrations follow the change of their compartment's size.
    """
    if use_rk:
        def slope(obj: StateVariable) -> float:
            k = obj.k
            return (k[0] + 2 * k[1] + 2 * k[2] + k[3]) / 6
    else:
        def slope(obj: StateVariable) -> float:
            return obj.k[0]

    _apply_slopes(species, parameters, compartments, species_references, slope, dt)


def calc_eps(value: float) -> float:
    """Return ``value``, doubled once when adding 1 to it makes no difference."""
    if 1 + value == value:
        return value * 2.0
    return value


def calc_error(
    dxdt: float,
    dxdt4: float,
    cur_value: float,
    next_value: float,
    atol: float,
    rtol: float,
) -> float:
    """Squared scaled difference between two step estimates."""
    sci = atol + max(abs(cur_value), abs(next_value)) * rtol
    err = _div(dxdt4 - dxdt, sci)
    return err * err


def calc_sum_error(
    species: Sequence[Species],
    parameters: Sequence[Parameter],
    compartments: Sequence[Compartment],
    species_references: Sequence[SpeciesReference],
    dt: float,
    use_rk: bool,
    atol: float,
    rtol: float,
    ode_num: int,
    time_progressed: bool,
    order: int,
) -> float:
    """Estimate the error of an embedded Runge-Kutta step.

    Returns the root mean square of the scaled errors over ``ode_num``
    equations (0.0 when there are none, or without ``use_rk``). When the
    error exceeds 1 the ``temp_value`` of every object is reset to its
    ``value``; with ``time_progressed`` the step is then applied. ``order``
    selects the weights (5 or 6); any other value raises :class:`ValueError`.
    """
    try:
        upper, lower = ERROR_WEIGHTS[order]
    except KeyError:
        raise ValueError("Butcher tableau is implicit") from None
    if not use_rk:
        return 0.0

    objects = [*species, *parameters, *compartments, *species_references]
    slopes: dict[int, float] = {}
    sum_error = 0.0
    for obj in objects:
        dxdt = sum(w * k for w, k in zip(upper, obj.k))
        dxdt4 = sum(w * k for w, k in zip(lower, obj.k))
        slopes[id(obj)] = dxdt
        sum_error += calc_error(
            dxdt * dt, dxdt4 * dt, obj.value, obj.value + dxdt4 * dt, atol, rtol
        )

    if ode_num == 0:
        return 0.0
    sum_error = math.sqrt(sum_error / ode_num)

    if sum_error > 1.0:
        for obj in objects:
            obj.temp_value = obj.value

    if time_progressed:
        _apply_slopes(
            species,
            parameters,
            compartments,
            species_references,
            lambda obj: slopes[id(obj)],
            dt,
        )
    return sum_error