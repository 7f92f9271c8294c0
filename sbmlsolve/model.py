"""State variables of a model and helpers that select and update them."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass(eq=False)
class Rule:
    """A rule that sets or drives one state variable."""

    is_rate: bool = False
    is_assignment: bool = False
    eq: Any = None
    target: StateVariable | None = None


def _stage_slots() -> list[float]:
    return [0.0] * 6


@dataclass(eq=False)
class StateVariable:
    """A quantity that the solver integrates or assigns."""

    id: str
    name: str = ""
    value: float = 0.0
    temp_value: float | None = None
    constant: bool = False
    depending_rule: Rule | None = None
    k: list[float] = field(default_factory=_stage_slots)
    delay_val: list[list[float]] | None = None

    def __post_init__(self) -> None:
        if self.temp_value is None:
            self.temp_value = self.value


@dataclass(eq=False)
class Species(StateVariable):
    """A species; ``is_concentration`` marks values held as concentrations."""

    boundary_condition: bool = False
    is_concentration: bool = False


@dataclass(eq=False)
class Parameter(StateVariable):
    """A global parameter."""


@dataclass(eq=False)
class Compartment(StateVariable):
    """A compartment and the species that live in it."""

    including_species: list[Species] = field(default_factory=list)


@dataclass(eq=False)
class SpeciesReference(StateVariable):
    """A reactant or product of a reaction; its value is the stoichiometry."""

    species: Species | None = None
    eq: Any = None


@dataclass(eq=False)
class Reaction:
    """A reaction with its rate equation."""

    id: str
    products: list[SpeciesReference] = field(default_factory=list)
    reactants: list[SpeciesReference] = field(default_factory=list)
    is_fast: bool = False
    eq: Any = None

    def references(self) -> list[SpeciesReference]:
        """Products first, then reactants."""
        return [*self.products, *self.reactants]


@dataclass(eq=False)
class EventAssignment:
    """One assignment carried out when an event fires."""

    eq: Any = None
    target: StateVariable | None = None


@dataclass
class CalcObjects:
    """The variable objects the solver works on.

    The ``all_*`` lists hold every non-constant object (every species);
    the ``var_*`` lists hold those the integrator advances.
    """

    all_var_sp: list[Species] = field(default_factory=list)
    all_var_param: list[Parameter] = field(default_factory=list)
    all_var_comp: list[Compartment] = field(default_factory=list)
    all_var_spr: list[SpeciesReference] = field(default_factory=list)
    var_sp: list[Species] = field(default_factory=list)
    var_param: list[Parameter] = field(default_factory=list)
    var_comp: list[Compartment] = field(default_factory=list)
    var_spr: list[SpeciesReference] = field(default_factory=list)


def _driven_by_rate_rule(obj: StateVariable) -> bool:
    return obj.depending_rule is not None and obj.depending_rule.is_rate


def _in_slow_reaction(sp: Species, reactions: Sequence[Reaction]) -> bool:
    return any(
        ref.species is not None and ref.species.id == sp.id
        for re in reactions
        if not re.is_fast
        for ref in re.references()
    )


def create_calc_object_list(
    species: Sequence[Species],
    parameters: Sequence[Parameter],
    compartments: Sequence[Compartment],
    reactions: Sequence[Reaction],
) -> CalcObjects:
    """Select the objects that vary and those that are integrated."""
    refs = [ref for re in reactions for ref in re.references()]
    var_sp = [
        sp
        for sp in species
        if not sp.constant
        and (
            _in_slow_reaction(sp, reactions)
            if sp.depending_rule is None
            else sp.depending_rule.is_rate
        )
    ]
    return CalcObjects(
        all_var_sp=list(species),
        all_var_param=[p for p in parameters if not p.constant],
        all_var_comp=[c for c in compartments if not c.constant],
        all_var_spr=[r for r in refs if not r.constant],
        var_sp=var_sp,
        var_param=[p for p in parameters if not p.constant and _driven_by_rate_rule(p)],
        var_comp=[c for c in compartments if not c.constant and _driven_by_rate_rule(c)],
        var_spr=[r for r in refs if not r.constant and _driven_by_rate_rule(r)],
    )


def forward_values(
    species: Iterable[Species],
    parameters: Iterable[Parameter],
    compartments: Iterable[Compartment],
    species_references: Iterable[SpeciesReference],
) -> None:
    """Commit each object's ``temp_value`` as its ``value``."""
    for group in (species, parameters, compartments, species_references):
        for obj in group:
            obj.value = obj.temp_value