import pytest

from sbmlsolve.delay import initialize_delay_values
from sbmlsolve.model import Compartment, Parameter, Reaction, Species, SpeciesReference


def _history(rows):
    return [[-1.0] * 6 for _ in range(rows)]


def test_last_call_fills_every_row():
    sp = Species(id="s", value=3.0, delay_val=_history(11))
    initialize_delay_values([sp], [], [], [], 1.0, 0.1, True, 6)
    assert all(row == [3.0] * 6 for row in sp.delay_val)


def test_first_call_fills_only_first_row():
    p = Parameter(id="p", value=2.0, delay_val=_history(5))
    initialize_delay_values([], [p], [], [], 0.4, 0.1, False, 6)
    assert p.delay_val[0] == [2.0] * 6
    assert all(row == [-1.0] * 6 for row in p.delay_val[1:])


def test_four_stages_leave_later_slots():
    c = Compartment(id="c", value=5.0, delay_val=_history(3))
    initialize_delay_values([], [], [c], [], 0.2, 0.1, True, 4)
    for row in c.delay_val:
        assert row[:4] == [5.0] * 4
        assert row[4:] == [-1.0, -1.0]


def test_objects_without_history_are_skipped():
    sp = Species(id="s", value=1.0)
    initialize_delay_values([sp], [], [], [], 1.0, 0.1, True, 6)
    assert sp.delay_val is None


def test_species_references_of_reactions_are_filled():
    prod = SpeciesReference(id="prod", value=2.0, delay_val=_history(2))
    reac = SpeciesReference(id="reac", value=1.0, delay_val=_history(2))
    re = Reaction(id="r", products=[prod], reactants=[reac])
    initialize_delay_values([], [], [], [re], 0.1, 0.1, True, 6)
    assert all(row == [2.0] * 6 for row in prod.delay_val)
    assert all(row == [1.0] * 6 for row in reac.delay_val)


def test_non_positive_stages_rejected():
    with pytest.raises(ValueError):
        initialize_delay_values([], [], [], [], 1.0, 0.1, True, 0)