import math

import pytest

from sbmlsolve.ast import NodeType
from sbmlsolve.interp import approximate_delay_linearly
from sbmlsolve.model import Compartment, Species
from sbmlsolve.result import SimulationResult
from sbmlsolve.rpn import Clock, DelayOperand, Equation, Operand
from sbmlsolve.rpn_adaptive import evaluate_adaptive


def run(eq, *, time=0.0, stage_time=0.0, clock=None, result=None, cycle=0,
        rk_order=0, print_interval=1, err_zero=False):
    return evaluate_adaptive(
        eq, 0.1, cycle, rk_order, clock or Clock(), time, stage_time,
        result or SimulationResult(), print_interval, err_zero,
    )


def test_arithmetic_matches_inputs():
    eq = Equation([Operand.const(2), Operand.const(3), NodeType.PLUS])
    assert run(eq) == 5.0


def test_time_is_stage_time():
    eq = Equation([NodeType.NAME_TIME])
    assert run(eq, time=1.0, stage_time=1.25) == 1.25


def test_time_reverse_uses_clock():
    eq = Equation([NodeType.NAME_TIME], time_reverse=True)
    clock = Clock(reverse_time=-0.75)
    assert run(eq, stage_time=3.0, clock=clock) == -0.75


def test_delay_interpolates_history():
    sp = Species(id="s")
    sp.delay_val = [[1.0] * 6, [10.0] * 6, [20.0] * 6]
    times = [0.0, 1.0, 2.0]
    result = SimulationResult(values_time_fordelay=times)
    eq = Equation([DelayOperand(sp), Operand.const(1.0), NodeType.FUNCTION_DELAY])
    value = run(eq, time=2.5, result=result, cycle=3)
    expected = approximate_delay_linearly(1.5, sp.delay_val, 0, times, 3, 1, False)
    assert value == expected
    assert 10.0 < value < 20.0


def test_delay_with_compartment_divides():
    sp = Species(id="s")
    comp = Compartment(id="c")
    sp.delay_val = [[8.0] * 6, [8.0] * 6]
    comp.delay_val = [[2.0] * 6, [2.0] * 6]
    eq = Equation([DelayOperand(sp, compartment=comp), Operand.const(5.0),
                   NodeType.FUNCTION_DELAY])
    assert run(eq, time=1.0) == 4.0


def test_delay_before_start_uses_explicit_equation():
    sp = Species(id="s")
    sp.delay_val = [[1.0] * 6]
    explicit = Equation([Operand.const(7.0)])
    eq = Equation([DelayOperand(sp, explicit=explicit), Operand.const(1.0),
                   NodeType.FUNCTION_DELAY])
    clock = Clock()
    assert run(eq, time=0.5, clock=clock) == 7.0
    assert clock.reverse_time == 0.5 - 1.0


def test_delay_before_start_uses_first_stage_of_first_row():
    sp = Species(id="s")
    sp.delay_val = [[1.0, 2.0, 3.0, 4.0, 5.0, 6.0]]
    eq = Equation([DelayOperand(sp), Operand.const(2.0), NodeType.FUNCTION_DELAY])
    assert run(eq, time=1.0, rk_order=3) == 1.0


def test_arccot_of_negated_zero_arguments():
    eq = Equation([Operand.const(0), Operand.const(0), Operand.const(0),
                   NodeType.MINUS, NodeType.FUNCTION_ARCCOT, NodeType.PLUS])
    assert run(eq) == pytest.approx(-math.pi / 2)


def test_arccot_plain():
    eq = Equation([Operand.const(1.0), NodeType.FUNCTION_ARCCOT])
    assert run(eq) == pytest.approx(math.atan(1.0))


def test_arccot_single_operand_after_minus():
    eq = Equation([Operand.const(0), Operand.const(0), NodeType.MINUS,
                   NodeType.FUNCTION_ARCCOT])
    assert run(eq) == pytest.approx(math.pi / 2)


def test_empty_equation_raises():
    with pytest.raises(ValueError):
        run(Equation([]))


def test_delay_without_operand_raises():
    eq = Equation([Operand.const(1.0), Operand.const(1.0), NodeType.FUNCTION_DELAY])
    with pytest.raises(ValueError):
        run(eq, time=5.0)