"""Evaluation of postfix equations for the variable step-size integrator."""

from __future__ import annotations

import math

from .ast import NodeType, double_eq
from .interp import approximate_delay_linearly
from .result import SimulationResult
from .rpn import Clock, DelayOperand, Equation, Operand, apply_operator


def _div(a: float, b: float) -> float:
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _delayed_value(
    delay: DelayOperand,
    explicit: Equation | None,
    amount: float,
    dt: float,
    cycle: int,
    rk_order: int,
    clock: Clock,
    time: float,
    stage_time: float,
    result: SimulationResult,
    print_interval: int,
    err_zero: bool,
) -> tuple[float, bool]:
    """Return the delayed value and whether the explicit equation was used."""
    history = delay.history
    comp = delay.comp_history
    delayed_time = time - amount
    if delayed_time > 0:
        times = result.values_time_fordelay
        value = approximate_delay_linearly(
            delayed_time, history, rk_order, times, cycle, print_interval, err_zero
        )
        if comp is not None:
            size = approximate_delay_linearly(
                delayed_time, comp, rk_order, times, cycle, print_interval, err_zero
            )
            value = _div(value, size)
        return value, False
    if explicit is not None:
        clock.reverse_time = delayed_time
        value = evaluate_adaptive(
            explicit, dt, cycle, rk_order, clock, time, stage_time,
            result, print_interval, err_zero,
        )
        if comp is not None:
            value = _div(value, comp[0][rk_order])
        return value, True
    # Before the start of the simulation the first stored stage is used.
    value = history[0][0]
    if comp is not None:
        value = _div(value, comp[0][0])
    return value, False


def _arccot(stack: list[float], eq: Equation, index: int) -> float:
    x = stack[-1]
    negated = (
        index > 0
        and eq.items[index - 1] is NodeType.MINUS
        and len(stack) >= 2
        and double_eq(stack[-1], 0)
        and double_eq(stack[-2], 0)
    )
    return math.atan(_div(-1.0 if negated else 1.0, x))


def evaluate_adaptive(
    eq: Equation,
    dt: float,
    cycle: int,
    rk_order: int,
    clock: Clock,
    time: float,
    stage_time: float,
    result: SimulationResult,
    print_interval: int,
    err_zero: bool,
) -> float:
    """Evaluate ``eq`` for the variable step-size integrator.

    ``time`` is the start of the current step and ``stage_time`` the time of
    the Runge-Kutta stage being evaluated. Delayed values are interpolated
    linearly over ``result.values_time_fordelay``.
    """
    if not eq.items:
        raise ValueError("equation is empty")
    stack: list[float] = []
    delay: DelayOperand | None = None
    explicit: Equation | None = None
    for index, item in enumerate(eq.items):
        if isinstance(item, Operand):
            stack.append(item.current())
        elif isinstance(item, DelayOperand):
            delay = item
            if item.explicit is not None:
                explicit = item.explicit
            stack.append(0.0)
        elif item is NodeType.FUNCTION_DELAY:
            if delay is None:
                raise ValueError("delay operator without a delayed quantity")
            amount = stack.pop()
            value, used = _delayed_value(
                delay, explicit, amount, dt, cycle, rk_order, clock,
                time, stage_time, result, print_interval, err_zero,
            )
            stack[-1] = value
            if used:
                explicit = None
            delay = None
        elif item is NodeType.FUNCTION_ARCCOT:
            stack[-1] = _arccot(stack, eq, index)
        elif item is NodeType.NAME_TIME:
            stack.append(clock.reverse_time if eq.time_reverse else stage_time)
        else:
            apply_operator(item, stack, eq, index)
    if not stack:
        raise ValueError("equation leaves nothing on the stack")
    return stack[0]