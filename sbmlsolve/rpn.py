"""Evaluation of equations stored in reverse Polish notation."""

from __future__ import annotations

import math
import operator
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Union

from .ast import NodeType, double_eq

DBL_MAX = sys.float_info.max


@dataclass
class Clock:
    """Shared time state; ``reverse_time`` is the time an explicit delay looks back to."""

    reverse_time: float = 0.0


@dataclass(eq=False)
class Operand:
    """A number pushed onto the stack.

    With a ``target`` the number is read from ``getattr(target, attr)`` at
    evaluation time; otherwise ``value`` is used.
    """

    value: float = 0.0
    target: Any = None
    attr: str = "temp_value"

    @classmethod
    def const(cls, value: float) -> Operand:
        return cls(value=float(value))

    @classmethod
    def of(cls, target: Any, attr: str = "temp_value") -> Operand:
        return cls(target=target, attr=attr)

    def current(self) -> float:
        if self.target is None:
            return self.value
        return float(getattr(self.target, attr_name(self)))


def attr_name(operand: Operand) -> str:
    return operand.attr


@dataclass(eq=False)
class DelayOperand:
    """The delayed quantity of a ``delay`` call.

    ``source.delay_val`` holds one row of stage values per step; when the
    quantity is a concentration, ``compartment.delay_val`` holds the sizes
    it is divided by. ``explicit`` computes the value for times before the
    start of the simulation.
    """

    source: Any
    compartment: Any = None
    explicit: Equation | None = None

    @property
    def history(self) -> list[list[float]]:
        return self.source.delay_val

    @property
    def comp_history(self) -> list[list[float]] | None:
        return None if self.compartment is None else self.compartment.delay_val


Item = Union[Operand, DelayOperand, NodeType]


@dataclass(eq=False)
class Equation:
    """A sequence of operands and operators in postfix order."""

    items: list[Item] = field(default_factory=list)
    time_reverse: bool = False

    def __len__(self) -> int:
        return len(self.items)


def _div(a: float, b: float) -> float:
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _is_odd_int(y: float) -> bool:
    return math.isfinite(y) and y.is_integer() and int(y) % 2 == 1


def _pow(x: float, y: float) -> float:
    try:
        return math.pow(x, y)
    except OverflowError:
        return -math.inf if x < 0 and _is_odd_int(y) else math.inf
    except ValueError:
        if x == 0 and y < 0:
            return math.copysign(math.inf, x) if _is_odd_int(y) else math.inf
        return math.nan


def _log(x: float) -> float:
    if math.isnan(x) or x < 0:
        return math.nan
    if x == 0:
        return -math.inf
    return math.log(x)


def _safe(fn: Callable[[float], float], overflow: Callable[[float], float]):
    def wrapped(x: float) -> float:
        try:
            return fn(x)
        except OverflowError:
            return overflow(x)
        except ValueError:
            return math.nan

    return wrapped


_sin = _safe(math.sin, lambda x: math.nan)
_cos = _safe(math.cos, lambda x: math.nan)
_tan = _safe(math.tan, lambda x: math.nan)
_exp = _safe(math.exp, lambda x: math.inf)
_sinh = _safe(math.sinh, lambda x: math.copysign(math.inf, x))
_cosh = _safe(math.cosh, lambda x: math.inf)
_tanh = _safe(math.tanh, lambda x: math.copysign(1.0, x))
_asinh = _safe(math.asinh, lambda x: math.copysign(math.inf, x))
_acosh = _safe(math.acosh, lambda x: math.inf)
_atanh = _safe(math.atanh, lambda x: math.nan)


def _factorial(x: float) -> float:
    if not math.isfinite(x):
        return math.nan
    result = 1
    for k in range(2, int(x) + 1):
        result *= k
    try:
        return float(result)
    except OverflowError:
        return math.inf


def _clamped(fn: Callable[[float], float]) -> Callable[[float], float]:
    def wrapped(x: float) -> float:
        if x > 1:
            return fn(1.0)
        if x < -1:
            return fn(-1.0)
        return fn(x)

    return wrapped


_asin = _clamped(math.asin)
_acos = _clamped(math.acos)


def _arctanh(x: float) -> float:
    if x >= 1:
        return DBL_MAX
    if x <= -1:
        return -DBL_MAX
    return _atanh(x)


def _arcsech(x: float) -> float:
    if double_eq(x, 0):
        return DBL_MAX
    if x > 1:
        return 0.0
    return _acosh(_div(1.0, x))


def _truth(flag: bool) -> float:
    return 1.0 if flag else 0.0


_BINARY: dict[NodeType, Callable[[float, float], float]] = {
    NodeType.PLUS: operator.add,
    NodeType.MINUS: operator.sub,
    NodeType.TIMES: operator.mul,
    NodeType.DIVIDE: _div,
    NodeType.POWER: _pow,
    NodeType.FUNCTION_POWER: _pow,
    NodeType.FUNCTION_LOG: lambda base, x: _div(_log(x), _log(base)),
    NodeType.FUNCTION_ROOT: lambda degree, x: _pow(x, _div(1.0, degree)),
    NodeType.RELATIONAL_EQ: lambda a, b: _truth(double_eq(a, b)),
    NodeType.RELATIONAL_NEQ: lambda a, b: _truth(not double_eq(a, b)),
    NodeType.RELATIONAL_LT: lambda a, b: _truth(a < b),
    NodeType.RELATIONAL_GT: lambda a, b: _truth(a > b),
    NodeType.RELATIONAL_LEQ: lambda a, b: _truth(a <= b),
    NodeType.RELATIONAL_GEQ: lambda a, b: _truth(a >= b),
    NodeType.LOGICAL_AND: lambda a, b: _truth(a >= 0.5 and b >= 0.5),
    NodeType.LOGICAL_OR: lambda a, b: _truth(a >= 0.5 or b >= 0.5),
    NodeType.LOGICAL_XOR: lambda a, b: _truth((a >= 0.5) != (b >= 0.5)),
}

_UNARY: dict[NodeType, Callable[[float], float]] = {
    NodeType.FUNCTION_FACTORIAL: _factorial,
    NodeType.FUNCTION_ABS: abs,
    NodeType.FUNCTION_SIN: _sin,
    NodeType.FUNCTION_COS: _cos,
    NodeType.FUNCTION_TAN: _tan,
    NodeType.FUNCTION_CSC: lambda x: _div(1.0, _sin(x)),
    NodeType.FUNCTION_SEC: lambda x: _div(1.0, _cos(x)),
    NodeType.FUNCTION_COT: lambda x: _div(1.0, _tan(x)),
    NodeType.FUNCTION_ARCSIN: _asin,
    NodeType.FUNCTION_ARCCOS: _acos,
    NodeType.FUNCTION_ARCTAN: math.atan,
    NodeType.FUNCTION_ARCCSC: lambda x: _asin(_div(1.0, x)),
    NodeType.FUNCTION_ARCSEC: lambda x: _acos(_div(1.0, x)),
    NodeType.FUNCTION_SINH: _sinh,
    NodeType.FUNCTION_COSH: _cosh,
    NodeType.FUNCTION_TANH: _tanh,
    NodeType.FUNCTION_CSCH: lambda x: _sinh(_div(1.0, x)),
    NodeType.FUNCTION_SECH: lambda x: _cosh(_div(1.0, x)),
    NodeType.FUNCTION_COTH: lambda x: _tanh(_div(1.0, x)),
    NodeType.FUNCTION_ARCSINH: _asinh,
    NodeType.FUNCTION_ARCCOSH: _acosh,
    NodeType.FUNCTION_ARCTANH: _arctanh,
    NodeType.FUNCTION_ARCCSCH: lambda x: _asinh(_div(1.0, x)),
    NodeType.FUNCTION_ARCSECH: _arcsech,
    NodeType.FUNCTION_ARCCOTH: lambda x: _arctanh(_div(1.0, x)),
    NodeType.FUNCTION_EXP: _exp,
    NodeType.FUNCTION_LN: _log,
    NodeType.FUNCTION_CEILING: lambda x: float(math.ceil(x)) if math.isfinite(x) else x,
    NodeType.FUNCTION_FLOOR: lambda x: float(math.floor(x)) if math.isfinite(x) else x,
    NodeType.LOGICAL_NOT: lambda x: _truth(not x >= 0.5),
}


def _is_zero_operand(item: Item) -> bool:
    return isinstance(item, Operand) and double_eq(item.current(), 0)


def _negated_argument(eq: Equation, index: int) -> bool:
    """True when an ``arccot`` argument was built as ``0 - 0 ...``-style negation."""
    if index < 3:
        return False
    items = eq.items
    return (
        items[index - 1] is NodeType.MINUS
        and _is_zero_operand(items[index - 2])
        and _is_zero_operand(items[index - 3])
    )


def apply_operator(op: NodeType, stack: list[float], eq: Equation, index: int) -> None:
    """Apply one operator to ``stack`` in place.

    ``eq`` and ``index`` locate the operator within its equation. Operators
    without a meaning here leave the stack unchanged.
    """
    if op in _BINARY:
        b = stack.pop()
        stack[-1] = _BINARY[op](stack[-1], b)
    elif op in _UNARY:
        stack[-1] = _UNARY[op](stack[-1])
    elif op is NodeType.FUNCTION_ARCCOT:
        x = stack[-1]
        sign = -1.0 if _negated_argument(eq, index) else 1.0
        stack[-1] = math.atan(_div(sign, x))
    elif op is NodeType.CONSTANT_TRUE:
        stack.append(1.0)
    elif op is NodeType.CONSTANT_FALSE:
        stack.append(0.0)


def _delayed_value(
    delay: DelayOperand,
    explicit: Equation | None,
    delay_amount: float,
    dt: float,
    cycle: int,
    rk_order: int,
    clock: Clock,
) -> tuple[float, bool]:
    """Return the delayed value and whether the explicit equation was used."""
    back = cycle - int(delay_amount / dt)
    comp = delay.comp_history
    history = delay.history
    if back > 0:
        value = history[back][rk_order]
        if comp is not None:
            value = _div(value, comp[back][rk_order])
        return value, False
    if explicit is not None:
        clock.reverse_time = cycle * dt - delay_amount
        value = evaluate(explicit, dt, cycle, rk_order, clock)
        if comp is not None:
            value = _div(value, comp[0][rk_order])
        return value, True
    value = history[0][rk_order]
    if comp is not None:
        value = _div(value, comp[0][rk_order])
    return value, False


def evaluate(eq: Equation, dt: float, cycle: int, rk_order: int, clock: Clock) -> float:
    """Evaluate ``eq`` at step ``cycle`` and Runge-Kutta stage ``rk_order``.

    Delayed values are read from the stored per-step history.
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
            value, used = _delayed_value(delay, explicit, amount, dt, cycle, rk_order, clock)
            stack[-1] = value
            if used:
                explicit = None
            delay = None
        else:
            apply_operator(item, stack, eq, index)
    if not stack:
        raise ValueError("equation leaves nothing on the stack")
    return stack[0]