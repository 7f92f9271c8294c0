"""Initial assignments, evaluated in an order that respects their dependencies."""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterator, Sequence
from dataclasses import dataclass

from .ast import ASTNode, NodeType
from .model import StateVariable
from .result import SimulationResult
from .rpn import Clock, Equation, evaluate
from .rpn_adaptive import evaluate_adaptive


@dataclass(eq=False)
class InitialAssignment:
    """An assignment of ``math`` (compiled as ``eq``) to ``target`` at the start."""

    target: StateVariable | None
    math: ASTNode
    eq: Equation

    @property
    def target_id(self) -> str:
        if self.target is None:
            raise ValueError("initial assignment has no target")
        return self.target.id


def _visible_names(node: ASTNode) -> Iterator[str | None]:
    if node.left is not None:
        yield from _visible_names(node.left)
    if node.right is not None:
        yield from _visible_names(node.right)
    if node.type is NodeType.NAME:
        yield node.name


def assign_ok(math: ASTNode, targets: Collection[str], assigned: Collection[str]) -> bool:
    """True when every target named in ``math`` has already been assigned."""
    return all(
        name not in targets or name in assigned for name in _visible_names(math)
    )


def _assign_in_order(
    assignments: Sequence[InitialAssignment],
    compute: Callable[[Equation], float],
) -> None:
    targets = [a.target_id for a in assignments]
    assigned: list[str] = []
    while len(assigned) < len(assignments):
        progressed = False
        for assignment, target_id in zip(assignments, targets):
            if target_id in assigned:
                continue
            if assign_ok(assignment.math, targets, assigned):
                value = compute(assignment.eq)
                assignment.target.temp_value = value
                assignment.target.value = value
                assigned.append(target_id)
                progressed = True
        if not progressed:
            raise ValueError("initial assignments cannot be ordered")


def calc_initial_assignment(
    assignments: Sequence[InitialAssignment],
    dt: float,
    cycle: int,
    clock: Clock,
) -> None:
    """Evaluate every initial assignment once its dependencies are set.

    Raises :class:`ValueError` when the assignments depend on each other
    in a cycle or share a target.
    """
    _assign_in_order(assignments, lambda eq: evaluate(eq, dt, cycle, 0, clock))


def calc_initial_assignment_adaptive(
    assignments: Sequence[InitialAssignment],
    dt: float,
    cycle: int,
    clock: Clock,
    time: float,
    result: SimulationResult,
    print_interval: int,
    err_zero: bool,
) -> None:
    """Like :func:`calc_initial_assignment`, for the variable step-size integrator."""
    _assign_in_order(
        assignments,
        lambda eq: evaluate_adaptive(
            eq, dt, cycle, 0, clock, time, time, result, print_interval, err_zero
        ),
    )