"""Math expression trees and helpers shared by the solver."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, auto

EPSILON = 1.0e-8
ABSOLUTE_ERROR_TOLERANCE = 1.0e-9
RELATIVE_ERROR_TOLERANCE = 1.0e-6
FINE_ABSOLUTE_ERROR_TOLERANCE = 1.0e-22
FINE_RELATIVE_ERROR_TOLERANCE = 1.0e-11
DEFAULT_FACMAX = 2.0


def double_eq(x: float, v: float) -> bool:
    """Return True when ``x`` lies strictly within ``EPSILON`` of ``v``."""
    return (v - EPSILON) < x < (v + EPSILON)


class NodeType(Enum):
    """Kinds of node in a math expression tree."""

    PLUS = auto()
    MINUS = auto()
    TIMES = auto()
    DIVIDE = auto()
    POWER = auto()
    INTEGER = auto()
    REAL = auto()
    REAL_E = auto()
    RATIONAL = auto()
    NAME = auto()
    NAME_AVOGADRO = auto()
    NAME_TIME = auto()
    CONSTANT_E = auto()
    CONSTANT_FALSE = auto()
    CONSTANT_PI = auto()
    CONSTANT_TRUE = auto()
    LAMBDA = auto()
    FUNCTION = auto()
    FUNCTION_ABS = auto()
    FUNCTION_ARCCOS = auto()
    FUNCTION_ARCCOSH = auto()
    FUNCTION_ARCCOT = auto()
    FUNCTION_ARCCOTH = auto()
    FUNCTION_ARCCSC = auto()
    FUNCTION_ARCCSCH = auto()
    FUNCTION_ARCSEC = auto()
    FUNCTION_ARCSECH = auto()
    FUNCTION_ARCSIN = auto()
    FUNCTION_ARCSINH = auto()
    FUNCTION_ARCTAN = auto()
    FUNCTION_ARCTANH = auto()
    FUNCTION_CEILING = auto()
    FUNCTION_COS = auto()
    FUNCTION_COSH = auto()
    FUNCTION_COT = auto()
    FUNCTION_COTH = auto()
    FUNCTION_CSC = auto()
    FUNCTION_CSCH = auto()
    FUNCTION_DELAY = auto()
    FUNCTION_EXP = auto()
    FUNCTION_FACTORIAL = auto()
    FUNCTION_FLOOR = auto()
    FUNCTION_LN = auto()
    FUNCTION_LOG = auto()
    FUNCTION_PIECEWISE = auto()
    FUNCTION_POWER = auto()
    FUNCTION_ROOT = auto()
    FUNCTION_SEC = auto()
    FUNCTION_SECH = auto()
    FUNCTION_SIN = auto()
    FUNCTION_SINH = auto()
    FUNCTION_TAN = auto()
    FUNCTION_TANH = auto()
    LOGICAL_AND = auto()
    LOGICAL_NOT = auto()
    LOGICAL_OR = auto()
    LOGICAL_XOR = auto()
    RELATIONAL_EQ = auto()
    RELATIONAL_GEQ = auto()
    RELATIONAL_GT = auto()
    RELATIONAL_LEQ = auto()
    RELATIONAL_LT = auto()
    RELATIONAL_NEQ = auto()
    UNKNOWN = auto()


@dataclass(eq=False)
class ASTNode:
    """A node of an expression tree.

    ``value`` holds the number of INTEGER and REAL nodes; ``name`` the
    identifier of NAME and FUNCTION nodes.
    """

    type: NodeType
    value: float = 0
    name: str | None = None
    children: list[ASTNode] = field(default_factory=list)

    @property
    def left(self) -> ASTNode | None:
        """The first child, if any."""
        return self.children[0] if self.children else None

    @property
    def right(self) -> ASTNode | None:
        """The last child, when there are at least two children."""
        return self.children[-1] if len(self.children) > 1 else None

    def make_real(self, value: float) -> None:
        """Turn this node into a REAL literal holding ``value``."""
        self.type = NodeType.REAL
        self.value = float(value)


def _substitute(node: ASTNode, lookup) -> None:
    if node.left is not None:
        _substitute(node.left, lookup)
    if node.right is not None:
        _substitute(node.right, lookup)
    if node.type is NodeType.NAME:
        found = lookup(node.name)
        if found is not None:
            node.make_real(found)
    elif node.type is NodeType.INTEGER:
        node.make_real(node.value)


def set_local_parameters(node: ASTNode, parameters: Mapping[str, float]) -> None:
    """Replace local parameter names with their values and integers with reals, in place.

    Only the left and right children of each node are visited.
    """
    _substitute(node, parameters.get)


def set_local_parameters_for_bifurcation(
    node: ASTNode,
    parameters: Mapping[str, float],
    param_id: str,
    param_value: float,
) -> None:
    """Like :func:`set_local_parameters`, but a local parameter named ``param_id``
    takes ``param_value`` instead of its own value."""

    def lookup(name: str | None) -> float | None:
        if name not in parameters:
            return None
        return param_value if name == param_id else parameters[name]

    _substitute(node, lookup)