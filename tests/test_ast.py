import pytest

from sbmlsolve.ast import (
    EPSILON,
    ASTNode,
    NodeType,
    double_eq,
    set_local_parameters,
    set_local_parameters_for_bifurcation,
)


def name(n):
    return ASTNode(NodeType.NAME, name=n)


def test_double_eq_within_epsilon():
    assert double_eq(1.0, 1.0 + EPSILON / 2)
    assert double_eq(1.0 - EPSILON / 2, 1.0)


def test_left_and_right_children():
    a, b, c = name("a"), name("b"), name("c")
    node = ASTNode(NodeType.PLUS, children=[a, b, c])
    assert node.left is a
    assert node.right is c
    single = ASTNode(NodeType.FUNCTION_EXP, children=[a])
    assert single.left is a
    assert single.right is None


def test_names_replaced_by_local_values():
    k, s = name("k"), name("S")
    tree = ASTNode(NodeType.TIMES, children=[k, s])
    set_local_parameters(tree, {"k": 0.25})
    assert k.type is NodeType.REAL
    assert k.value == 0.25
    assert s.type is NodeType.NAME
    assert s.name == "S"


def test_integers_become_reals():
    i = ASTNode(NodeType.INTEGER, value=3)
    tree = ASTNode(NodeType.PLUS, children=[i, name("x")])
    set_local_parameters(tree, {})
    assert i.type is NodeType.REAL
    assert i.value == 3.0
    assert isinstance(i.value, float)


def test_middle_child_not_visited():
    middle = name("k")
    tree = ASTNode(NodeType.PLUS, children=[name("a"), middle, name("k")])
    set_local_parameters(tree, {"k": 2.0})
    assert middle.type is NodeType.NAME
    assert tree.right.type is NodeType.REAL


def test_nested_tree():
    inner = ASTNode(NodeType.TIMES, children=[name("k"), name("k")])
    tree = ASTNode(NodeType.FUNCTION_EXP, children=[inner])
    set_local_parameters(tree, {"k": 5.0})
    assert [c.value for c in inner.children] == [5.0, 5.0]


def test_bifurcation_value_overrides_parameter():
    k, v = name("k"), name("v")
    tree = ASTNode(NodeType.TIMES, children=[k, v])
    set_local_parameters_for_bifurcation(tree, {"k": 1.0, "v": 4.0}, "k", 9.0)
    assert k.value == 9.0
    assert v.value == 4.0


def test_bifurcation_id_not_local_is_ignored():
    g = name("g")
    tree = ASTNode(NodeType.MINUS, children=[g, ASTNode(NodeType.INTEGER, value=2)])
    set_local_parameters_for_bifurcation(tree, {"k": 1.0}, "g", 9.0)
    assert g.type is NodeType.NAME
    assert tree.right.type is NodeType.REAL


@pytest.mark.parametrize("node_type", [NodeType.REAL, NodeType.NAME_TIME])
def test_other_nodes_untouched(node_type):
    node = ASTNode(node_type, value=1.5)
    set_local_parameters(node, {"x": 1.0})
    assert node.type is node_type
    assert node.value == 1.5