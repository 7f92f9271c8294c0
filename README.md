# sbmlsolve

`sbmlsolve` provides numerical building blocks for simulating biochemical
reaction network models. It operates on model objects that you have already
built in Python. It does not read model files and has no command-line tool.

## Modules

- `sbmlsolve.ast` defines the expression tree: `ASTNode` and `NodeType`.
  - `set_local_parameters` replaces local parameter names with their values in place and turns integer nodes into reals.
  - `set_local_parameters_for_bifurcation` does the same, except that one named parameter gets a value you supply.
  - `double_eq` compares two numbers within a tolerance of `1e-8`.
- `sbmlsolve.model` defines the state variables `Species`, `Parameter`, `Compartment` and `SpeciesReference`. It also defines `Reaction`, `Rule` and `EventAssignment`.
  - `create_calc_object_list` returns a `CalcObjects`. Its `all_*` lists hold the objects that vary. Its `var_*` lists hold the objects an integrator advances.
  - `forward_values` copies each object's `temp_value` into its `value`.
- `sbmlsolve.rpn` defines postfix `Equation` objects. An equation is built from `Operand`, `DelayOperand` and `NodeType` operators.
  - `evaluate` computes an equation for a given step and Runge-Kutta stage.
  - `delay(...)` values are read from the per-step history. A `Clock` records the look-back time used by explicit delay equations.
  - `apply_operator` applies a single operator to a stack.
- `sbmlsolve.rpn_adaptive` provides `evaluate_adaptive`, the variant for variable step sizes. It supports the `time` symbol and interpolates delayed values linearly over `SimulationResult.values_time_fordelay`.
- `sbmlsolve.temp_value` handles the end of a step.
  - `calc_temp_value` combines stage derivatives (`k`) into the next state. It uses classical fourth-order weights or a single Euler stage.
  - `calc_sum_error` estimates the error of an embedded step. Order 5 uses Fehlberg weights and order 6 uses Cash-Karp weights; any other order raises `ValueError`.
  - `calc_error` and `calc_eps` are the helper routines used by that estimate.
- `sbmlsolve.initial_assignment` defines `InitialAssignment`.
  - `calc_initial_assignment` and `calc_initial_assignment_adaptive` evaluate initial assignments in dependency order. Circular dependencies raise `ValueError`.
  - `assign_ok` checks whether an assignment's dependencies have all been assigned.
- `sbmlsolve.delay` provides `initialize_delay_values`, which fills delay history rows with current values.
- `sbmlsolve.interp` provides linear interpolation for delayed values (`approximate_delay_linearly`) and for printed results (`approximate_print_result_linearly`).
- `sbmlsolve.result` defines `SimulationResult`.
  - `search_max`, `search_local_max` and `search_local_min` query a species column.
  - `write_result_list` writes the column list to a file.

## Examples

Evaluate a postfix equation:

```python
from sbmlsolve.ast import NodeType
from sbmlsolve.rpn import Clock, Equation, Operand, evaluate

eq = Equation([Operand.const(2), Operand.const(3), NodeType.PLUS])
evaluate(eq, dt=0.1, cycle=0, rk_order=0, clock=Clock())   # 5.0
```

Take one Euler step by hand:

```python
from sbmlsolve.model import Species, forward_values
from sbmlsolve.temp_value import calc_temp_value

a = Species("A", value=1.0)
a.k[0] = 2.0                                   # derivative for the step
calc_temp_value([a], [], [], [], 0.5, use_rk=False)
forward_values([a], [], [], [])
a.value                                        # 2.0
```

## What it does not do

The package contains no driver that runs a complete simulation. In particular, it lacks the following:

- It does not compute stage derivatives from reaction rates and rules.
- It does not solve algebraic rules.
- It does not process events.
- It does not parse model files.
- It provides no command to run.

Stage derivatives must be placed in each object's `k` list before you call the functions in `sbmlsolve.temp_value`.

## Installing and testing

```
pip install .
pip install .[test]
pytest
```