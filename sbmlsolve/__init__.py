"""Numerical building blocks for simulating biochemical reaction network models."""

__version__ = "0.1.0"

__all__ = [
    "ast",
    "delay",
    "initial_assignment",
    "interp",
    "model",
    "result",
    "rpn",
    "rpn_adaptive",
    "temp_value",
]