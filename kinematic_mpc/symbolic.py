"""
Numeric/symbolic dispatch for expressions evaluated under CasADi AD.

The vehicle model, cost and constraints are written once and evaluated
either on plain floats / numpy arrays or on CasADi SX/MX symbols. The
backend is picked from the argument types, never from their values, so
the resulting expression graph has no branches on the unknowns.
"""

import casadi as ca
import numpy as np

SYMBOLIC_TYPES = (ca.SX, ca.MX)


def is_symbolic(*values) -> bool:
    return any(isinstance(v, SYMBOLIC_TYPES) for v in values)


def cos(value):
    return ca.cos(value) if is_symbolic(value) else np.cos(value)


def sin(value):
    return ca.sin(value) if is_symbolic(value) else np.sin(value)


def atan(value):
    return ca.atan(value) if is_symbolic(value) else np.arctan(value)


def stack(values):
    """Stack scalar expressions into a column (CasADi) or 1-D array."""
    if is_symbolic(*values):
        return ca.vertcat(*values)
    return np.array([float(v) for v in values])
