"""
Variable and constraint bounds.

States are effectively unbounded (+-state_bound), steering is limited to
+-max_steering and acceleration to +-max_acceleration. Constraint bounds
are [0, 0] everywhere except the six initial-state residuals, which are
pinned to the measured state.
"""

from typing import Tuple

import numpy as np

from .config import MPCConfig
from .layout import VariableLayout
from .types import VehicleState


def variable_bounds(layout: VariableLayout,
                    config: MPCConfig) -> Tuple[np.ndarray, np.ndarray]:
    """Lower/upper bounds for every unknown."""
    lbx = np.empty(layout.n_vars)
    ubx = np.empty(layout.n_vars)

    for name in layout.state_fields:
        lbx[layout.slice(name)] = -config.state_bound
        ubx[layout.slice(name)] = config.state_bound

    lbx[layout.slice('delta')] = -config.max_steering
    ubx[layout.slice('delta')] = config.max_steering

    lbx[layout.slice('a')] = -config.max_acceleration
    ubx[layout.slice('a')] = config.max_acceleration

    return lbx, ubx


def constraint_bounds(layout: VariableLayout,
                      state: VehicleState) -> Tuple[np.ndarray, np.ndarray]:
    """Equality bounds: measured state at step 0, zero residuals after."""
    lbg = np.zeros(layout.n_constraints)
    ubg = np.zeros(layout.n_constraints)

    for name, value in zip(layout.state_fields, state.as_array()):
        i = layout.constraint_index(name, 0)
        lbg[i] = value
        ubg[i] = value

    return lbg, ubg
