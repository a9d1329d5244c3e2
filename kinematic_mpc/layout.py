"""
Flat variable/constraint layout for the MPC nonlinear program.

The solver sees one vector of unknowns. States are stored field-major
over the horizon, followed by the actuators:

    [x_0..x_{N-1}, y_*, psi_*, v_*, cte_*, epsi_*, delta_0..delta_{N-2}, a_*]

Constraint residuals are stored step-major, six per step:

    [x_0, y_0, psi_0, v_0, cte_0, epsi_0, x_1, ...]

so residuals 0-5 are the initial-state pins. Both mappings are built once
from N and shared by the bounds, cost and constraint builders.
"""

from typing import Dict, Tuple

from .types import ACTUATION_FIELDS, STATE_FIELDS


class VariableLayout:
    """Named-field to flat-index mapping for a horizon of N steps."""

    def __init__(self, horizon: int):
        if horizon < 2:
            raise ValueError(f"horizon must be >= 2, got {horizon}")
        self.horizon = horizon
        self.state_fields = STATE_FIELDS
        self.actuation_fields = ACTUATION_FIELDS

        offsets: Dict[str, int] = {}
        lengths: Dict[str, int] = {}
        start = 0
        for name in STATE_FIELDS:
            offsets[name] = start
            lengths[name] = horizon
            start += horizon
        for name in ACTUATION_FIELDS:
            offsets[name] = start
            lengths[name] = horizon - 1
            start += horizon - 1
        self._offsets = offsets
        self._lengths = lengths

        self.n_vars = start
        self.n_constraints = horizon * len(STATE_FIELDS)

    # --- Variables ---

    def offset(self, name: str) -> int:
        return self._offsets[name]

    def length(self, name: str) -> int:
        return self._lengths[name]

    def slice(self, name: str) -> slice:
        start = self._offsets[name]
        return slice(start, start + self._lengths[name])

    def index(self, name: str, t: int) -> int:
        """Flat index of field `name` at step t."""
        if not 0 <= t < self._lengths[name]:
            raise IndexError(
                f"step {t} out of range for '{name}' (0..{self._lengths[name] - 1})")
        return self._offsets[name] + t

    def state_at(self, w, t: int) -> Tuple:
        """(x, y, psi, v, cte, epsi) at step t, read from `w`."""
        return tuple(w[self.index(name, t)] for name in STATE_FIELDS)

    def actuation_at(self, w, t: int) -> Tuple:
        """(delta, a) at step t."""
        return tuple(w[self.index(name, t)] for name in ACTUATION_FIELDS)

    # --- Constraints ---

    def constraint_index(self, name: str, t: int) -> int:
        if not 0 <= t < self.horizon:
            raise IndexError(f"step {t} out of range (0..{self.horizon - 1})")
        return t * len(STATE_FIELDS) + STATE_FIELDS.index(name)

    def __repr__(self):
        return (f"VariableLayout(horizon={self.horizon}, n_vars={self.n_vars}, "
                f"n_constraints={self.n_constraints})")
