"""
Vehicle state and actuation containers.

State:     [x, y, psi, v, cte, epsi]
  x, y  - position (vehicle-local frame)
  psi   - heading
  v     - speed
  cte   - cross-track error
  epsi  - heading error

Actuation: [delta, a]
  delta - steering angle (rad)
  a     - acceleration / throttle (normalized)
"""

from dataclasses import dataclass, astuple

import numpy as np

STATE_FIELDS = ('x', 'y', 'psi', 'v', 'cte', 'epsi')
ACTUATION_FIELDS = ('delta', 'a')


@dataclass(frozen=True)
class VehicleState:
    x: float = 0.0
    y: float = 0.0
    psi: float = 0.0
    v: float = 0.0
    cte: float = 0.0
    epsi: float = 0.0

    def as_array(self) -> np.ndarray:
        return np.array(astuple(self), dtype=float)

    @classmethod
    def from_array(cls, values) -> 'VehicleState':
        """Build a state from a length-6 sequence in STATE_FIELDS order."""
        values = np.asarray(values, dtype=float).ravel()
        if values.shape[0] != len(STATE_FIELDS):
            raise ValueError(
                f"State must have {len(STATE_FIELDS)} values "
                f"{STATE_FIELDS}, got {values.shape[0]}")
        return cls(*(float(v) for v in values))


@dataclass(frozen=True)
class Actuation:
    delta: float = 0.0
    a: float = 0.0

    def as_array(self) -> np.ndarray:
        return np.array([self.delta, self.a], dtype=float)
