"""
Kinematic bicycle model with path-error states.

State: [x, y, psi, v, cte, epsi]
Control: [delta, a]

Forward-Euler discretization over one timestep dt:
    x'    = x + v * cos(psi) * dt
    y'    = y + v * sin(psi) * dt
    psi'  = psi + v / Lf * delta * dt
    v'    = v + a * dt
    cte'  = (f(x) - y) + v * sin(epsi) * dt
    epsi' = (psi - psi_des(x)) + v / Lf * delta * dt

where f is the reference path and psi_des its tangent heading, both
evaluated at the current x. Only elementary arithmetic and trig are used
so the same code builds CasADi expressions for the solver.
"""

from typing import Sequence

import numpy as np

from . import symbolic
from .path import ReferencePath
from .types import Actuation, VehicleState


class KinematicBicycle:
    """Discrete-time kinematic bicycle used by the MPC constraints."""

    def __init__(self, lf: float = 2.67, dt: float = 0.1):
        self.lf = lf
        self.dt = dt
        self.nx = 6  # [x, y, psi, v, cte, epsi]
        self.nu = 2  # [delta, a]

    def predict(self, state: Sequence, delta, a, path: ReferencePath):
        """Next state from state at t and actuation at t.

        Args:
            state: (x, y, psi, v, cte, epsi) as floats or CasADi symbols
            delta: Steering angle at t
            a: Acceleration at t
            path: Reference path

        Returns:
            Tuple (x, y, psi, v, cte, epsi) at t + 1.
        """
        x, y, psi, v, cte, epsi = state
        dt = self.dt
        f0 = path.evaluate(x)
        psides = path.heading(x)
        yaw_step = v / self.lf * delta * dt
        return (
            x + v * symbolic.cos(psi) * dt,
            y + v * symbolic.sin(psi) * dt,
            psi + yaw_step,
            v + a * dt,
            (f0 - y) + v * symbolic.sin(epsi) * dt,
            (psi - psides) + yaw_step,
        )

    def step(self, state: VehicleState, actuation: Actuation,
             path: ReferencePath) -> VehicleState:
        """Numeric one-step prediction."""
        next_state = self.predict(
            state.as_array(), actuation.delta, actuation.a, path)
        return VehicleState.from_array(next_state)

    def simulate(self, x0: VehicleState, actuations: Sequence[Actuation],
                 path: ReferencePath) -> np.ndarray:
        """
        Roll the model forward from x0 with an actuation sequence.

        Returns:
            States trajectory [len(actuations) + 1, 6]
        """
        n = len(actuations)
        states = np.zeros((n + 1, self.nx))
        states[0] = x0.as_array()
        state = x0
        for k, actuation in enumerate(actuations):
            state = self.step(state, actuation, path)
            states[k + 1] = state.as_array()
        return states
