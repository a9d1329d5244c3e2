"""
Dynamics equality constraints and the cost+constraint evaluator.

Residuals at step 0 are the declared initial state itself; the bounds pin
them to the measured state. For t = 1..N-1 the residual is

    declared_state[t] - model.predict(declared_state[t-1], actuation[t-1])

and is bounded to [0, 0], which restricts the solver to dynamically
consistent trajectories starting at the measured state.
"""

from .config import MPCConfig
from .cost import build_cost
from .dynamics import KinematicBicycle
from .layout import VariableLayout
from .path import ReferencePath
from . import symbolic


def build_constraints(layout: VariableLayout, w, path: ReferencePath,
                      model: KinematicBicycle):
    """Constraint residual vector of length layout.n_constraints."""
    residuals = [None] * layout.n_constraints

    for name, value in zip(layout.state_fields, layout.state_at(w, 0)):
        residuals[layout.constraint_index(name, 0)] = value

    for t in range(1, layout.horizon):
        declared = layout.state_at(w, t)
        delta0, a0 = layout.actuation_at(w, t - 1)
        predicted = model.predict(layout.state_at(w, t - 1), delta0, a0, path)
        for name, x1, x1_pred in zip(layout.state_fields, declared, predicted):
            residuals[layout.constraint_index(name, t)] = x1 - x1_pred

    return symbolic.stack(residuals)


class FGEval:
    """Pure cost + constraint evaluator closing over the reference path.

    Calling it on a CasADi symbol builds the expression graph the solver
    differentiates; calling it on a numpy array evaluates it numerically.
    """

    def __init__(self, layout: VariableLayout, path: ReferencePath,
                 config: MPCConfig):
        self.layout = layout
        self.path = path
        self.config = config
        self.model = KinematicBicycle(lf=config.lf, dt=config.dt)

    def cost(self, w):
        return build_cost(self.layout, w, self.config)

    def constraints(self, w):
        return build_constraints(self.layout, w, self.path, self.model)

    def __call__(self, w):
        return self.cost(w), self.constraints(w)
