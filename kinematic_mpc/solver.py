"""
Receding-horizon MPC controller.

Every call to MPCController.solve() builds a fresh problem from the
measured state and the reference path:

    layout -> bounds -> FGEval (cost + dynamics constraints)
           -> NLPSolver -> classify status -> extract first actuation

Only the first actuation of the horizon is meant to be applied; the next
cycle re-solves from the new measured state. Nothing is carried between
solves (no warm start).

The solver status is classified into SolverStatus and gates the result:
a non-converged MPCResult raises the matching SolverError when its
actuation or trajectory is read, so a failed solve can never be applied
by accident. What to do instead (hold, brake, ...) is the caller's call.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple, Union

import casadi as ca
import numpy as np

from .bounds import constraint_bounds, variable_bounds
from .config import MPCConfig
from .constraints import FGEval
from .exceptions import SolverStatus, error_for_status
from .layout import VariableLayout
from .nlp import IpoptSolver, NLPProblem, NLPSolver, classify_status
from .path import ReferencePath
from .types import Actuation, VehicleState

logger = logging.getLogger(__name__)


def extract_control(layout: VariableLayout,
                    w: np.ndarray) -> Tuple[Actuation, List[Tuple[float, float]]]:
    """First-step actuation and predicted (x, y) for steps 1..N-1."""
    actuation = Actuation(
        delta=float(w[layout.index('delta', 0)]),
        a=float(w[layout.index('a', 0)]),
    )
    trajectory = [
        (float(w[layout.index('x', t)]), float(w[layout.index('y', t)]))
        for t in range(1, layout.horizon)
    ]
    return actuation, trajectory


@dataclass
class MPCResult:
    """Outcome of one MPC solve.

    `solution` is the solver's final iterate whatever the status; the
    actuation accessors only work when status is CONVERGED.
    """
    status: SolverStatus
    raw_status: str
    cost: float
    solution: np.ndarray
    solve_time: float = 0.0
    iterations: int = 0
    _actuation: Optional[Actuation] = field(default=None, repr=False)
    _trajectory: Optional[List[Tuple[float, float]]] = field(default=None, repr=False)

    @property
    def success(self) -> bool:
        return self.status is SolverStatus.CONVERGED

    def raise_for_status(self):
        """Raise the SolverError matching a non-converged status."""
        if not self.success:
            raise error_for_status(self.status, self.raw_status)

    @property
    def actuation(self) -> Actuation:
        self.raise_for_status()
        return self._actuation

    @property
    def steering(self) -> float:
        return self.actuation.delta

    @property
    def acceleration(self) -> float:
        return self.actuation.a

    @property
    def predicted_trajectory(self) -> List[Tuple[float, float]]:
        self.raise_for_status()
        return list(self._trajectory)

    def as_list(self) -> List[float]:
        """Flat [delta, a, x1, y1, ..., x_{N-1}, y_{N-1}] command vector."""
        actuation = self.actuation
        values = [actuation.delta, actuation.a]
        for x, y in self._trajectory:
            values.extend((x, y))
        return values


class MPCController:
    """
    Kinematic-bicycle MPC tracking a cubic reference path.

    Args:
        config: Immutable controller configuration (defaults if None)
        solver: NLP solver adapter (IPOPT via CasADi if None)
    """

    def __init__(self, config: Optional[MPCConfig] = None,
                 solver: Optional[NLPSolver] = None):
        self.config = config if config is not None else MPCConfig()
        self.layout = VariableLayout(self.config.horizon)
        if solver is None:
            solver = IpoptSolver(
                max_solve_time=self.config.max_solve_time,
                max_iter=self.config.max_iter,
                print_level=self.config.print_level,
            )
        self.solver = solver

    def set_silent(self, silent: bool):
        """Toggle the per-solve cost log line. Call between solves only."""
        self.config = replace(self.config, silent=silent)

    def build_problem(self, state: VehicleState, path: ReferencePath) -> NLPProblem:
        """Assemble symbols, evaluator, bounds and initial guess."""
        layout = self.layout
        sym = ca.SX if self.config.expression_graph == 'sx' else ca.MX
        w = sym.sym('w', layout.n_vars)

        fg_eval = FGEval(layout, path, self.config)
        f, g = fg_eval(w)

        lbx, ubx = variable_bounds(layout, self.config)
        lbg, ubg = constraint_bounds(layout, state)

        return NLPProblem(
            x=w, f=f, g=g,
            x0=np.zeros(layout.n_vars),
            lbx=lbx, ubx=ubx, lbg=lbg, ubg=ubg,
        )

    def solve(self, state: Union[VehicleState, Sequence[float]],
              coeffs: Union[ReferencePath, Sequence[float]]) -> MPCResult:
        """
        Solve one control cycle.

        Args:
            state: Measured [x, y, psi, v, cte, epsi]
            coeffs: Reference path or its 4 cubic coefficients

        Returns:
            MPCResult; check `success` (or call raise_for_status())
            before using the actuation.

        Raises:
            ValueError: malformed state or coefficients.
        """
        if not isinstance(state, VehicleState):
            state = VehicleState.from_array(state)
        path = coeffs if isinstance(coeffs, ReferencePath) else ReferencePath(coeffs)

        problem = self.build_problem(state, path)
        logger.debug("MPC problem: %d variables, %d constraints, solver=%s",
                     self.layout.n_vars, self.layout.n_constraints, self.solver.name)

        solution = self.solver.solve(problem)
        status = classify_status(solution.raw_status)
        logger.debug("Solver returned %s -> %s in %.3fs",
                     solution.raw_status, status.value, solution.solve_time)

        if not self.config.silent:
            logger.info("Cost %s", solution.cost)

        actuation = trajectory = None
        if status is SolverStatus.CONVERGED:
            actuation, trajectory = extract_control(self.layout, solution.x)
        else:
            logger.warning("MPC solve not converged: %s (%s)",
                           status.value, solution.raw_status)

        return MPCResult(
            status=status,
            raw_status=solution.raw_status,
            cost=solution.cost,
            solution=solution.x,
            solve_time=solution.solve_time,
            iterations=solution.iterations,
            _actuation=actuation,
            _trajectory=trajectory,
        )
