"""
Boundary between the MPC formulation and the NLP solver.

The controller hands an NLPProblem (symbolic decision vector, cost and
constraint expressions, bounds, initial guess) to an NLPSolver and gets
back an NLPSolution carrying the raw solver status. classify_status()
maps that raw status onto the SolverStatus taxonomy.

IpoptSolver is the production adapter: CasADi supplies exact
gradients/Jacobians of the expression graph and IPOPT solves the
problem under a wall-clock budget.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import casadi as ca
import numpy as np

from .exceptions import SolverStatus

logger = logging.getLogger(__name__)

_CONVERGED = {
    'Solve_Succeeded',
    'Solved_To_Acceptable_Level',
}
_TIMED_OUT = {
    'Maximum_WallTime_Exceeded',
    'Maximum_CpuTime_Exceeded',
    'Maximum_Iterations_Exceeded',
}
_INFEASIBLE = {
    'Infeasible_Problem_Detected',
    'Restoration_Failed',
}

# Reported when the solver raises instead of returning a status
EXCEPTION_STATUS = 'Solver_Exception'


def classify_status(raw_status: str) -> SolverStatus:
    """Map a raw IPOPT return status onto SolverStatus.

    Anything unrecognized is a numerical failure; it is never trusted.
    """
    if raw_status in _CONVERGED:
        return SolverStatus.CONVERGED
    if raw_status in _TIMED_OUT:
        return SolverStatus.TIMED_OUT
    if raw_status in _INFEASIBLE:
        return SolverStatus.INFEASIBLE
    return SolverStatus.NUMERICAL_FAILURE


@dataclass
class NLPProblem:
    """min f(x)  s.t.  lbg <= g(x) <= ubg,  lbx <= x <= ubx"""
    x: object              # CasADi SX/MX decision vector
    f: object              # Scalar cost expression
    g: object              # Constraint residual expression
    x0: np.ndarray         # Initial guess
    lbx: np.ndarray
    ubx: np.ndarray
    lbg: np.ndarray
    ubg: np.ndarray


@dataclass
class NLPSolution:
    """Raw solver output, before status classification."""
    x: np.ndarray
    cost: float
    raw_status: str
    iterations: int = 0
    solve_time: float = 0.0
    stats: dict = field(default_factory=dict)


class NLPSolver(ABC):
    """Abstract solver adapter.

    Implementations must return (never raise) when the problem is not
    solved, reporting the reason through NLPSolution.raw_status, and must
    respect their time budget rather than block.
    """

    name: str = "base"

    @abstractmethod
    def solve(self, problem: NLPProblem) -> NLPSolution:
        ...


class IpoptSolver(NLPSolver):
    """IPOPT via CasADi nlpsol, rebuilt per problem (no warm start)."""

    name = "ipopt"

    def __init__(self, max_solve_time: float = 0.5, max_iter: int = 3000,
                 print_level: int = 0):
        self.max_solve_time = max_solve_time
        self.max_iter = max_iter
        self.print_level = print_level

    def options(self) -> dict:
        return {
            'ipopt.print_level': self.print_level,
            'ipopt.sb': 'yes',
            'print_time': 0,
            'ipopt.max_iter': self.max_iter,
            'ipopt.max_wall_time': self.max_solve_time,
            'error_on_fail': False,
        }

    def solve(self, problem: NLPProblem) -> NLPSolution:
        nlp = {'x': problem.x, 'f': problem.f, 'g': problem.g}
        solver = ca.nlpsol('mpc', 'ipopt', nlp, self.options())

        t_start = time.time()
        try:
            sol = solver(x0=problem.x0, lbx=problem.lbx, ubx=problem.ubx,
                         lbg=problem.lbg, ubg=problem.ubg)
        except RuntimeError as e:
            logger.warning("IPOPT raised during solve: %s", e)
            return NLPSolution(
                x=np.asarray(problem.x0, dtype=float).copy(),
                cost=float('nan'),
                raw_status=EXCEPTION_STATUS,
                solve_time=time.time() - t_start,
            )
        solve_time = time.time() - t_start

        stats = solver.stats()
        return NLPSolution(
            x=np.array(sol['x']).flatten(),
            cost=float(sol['f']),
            raw_status=stats.get('return_status', 'unknown'),
            iterations=int(stats.get('iter_count', 0)),
            solve_time=solve_time,
            stats=stats,
        )
