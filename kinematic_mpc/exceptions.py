"""
Error taxonomy for the MPC core.

Solver outcomes are classified into a SolverStatus. Only CONVERGED
results expose an actuation; every other status maps to a SolverError
subclass so callers can tell a timeout from an infeasible problem and
choose their own degradation policy (hold last command, brake, ...).
"""

from enum import Enum


class SolverStatus(Enum):
    """Classified outcome of one NLP solve."""
    CONVERGED = "converged"
    TIMED_OUT = "timed_out"
    INFEASIBLE = "infeasible"
    NUMERICAL_FAILURE = "numerical_failure"


class MPCError(Exception):
    """Base class for all kinematic_mpc errors."""


class MPCConfigError(MPCError, ValueError):
    """Malformed configuration (horizon, timestep, weights, limits)."""


class SolverError(MPCError):
    """The solver did not converge; the returned iterate is not usable."""

    status = SolverStatus.NUMERICAL_FAILURE

    def __init__(self, message: str, raw_status: str = ""):
        super().__init__(message)
        self.raw_status = raw_status


class SolverTimedOut(SolverError):
    status = SolverStatus.TIMED_OUT


class SolverInfeasible(SolverError):
    status = SolverStatus.INFEASIBLE


class SolverNumericalFailure(SolverError):
    status = SolverStatus.NUMERICAL_FAILURE


_ERRORS = {
    SolverStatus.TIMED_OUT: SolverTimedOut,
    SolverStatus.INFEASIBLE: SolverInfeasible,
    SolverStatus.NUMERICAL_FAILURE: SolverNumericalFailure,
}


def error_for_status(status: SolverStatus, raw_status: str = "") -> SolverError:
    """Build the SolverError matching a non-converged status."""
    if status is SolverStatus.CONVERGED:
        raise ValueError("CONVERGED has no associated error")
    cls = _ERRORS[status]
    return cls(f"MPC solve failed: {status.value} ({raw_status or 'no status'})",
               raw_status=raw_status)
