"""
Kinematic MPC - receding-horizon steering/throttle controller.

Builds the nonlinear program for a kinematic bicycle tracking a cubic
reference path, solves it with IPOPT through CasADi and returns the
first-step actuation plus the predicted trajectory.

Key components:
- MPCConfig / load_config: immutable configuration, YAML loader
- KinematicBicycle: discrete-time vehicle model
- VariableLayout: flat variable/constraint index mapping
- FGEval: cost + dynamics-constraint evaluator
- MPCController: per-cycle solve orchestrator returning MPCResult
"""

from .config import MPCConfig, load_config
from .constraints import FGEval
from .dynamics import KinematicBicycle
from .exceptions import (
    MPCConfigError,
    MPCError,
    SolverError,
    SolverInfeasible,
    SolverNumericalFailure,
    SolverStatus,
    SolverTimedOut,
)
from .layout import VariableLayout
from .nlp import IpoptSolver, NLPProblem, NLPSolution, NLPSolver
from .path import ReferencePath
from .solver import MPCController, MPCResult
from .types import Actuation, VehicleState

__all__ = [
    'Actuation',
    'FGEval',
    'IpoptSolver',
    'KinematicBicycle',
    'MPCConfig',
    'MPCConfigError',
    'MPCController',
    'MPCError',
    'MPCResult',
    'NLPProblem',
    'NLPSolution',
    'NLPSolver',
    'ReferencePath',
    'SolverError',
    'SolverInfeasible',
    'SolverNumericalFailure',
    'SolverStatus',
    'SolverTimedOut',
    'VariableLayout',
    'VehicleState',
    'load_config',
]
