"""
MPC configuration and YAML loader.

MPCConfig is immutable and validated on construction, so a malformed
horizon or timestep fails before any optimization problem is built.

load_config() merges built-in defaults, config/mpc.yaml and keyword
overrides. The file is searched in:
    1. <sys.prefix>/share/kinematic_mpc/config (installed)
    2. Source tree config/ (development)

Usage:
    from kinematic_mpc.config import load_config
    config = load_config(horizon=12, silent=False)
"""

import math
import os
import sys
from dataclasses import dataclass, fields

import yaml

from .exceptions import MPCConfigError

CONFIG_FILENAME = 'mpc.yaml'
EXPRESSION_GRAPHS = ('sx', 'mx')


@dataclass(frozen=True)
class MPCConfig:
    """Receding-horizon controller configuration."""
    # Horizon
    horizon: int = 10
    dt: float = 0.1

    # Vehicle: distance from front axle to CoG, calibrated so the
    # simulated turning radius matches the measured one.
    lf: float = 2.67

    # Reference values to reach and maintain
    ref_cte: float = 0.0
    ref_epsi: float = 0.0
    ref_v: float = 100.0

    # Tracking weights
    cte_weight: float = 5000.0
    epsi_weight: float = 1000.0
    velocity_weight: float = 1.0
    # Actuator magnitude weights
    steering_weight: float = 1.0
    acceleration_weight: float = 1.0
    # Actuator change (jerk) weights
    steering_rate_weight: float = 1000.0
    acceleration_rate_weight: float = 10.0

    # Limits
    max_steering: float = 25.0 * math.pi / 180.0
    max_acceleration: float = 1.0
    state_bound: float = 1.0e10

    # Solver
    max_solve_time: float = 0.5
    max_iter: int = 3000
    # CasADi expression graph for the evaluator: 'sx' (scalar graph) or
    # 'mx' (matrix graph). IPOPT gets exact sparse derivatives either way;
    # sx is faster to evaluate for problems of this size.
    expression_graph: str = 'sx'
    print_level: int = 0

    # Suppress the per-solve "Cost ..." log line. Defaults to quiet, unlike
    # a console controller that prints it every cycle; use set_silent(False).
    silent: bool = True

    def __post_init__(self):
        if isinstance(self.horizon, bool) or not isinstance(self.horizon, int):
            raise MPCConfigError(f"horizon must be an int, got {self.horizon!r}")
        if self.horizon < 2:
            raise MPCConfigError(f"horizon must be >= 2, got {self.horizon}")
        for name in ('dt', 'lf', 'max_steering', 'max_acceleration',
                     'state_bound', 'max_solve_time'):
            value = getattr(self, name)
            if not value > 0:
                raise MPCConfigError(f"{name} must be > 0, got {value!r}")
        for name in self.weight_names():
            value = getattr(self, name)
            if not value >= 0:
                raise MPCConfigError(f"{name} must be >= 0, got {value!r}")
        if self.max_iter < 1:
            raise MPCConfigError(f"max_iter must be >= 1, got {self.max_iter}")
        if self.expression_graph not in EXPRESSION_GRAPHS:
            raise MPCConfigError(
                f"expression_graph must be one of {EXPRESSION_GRAPHS}, "
                f"got {self.expression_graph!r}")
        if not isinstance(self.silent, bool):
            raise MPCConfigError(f"silent must be a bool, got {self.silent!r}")

    @staticmethod
    def weight_names():
        return ('cte_weight', 'epsi_weight', 'velocity_weight',
                'steering_weight', 'acceleration_weight',
                'steering_rate_weight', 'acceleration_rate_weight')


def load_config(config_path=None, **overrides):
    """Load an MPCConfig from YAML plus keyword overrides.

    Args:
        config_path: Path to a YAML file. If None, searches the standard
            locations for mpc.yaml; a missing file yields defaults.
        **overrides: Field values applied on top of the file.

    Returns:
        Validated MPCConfig.

    Raises:
        MPCConfigError: unknown keys, unreadable YAML or invalid values.
    """
    if config_path is None:
        config_path = _find_config_file(CONFIG_FILENAME)

    values = {}
    if config_path is not None:
        if not os.path.isfile(config_path):
            raise MPCConfigError(f"Config file not found: {config_path}")
        try:
            with open(config_path, 'r') as f:
                file_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise MPCConfigError(f"Failed to parse {config_path}: {e}") from e
        if not isinstance(file_config, dict):
            raise MPCConfigError(f"{config_path} must contain a mapping")
        # Sections (horizon:, weights:, ...) are flattened one level deep
        for key, value in file_config.items():
            if isinstance(value, dict):
                values.update(value)
            else:
                values[key] = value
        values = _degrees_to_radians(values, config_path)

    values.update(_degrees_to_radians(overrides, 'overrides'))

    known = {f.name for f in fields(MPCConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise MPCConfigError(f"Unknown config keys: {unknown}")

    try:
        return MPCConfig(**values)
    except TypeError as e:
        raise MPCConfigError(str(e)) from e


def _degrees_to_radians(values, source):
    """Replace steering_limit_deg with max_steering within one source."""
    if 'steering_limit_deg' not in values:
        return values
    if 'max_steering' in values:
        raise MPCConfigError(
            f"{source} sets both steering_limit_deg and max_steering")
    values = dict(values)
    degrees = values.pop('steering_limit_deg')
    try:
        values['max_steering'] = float(degrees) * math.pi / 180.0
    except (TypeError, ValueError) as e:
        raise MPCConfigError(
            f"steering_limit_deg must be a number, got {degrees!r}") from e
    return values


def _config_search_dirs():
    """Return directories to search for config files."""
    return [
        # 1. Installed data files
        os.path.join(sys.prefix, 'share', 'kinematic_mpc', 'config'),
        # 2. Source tree (development)
        os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'config')),
    ]


def _find_config_file(filename):
    """Search for a config file in standard locations."""
    for search_dir in _config_search_dirs():
        candidate = os.path.join(search_dir, filename)
        if os.path.isfile(candidate):
            return candidate
    return None
