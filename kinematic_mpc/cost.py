"""
MPC objective.

Three groups of weighted squared terms:
  - tracking: cte, epsi and speed deviation from their references (all N steps)
  - effort:   steering and acceleration magnitude (N-1 actuations)
  - jerk:     change between consecutive actuations (N-2 pairs)
"""

from .config import MPCConfig
from .layout import VariableLayout


def build_cost(layout: VariableLayout, w, config: MPCConfig):
    """Scalar cost of a full variable vector (numeric or symbolic)."""
    N = layout.horizon
    cost = 0.0

    for t in range(N):
        cost += config.cte_weight * (w[layout.index('cte', t)] - config.ref_cte)**2
        cost += config.epsi_weight * (w[layout.index('epsi', t)] - config.ref_epsi)**2
        cost += config.velocity_weight * (w[layout.index('v', t)] - config.ref_v)**2

    for t in range(N - 1):
        cost += config.steering_weight * w[layout.index('delta', t)]**2
        cost += config.acceleration_weight * w[layout.index('a', t)]**2

    for t in range(N - 2):
        d_delta = w[layout.index('delta', t + 1)] - w[layout.index('delta', t)]
        d_a = w[layout.index('a', t + 1)] - w[layout.index('a', t)]
        cost += config.steering_rate_weight * d_delta**2
        cost += config.acceleration_rate_weight * d_a**2

    return cost
