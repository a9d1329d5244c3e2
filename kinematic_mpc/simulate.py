"""
Closed-loop receding-horizon simulation.

Solves, applies only the first actuation through the kinematic model,
re-measures cte/epsi against the reference path and repeats. Stops at the
first solve that does not converge and reports its status.

Usage:
    mpc_simulate --steps 30 --v0 20 --coeffs 0.5 0 0 0
"""

import argparse
import logging
from dataclasses import dataclass
from typing import List, Optional

from .config import load_config
from .dynamics import KinematicBicycle
from .exceptions import SolverStatus
from .path import ReferencePath
from .solver import MPCController
from .types import Actuation, VehicleState

logger = logging.getLogger(__name__)


@dataclass
class CycleRecord:
    """One control cycle of the closed loop."""
    step: int
    state: VehicleState
    status: SolverStatus
    cost: float
    steering: Optional[float] = None
    acceleration: Optional[float] = None


def measure_errors(state: VehicleState, path: ReferencePath) -> VehicleState:
    """Recompute cte and epsi of a state against the path."""
    return VehicleState(
        x=state.x, y=state.y, psi=state.psi, v=state.v,
        cte=float(path.evaluate(state.x) - state.y),
        epsi=float(state.psi - path.heading(state.x)),
    )


def run_closed_loop(controller: MPCController, state: VehicleState,
                    path: ReferencePath, steps: int) -> List[CycleRecord]:
    """Run `steps` control cycles; the last record holds any failure."""
    model = KinematicBicycle(lf=controller.config.lf, dt=controller.config.dt)
    records = []
    state = measure_errors(state, path)

    for step in range(steps):
        result = controller.solve(state, path)
        if not result.success:
            records.append(CycleRecord(step, state, result.status, result.cost))
            logger.warning("Closed loop stopped at step %d: %s", step, result.raw_status)
            break

        actuation = result.actuation
        records.append(CycleRecord(step, state, result.status, result.cost,
                                   steering=actuation.delta,
                                   acceleration=actuation.a))
        state = measure_errors(model.step(state, actuation, path), path)

    return records


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Closed-loop kinematic MPC simulation")
    parser.add_argument("--config", default=None, help="Path to an mpc.yaml config file")
    parser.add_argument("--steps", type=int, default=20, help="Number of control cycles")
    parser.add_argument("--v0", type=float, default=0.0, help="Initial speed")
    parser.add_argument("--y0", type=float, default=0.0, help="Initial lateral offset")
    parser.add_argument("--psi0", type=float, default=0.0, help="Initial heading (rad)")
    parser.add_argument("--coeffs", type=float, nargs=4, default=[0.0, 0.0, 0.0, 0.0],
                        metavar=("C0", "C1", "C2", "C3"),
                        help="Cubic reference path coefficients")
    parser.add_argument("--verbose", action="store_true", help="Log the cost of every solve")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    config = load_config(args.config, silent=not args.verbose)
    controller = MPCController(config)
    path = ReferencePath(args.coeffs)
    state = VehicleState(y=args.y0, psi=args.psi0, v=args.v0)

    records = run_closed_loop(controller, state, path, args.steps)
    for rec in records:
        s = rec.state
        if rec.status is SolverStatus.CONVERGED:
            print(f"{rec.step:4d}  x={s.x:8.3f} y={s.y:7.3f} v={s.v:7.3f} "
                  f"cte={s.cte:7.3f} epsi={s.epsi:7.3f}  "
                  f"delta={rec.steering:+.4f} a={rec.acceleration:+.4f}")
        else:
            print(f"{rec.step:4d}  solve failed: {rec.status.value}")
            return 1
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
