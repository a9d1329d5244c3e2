"""
Cubic reference path in vehicle-local coordinates.

The coefficients come from an upstream polynomial fit of the waypoints:
    f(x) = c0 + c1*x + c2*x^2 + c3*x^3
and the reference heading is the tangent angle atan(f'(x)).
"""

import numpy as np

from . import symbolic


class ReferencePath:
    """Read-only cubic polynomial path."""

    ORDER = 3

    def __init__(self, coeffs):
        values = np.asarray(coeffs, dtype=float).ravel()
        if values.shape[0] != self.ORDER + 1:
            raise ValueError(
                f"Reference path needs {self.ORDER + 1} coefficients, "
                f"got {values.shape[0]}")
        if not np.all(np.isfinite(values)):
            raise ValueError(f"Reference path coefficients must be finite: {values}")
        # Plain floats: numpy scalars do not combine cleanly with CasADi symbols
        self._coeffs = tuple(float(c) for c in values)

    @property
    def coeffs(self) -> tuple:
        return self._coeffs

    def evaluate(self, x):
        """Path lateral position f(x). Works on floats, arrays and symbols."""
        c0, c1, c2, c3 = self._coeffs
        return c0 + c1 * x + c2 * x * x + c3 * x * x * x

    def slope(self, x):
        _, c1, c2, c3 = self._coeffs
        return c1 + 2 * c2 * x + 3 * c3 * x * x

    def heading(self, x):
        """Desired heading psi_des(x) = atan(f'(x))."""
        return symbolic.atan(self.slope(x))

    def __repr__(self):
        return f"ReferencePath({list(self._coeffs)})"
