"""Kepler's equation solver.

Converts mean anomaly to eccentric anomaly by Newton-Raphson iteration on
``g(E) = E - e sin(E) - M``, starting from ``E = M``. Both a scalar and a
numpy array form are provided; they share the same settings and the same
stopping rule.

The root always lies in ``[M - e, M + e]`` and ``g`` is increasing, so the
bracket shrinks with the sign of each residual. A Newton step that leaves
the bracket is replaced by bisection. Without this, plain Newton from
``E = M`` wanders for hundreds of iterations once ``e`` approaches 0.98.

References:
    - Murray, C.D. & Correia, A.C.M. (2010). "Keplerian Orbits and
      Dynamics of Exoplanets", in Seager, S. (ed.) Exoplanets, eqn. 5.
    - Charles, E.D. & Tatum, J.B. (1998). "The convergence of
      Newton-Raphson iteration with Kepler's equation". CeMDA 69, 357.
"""
from __future__ import annotations

import logging
import math
import numpy as np

from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi
"""2π constant."""


class KeplerConvergenceError(ArithmeticError):
    """Raised when Newton-Raphson fails to reach the residual tolerance."""


# Configuration
@dataclass(frozen=True)
class KeplerSettings:
    """Numeric constants used by the solver and the orbit geometry.

    Attributes:
        tolerance: Stop when ``|E - e sin(E) - M|`` is at or below this.
        circular_threshold: Eccentricities at or below this skip the
            Kepler solve and use the circular-orbit phase.
        periapsis_tolerance: When the ``acos`` argument lies within this
            of 1, the true anomaly is set to exactly 0.
        max_iterations: Newton-Raphson iteration cap.
    """
    tolerance: float = 1e-7
    circular_threshold: float = 1e-5
    periapsis_tolerance: float = 1e-7
    max_iterations: int = 100

    @classmethod
    def strict(cls) -> KeplerSettings:
        """Tighter residual tolerance for high-precision comparisons.

        Only meaningful for mean anomalies of moderate size; rounding in
        ``E - e sin(E) - M`` grows with ``|M|``.
        """
        return cls(tolerance=1e-10, max_iterations=200)


DEFAULT_SETTINGS = KeplerSettings()


def solve_kepler(
    M: float,
    e: float,
    settings: Optional[KeplerSettings] = None,
) -> float:
    """Solve Kepler's equation for the eccentric anomaly.

    Args:
        M: Mean anomaly (radians). Not reduced modulo 2π.
        e: Eccentricity, in [0, 1).
        settings: Solver constants. Defaults to ``KeplerSettings()``.

    Returns:
        Eccentric anomaly E (radians) with ``|E - e sin(E) - M| <= tolerance``.

    Raises:
        KeplerConvergenceError: If ``max_iterations`` is exceeded.
    """
    s = settings or DEFAULT_SETTINGS
    lo, hi = M - e, M + e
    E = M
    residual = E - e * math.sin(E) - M
    iterations = 0

    while abs(residual) > s.tolerance:
        if iterations >= s.max_iterations:
            raise KeplerConvergenceError(
                f"Kepler solve did not converge after {iterations} iterations "
                f"(M={M!r}, e={e!r}, residual={residual:.3e})"
            )
        if residual > 0.0:
            hi = E
        else:
            lo = E

        E = E - residual / (1.0 - e * math.cos(E))
        if not lo < E < hi:
            E = 0.5 * (lo + hi)
        residual = E - e * math.sin(E) - M
        iterations += 1

    if iterations > 10:
        logger.debug("Kepler solve took %d iterations (M=%g, e=%g)", iterations, M, e)
    return E


def solve_kepler_array(
    M: np.ndarray,
    e: float,
    settings: Optional[KeplerSettings] = None,
) -> np.ndarray:
    """Vectorised :func:`solve_kepler` over an array of mean anomalies.

    Only elements that have not yet met the tolerance are updated on each
    pass, so every element follows the same iterates as the scalar solver.

    Args:
        M: Mean anomalies (radians), any shape.
        e: Eccentricity, in [0, 1).
        settings: Solver constants.

    Returns:
        Eccentric anomalies with the same shape as ``M``.

    Raises:
        KeplerConvergenceError: If any element exceeds ``max_iterations``.
    """
    s = settings or DEFAULT_SETTINGS
    shape = np.shape(M)
    M = np.atleast_1d(np.asarray(M, dtype=float))
    E = M.copy()
    lo = M - e
    hi = M + e
    residual = E - e * np.sin(E) - M
    active = np.abs(residual) > s.tolerance
    iterations = 0

    while active.any():
        if iterations >= s.max_iterations:
            raise KeplerConvergenceError(
                f"Kepler solve did not converge for {int(active.sum())} of "
                f"{M.size} samples after {iterations} iterations (e={e!r})"
            )
        Ea, ra = E[active], residual[active]
        la = np.where(ra > 0.0, lo[active], Ea)
        ha = np.where(ra > 0.0, Ea, hi[active])

        Ea = Ea - ra / (1.0 - e * np.cos(Ea))
        outside = (Ea <= la) | (Ea >= ha)
        Ea = np.where(outside, 0.5 * (la + ha), Ea)

        lo[active], hi[active] = la, ha
        E[active] = Ea
        residual[active] = Ea - e * np.sin(Ea) - M[active]
        active = np.abs(residual) > s.tolerance
        iterations += 1

    return E.reshape(shape)
