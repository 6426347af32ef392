"""Sky-plane projection of the star-planet separation.

The projected distance between the two centers is denoted
``r_sky = sqrt(x² + y²)`` by Murray & Correia and Winn (eq. 5) in the
Seager *Exoplanets* book, and ``d`` (in stellar radii) by Mandel & Agol
(2002)::

    d = a (1 - e²) / (1 + e cos f) · sqrt(1 - sin²(ω + f) sin²(i))
"""
from __future__ import annotations

import logging
import math
import numpy as np

logger = logging.getLogger(__name__)


def sky_separation(a: float, ecc: float, omega: float, inc: float, f: float) -> float:
    """Projected star-planet separation at true anomaly ``f``.

    The radicand is clamped at zero, so rounding near conjunction on an
    edge-on orbit gives ``d = 0`` rather than NaN.

    Args:
        a: Semi-major axis (stellar radii).
        ecc: Eccentricity.
        omega: Argument of periapsis (radians).
        inc: Inclination (radians).
        f: True anomaly (radians).

    Returns:
        Separation ``d >= 0`` in stellar radii.
    """
    r = a * (1.0 - ecc * ecc) / (1.0 + ecc * math.cos(f))
    sin_wf = math.sin(omega + f)
    sin_i = math.sin(inc)
    radicand = 1.0 - sin_wf * sin_wf * sin_i * sin_i
    if radicand < 0.0:
        logger.debug("Clamping negative radicand %.3e to 0", radicand)
        radicand = 0.0
    return r * math.sqrt(radicand)


def sky_separation_array(
    a: float,
    ecc: float,
    omega: float,
    inc: float,
    f: np.ndarray,
) -> np.ndarray:
    """Vectorised :func:`sky_separation` over an array of true anomalies."""
    f = np.asarray(f, dtype=float)
    r = a * (1.0 - ecc * ecc) / (1.0 + ecc * np.cos(f))
    radicand = 1.0 - np.sin(omega + f) ** 2 * math.sin(inc) ** 2
    return r * np.sqrt(np.maximum(radicand, 0.0))
