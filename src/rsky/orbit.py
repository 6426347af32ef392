"""Orbital elements and orbit geometry.

Holds the read-only orbital parameter record shared by every sample of a
batch, validates it, and derives the true anomaly ``f`` and orbital radius
``r`` at a given time. Two branches are used:

    1. Eccentric orbits: solve Kepler's equation, then recover ``f`` from
       the orbit equation ``r = a (1 - e²) / (1 + e cos f)``.
    2. Circular orbits (``ecc`` at or below the circular threshold): ``f``
       follows directly from the orbital phase, no Kepler solve.
"""
from __future__ import annotations

import logging
import math
import numpy as np

from dataclasses import asdict, dataclass
from typing import Optional

from .kepler import (
    DEFAULT_SETTINGS,
    TWO_PI,
    KeplerSettings,
    solve_kepler,
    solve_kepler_array,
)

logger = logging.getLogger(__name__)


class OrbitParameterError(ValueError):
    """Raised for orbital parameters or times the model cannot evaluate."""


class InvalidEccentricityError(OrbitParameterError):
    """Raised when the eccentricity is outside [0, 1)."""


@dataclass(frozen=True, slots=True)
class OrbitalParameters:
    """Keplerian orbit of a planet around its host star.

    Attributes:
        t0: Time of inferior conjunction (same unit as the times).
        per: Orbital period, > 0.
        a: Semi-major axis in stellar radii, > 0.
        inc: Orbital inclination (radians), expected in [0, π].
        ecc: Orbital eccentricity, in [0, 1).
        omega: Argument of periapsis (radians).
    """
    t0: float
    per: float
    a: float
    inc: float
    ecc: float
    omega: float

    @classmethod
    def from_degrees(
        cls,
        t0: float,
        per: float,
        a: float,
        inc_deg: float,
        ecc: float = 0.0,
        omega_deg: float = 0.0,
    ) -> OrbitalParameters:
        """Build parameters with inclination and periapsis given in degrees."""
        return cls(
            t0=t0,
            per=per,
            a=a,
            inc=math.radians(inc_deg),
            ecc=ecc,
            omega=math.radians(omega_deg),
        )

    @property
    def mean_motion(self) -> float:
        """Mean motion ``2π / per`` (radians per time unit)."""
        return TWO_PI / self.per

    def is_circular(self, settings: Optional[KeplerSettings] = None) -> bool:
        """Whether the Kepler solve is bypassed for this eccentricity."""
        s = settings or DEFAULT_SETTINGS
        return self.ecc <= s.circular_threshold

    def validate(self) -> None:
        """Reject parameters for which the model is undefined.

        Raises:
            OrbitParameterError: If any element is non-finite, or if
                ``per`` or ``a`` is not positive.
            InvalidEccentricityError: If ``ecc`` is outside [0, 1).
        """
        for name, value in asdict(self).items():
            if not math.isfinite(value):
                raise OrbitParameterError(f"{name} must be finite, got {value!r}")

        if self.per <= 0:
            raise OrbitParameterError(f"Period must be positive, got {self.per!r}")
        if self.a <= 0:
            raise OrbitParameterError(
                f"Semi-major axis must be positive, got {self.a!r}"
            )
        if not 0.0 <= self.ecc < 1.0:
            raise InvalidEccentricityError(
                f"Eccentricity must be in [0, 1), got {self.ecc!r}"
            )

        if not 0.0 <= self.inc <= math.pi:
            logger.warning(
                "Inclination %.6f rad is outside [0, π]; evaluating anyway",
                self.inc,
            )

    def to_dict(self) -> dict:
        """Flat dictionary of the elements, angles in both units."""
        return {
            "t0": self.t0,
            "per": self.per,
            "a": self.a,
            "inc_rad": self.inc,
            "inc_deg": math.degrees(self.inc),
            "ecc": self.ecc,
            "omega_rad": self.omega,
            "omega_deg": math.degrees(self.omega),
        }


# Branches
def eccentric_true_anomaly(
    M: float,
    params: OrbitalParameters,
    settings: Optional[KeplerSettings] = None,
) -> tuple[float, float]:
    """True anomaly and radius on an eccentric orbit.

    The ``acos`` result lies in [0, π]; the half of the orbit past
    apoapsis is mirrored onto the first half.

    Args:
        M: Mean anomaly (radians).
        params: Orbital elements with ``ecc`` above the circular threshold.
        settings: Solver constants.

    Returns:
        Tuple ``(f, r)``: true anomaly (radians) and orbital radius
        (stellar radii).
    """
    s = settings or DEFAULT_SETTINGS
    a, ecc = params.a, params.ecc

    E = solve_kepler(M, ecc, s)
    r = a * (1.0 - ecc * math.cos(E))
    q = a * (1.0 - ecc * ecc) / (r * ecc) - 1.0 / ecc

    if abs(q - 1.0) < s.periapsis_tolerance:
        return 0.0, r

    if q > 1.0 or q < -1.0:
        logger.debug("Clamping acos argument %.17g to [-1, 1]", q)
        q = min(1.0, max(-1.0, q))
    return math.acos(q), r


def circular_true_anomaly(t: float, params: OrbitalParameters) -> float:
    """True anomaly on a circular orbit from the orbital phase.

    The phase is wrapped by truncation toward zero, so times before ``t0``
    give ``f`` in (-2π, 0].
    """
    phase = (t - params.t0) / params.per
    return (phase - math.trunc(phase)) * TWO_PI


def true_anomaly(
    t: float,
    params: OrbitalParameters,
    settings: Optional[KeplerSettings] = None,
    mean_motion: Optional[float] = None,
) -> tuple[float, float]:
    """True anomaly ``f`` and orbital radius ``r`` at time ``t``.

    Args:
        t: Observation time.
        params: Orbital elements (assumed validated).
        settings: Solver constants.
        mean_motion: Precomputed ``2π / per``; computed when omitted.

    Returns:
        Tuple ``(f, r)``. On the circular branch ``r`` is the semi-major axis.
    """
    s = settings or DEFAULT_SETTINGS
    if params.is_circular(s):
        return circular_true_anomaly(t, params), params.a

    n = params.mean_motion if mean_motion is None else mean_motion
    return eccentric_true_anomaly(n * (t - params.t0), params, s)


def true_anomaly_array(
    t: np.ndarray,
    params: OrbitalParameters,
    settings: Optional[KeplerSettings] = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Vectorised :func:`true_anomaly`.

    Returns:
        Tuple ``(f, r)`` of arrays shaped like ``t``.
    """
    s = settings or DEFAULT_SETTINGS
    t = np.asarray(t, dtype=float)

    if params.is_circular(s):
        phase = (t - params.t0) / params.per
        f = (phase - np.trunc(phase)) * TWO_PI
        return f, np.full_like(t, params.a)

    a, ecc = params.a, params.ecc
    M = params.mean_motion * (t - params.t0)
    E = solve_kepler_array(M, ecc, s)
    r = a * (1.0 - ecc * np.cos(E))
    q = a * (1.0 - ecc * ecc) / (r * ecc) - 1.0 / ecc

    f = np.where(
        np.abs(q - 1.0) < s.periapsis_tolerance,
        0.0,
        np.arccos(np.clip(q, -1.0, 1.0)),
    )
    return f, r
