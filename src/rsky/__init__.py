"""rsky — sky-projected separation between a star and a transiting planet.

Computes the distance between the centers of the star and the planet in
the plane of the sky for a Keplerian orbit. This is the quantity ``d`` of
Mandel & Agol (2002), ``r_sky`` in the Seager *Exoplanets* book, and the
input every transit light-curve model needs per time sample.

Modules:
    kepler:     Newton-Raphson solver for Kepler's equation.
    orbit:      Orbital elements, validation, true anomaly and radius.
    projection: Sky-plane separation formula.
    batch:      Order-preserving batch evaluation (lists, arrays, tables).
    viz:        Separation curve plots.
    cli:        Command-line interface.

Example:
    >>> import math
    >>> from rsky import evaluate
    >>> evaluate([0.0, 2.5, 5.0], t0=0.0, per=10.0, a=15.0,
    ...          inc=math.pi / 2, ecc=0.0, omega=0.0)  # doctest: +SKIP
    [15.0, 0.0, 15.0]
"""

from .kepler import KeplerConvergenceError, KeplerSettings, solve_kepler
from .orbit import (
    InvalidEccentricityError,
    OrbitalParameters,
    OrbitParameterError,
    true_anomaly,
)
from .projection import sky_separation
from .batch import build_separation_table, evaluate, evaluate_array, evaluate_orbit

__version__ = "0.1.0"

__all__ = [
    "InvalidEccentricityError",
    "KeplerConvergenceError",
    "KeplerSettings",
    "OrbitParameterError",
    "OrbitalParameters",
    "build_separation_table",
    "evaluate",
    "evaluate_array",
    "evaluate_orbit",
    "sky_separation",
    "solve_kepler",
    "true_anomaly",
]
