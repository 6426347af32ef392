"""Batch evaluation of sky-projected separations.

Maps an ordered sequence of observation times to separations using one
shared, read-only :class:`OrbitalParameters`. Every sample is independent,
so the batch can be split into chunks and evaluated on worker threads;
output order always matches input order.
"""
from __future__ import annotations

import logging
import math
import numpy as np
import pandas as pd

from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional, Sequence

from .kepler import DEFAULT_SETTINGS, TWO_PI, KeplerSettings
from .orbit import (
    OrbitalParameters,
    OrbitParameterError,
    true_anomaly,
    true_anomaly_array,
)
from .projection import sky_separation, sky_separation_array

logger = logging.getLogger(__name__)


def evaluate(
    times: Iterable[float],
    t0: float,
    per: float,
    a: float,
    inc: float,
    ecc: float,
    omega: float,
    *,
    settings: Optional[KeplerSettings] = None,
    workers: Optional[int] = None,
) -> list[float]:
    """Compute the star-planet sky separation at each time.

    Args:
        times: Observation times, any order, repeats allowed.
        t0: Time of inferior conjunction.
        per: Orbital period.
        a: Semi-major axis (stellar radii).
        inc: Inclination (radians).
        ecc: Eccentricity, in [0, 1).
        omega: Argument of periapsis (radians).
        settings: Solver constants.
        workers: Number of worker threads. ``None`` or 1 evaluates serially.

    Returns:
        Separations (stellar radii), one per input time, same order.

    Raises:
        OrbitParameterError: If the parameters or any time are invalid.
            Nothing is evaluated in that case.
    """
    params = OrbitalParameters(t0=t0, per=per, a=a, inc=inc, ecc=ecc, omega=omega)
    return evaluate_orbit(times, params, settings=settings, workers=workers)


def evaluate_orbit(
    times: Iterable[float],
    params: OrbitalParameters,
    *,
    settings: Optional[KeplerSettings] = None,
    workers: Optional[int] = None,
) -> list[float]:
    """Same as :func:`evaluate`, taking an :class:`OrbitalParameters`."""
    params.validate()
    times = _checked_times(times)
    s = settings or DEFAULT_SETTINGS

    if not times:
        return []

    n = params.mean_motion

    if workers is None or workers <= 1 or len(times) < 2:
        return _evaluate_chunk(times, params, s, n)

    # Contiguous chunks keep the stitched result in input order
    chunk_size = math.ceil(len(times) / workers)
    chunks = [times[i:i + chunk_size] for i in range(0, len(times), chunk_size)]
    logger.debug(
        "Evaluating %d samples in %d chunks on %d threads",
        len(times),
        len(chunks),
        workers,
    )

    separations: list[float] = []
    with ThreadPoolExecutor(max_workers=workers) as ex:
        futs = [ex.submit(_evaluate_chunk, ch, params, s, n) for ch in chunks]
        for f in futs:
            separations.extend(f.result())
    return separations


def evaluate_array(
    times: np.ndarray,
    params: OrbitalParameters,
    settings: Optional[KeplerSettings] = None,
) -> np.ndarray:
    """Vectorised separation for a numpy array of times.

    Args:
        times: Observation times, any shape.
        params: Orbital elements.
        settings: Solver constants.

    Returns:
        Separations with the same shape as ``times``.
    """
    params.validate()
    t = np.asarray(times, dtype=float)
    if not np.isfinite(t).all():
        raise OrbitParameterError("Observation times must be finite")

    f, _ = true_anomaly_array(t, params, settings)
    return sky_separation_array(params.a, params.ecc, params.omega, params.inc, f)


def build_separation_table(
    times: Iterable[float],
    params: OrbitalParameters,
    settings: Optional[KeplerSettings] = None,
) -> pd.DataFrame:
    """Tabulate the orbit geometry and separation at each time.

    Args:
        times: Observation times (any order).
        params: Orbital elements.
        settings: Solver constants.

    Returns:
        DataFrame with columns ``time``, ``phase``, ``mean_anomaly``,
        ``true_anomaly``, ``radius`` and ``separation``, one row per
        input time in input order.
    """
    params.validate()
    t = np.asarray(_checked_times(times), dtype=float)

    f, r = true_anomaly_array(t, params, settings)
    d = sky_separation_array(params.a, params.ecc, params.omega, params.inc, f)
    phase = (t - params.t0) / params.per

    return pd.DataFrame({
        "time": t,
        "phase": phase - np.floor(phase),
        "mean_anomaly": np.mod(params.mean_motion * (t - params.t0), TWO_PI),
        "true_anomaly": f,
        "radius": r,
        "separation": d,
    })


# ── Private helpers ──


def _checked_times(times: Iterable[float]) -> list[float]:
    """Materialise times as floats, rejecting non-finite values."""
    values = [float(t) for t in times]
    for i, t in enumerate(values):
        if not math.isfinite(t):
            raise OrbitParameterError(
                f"Observation time at index {i} must be finite, got {t!r}"
            )
    return values


def _evaluate_chunk(
    times: Sequence[float],
    params: OrbitalParameters,
    settings: KeplerSettings,
    n: float,
) -> list[float]:
    a, ecc, omega, inc = params.a, params.ecc, params.omega, params.inc
    out: list[float] = []
    for t in times:
        f, _ = true_anomaly(t, params, settings, mean_motion=n)
        out.append(sky_separation(a, ecc, omega, inc, f))
    return out
