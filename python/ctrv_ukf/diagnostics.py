"""
CTRV-UKF - Consistency Diagnostics
==================================

Offline checks on recorded NIS values. For a consistent filter the NIS
of an n_z-dimensional sensor is chi-squared with n_z degrees of freedom:
its mean is close to n_z and roughly (1 - confidence) of the samples
exceed the chi-squared bound.

Typical bounds (95%): 5.991 for DIRECT (2 dof), 7.815 for RANGE_BEARING (3 dof).

License: MIT (see LICENSE file)
"""

import numpy as np
from scipy.stats import chi2
from dataclasses import dataclass
from typing import Sequence

from .config import N_Z
from .measurement import SensorType


@dataclass
class NISReport:
    """Summary of a NIS sequence against its chi-squared bound."""
    count: int
    mean: float
    expected_mean: float
    bound: float
    fraction_above: float
    consistent: bool


def nis_bound(dof: int, confidence: float = 0.95) -> float:
    """Upper chi-squared bound for NIS with `dof` degrees of freedom."""
    if not 0.0 < confidence < 1.0:
        raise ValueError(f"confidence must be in (0, 1), got {confidence}")
    return float(chi2.ppf(confidence, dof))


def compute_nis(innovation: np.ndarray, S: np.ndarray) -> float:
    """
    Normalized Innovation Squared, y^T S^-1 y.

    Uses a linear solve rather than an explicit inverse.
    """
    innovation = np.asarray(innovation, dtype=np.float64)
    return float(innovation @ np.linalg.solve(S, innovation))


def nis_consistency(nis_values: Sequence[float], dof: int,
                    confidence: float = 0.95, slack: float = 0.05) -> NISReport:
    """
    Compare a NIS sequence with its chi-squared distribution.

    Args:
        nis_values: Recorded NIS samples
        dof: Observation dimension (2 for DIRECT, 3 for RANGE_BEARING)
        confidence: Bound quantile
        slack: Tolerance on the fraction of samples above the bound

    Returns:
        NISReport; ``consistent`` is True when the fraction above the bound
        does not exceed (1 - confidence) + slack
    """
    values = np.asarray(nis_values, dtype=np.float64)
    if values.size == 0:
        raise ValueError("No NIS samples")

    bound = nis_bound(dof, confidence)
    fraction_above = float(np.mean(values > bound))

    return NISReport(
        count=int(values.size),
        mean=float(np.mean(values)),
        expected_mean=float(dof),
        bound=bound,
        fraction_above=fraction_above,
        consistent=fraction_above <= (1.0 - confidence) + slack,
    )


def sensor_consistency(ukf, sensor_type: SensorType, confidence: float = 0.95) -> NISReport:
    """NIS report for one sensor of a filter that has already run."""
    sensor_type = SensorType(sensor_type)
    return nis_consistency(ukf.nis_history(sensor_type), N_Z[sensor_type], confidence)
