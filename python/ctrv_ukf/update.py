"""
CTRV-UKF - Measurement Update
=============================

Folds an actual observation into the predicted belief.

    Tc  = sum_i w_i (X_i - x)(Z_i - z_pred)^T
    K   = Tc S^-1
    y   = z - z_pred                     (bearing wrapped)
    x+  = x + K y
    P+  = P - K S K^T
    NIS = y^T S^-1 y

License: MIT (see LICENSE file)
"""

import numpy as np
from scipy.linalg import inv, LinAlgError
from dataclasses import dataclass

from .angles import normalize_residuals
from .diagnostics import compute_nis
from .exceptions import SingularInnovationError
from .measurement_models import ObservationPrediction
from .prediction import PredictedBelief
from .sigma_points import WEIGHTS


@dataclass
class CorrectionResult:
    """Posterior belief and the innovation statistics that produced it."""
    x: np.ndarray           # [5]
    P: np.ndarray           # [5, 5]
    innovation: np.ndarray  # [n_z]
    K: np.ndarray           # [5, n_z]
    Tc: np.ndarray          # [5, n_z]
    nis: float


def cross_correlation(state_residuals: np.ndarray, obs_residuals: np.ndarray) -> np.ndarray:
    """
    Cross-correlation between state and observation space.

    Args:
        state_residuals: [15, 5] yaw-normalized state residuals
        obs_residuals: [15, n_z] bearing-normalized observation residuals

    Returns:
        Tc: [5, n_z]
    """
    return (WEIGHTS[:, np.newaxis] * state_residuals).T @ obs_residuals


def correct(predicted: PredictedBelief, observation: ObservationPrediction,
            z: np.ndarray) -> CorrectionResult:
    """
    Kalman correction with the unscented statistics.

    Pure function: the predicted belief is not modified.

    Args:
        predicted: Prior from the process propagator
        observation: Predicted observation for the active sensor
        z: Actual measurement [n_z]

    Returns:
        CorrectionResult

    Raises:
        SingularInnovationError: S is singular or the result is non-finite
    """
    S = observation.S
    if not np.all(np.isfinite(S)):
        raise SingularInnovationError("Innovation covariance contains NaN/Inf")

    try:
        S_inv = inv(S, check_finite=False)
    except LinAlgError as e:
        raise SingularInnovationError(f"Innovation covariance is singular: {e}") from e

    # Both residual sets were angle-normalized during recombination
    Tc = cross_correlation(predicted.residuals, observation.residuals)

    K = Tc @ S_inv

    innovation = normalize_residuals(
        np.asarray(z, dtype=np.float64) - observation.z_pred,
        observation.angle_index,
    )

    x_upd = predicted.x + K @ innovation
    P_upd = predicted.P - K @ S @ K.T

    # Ensure symmetry
    P_upd = 0.5 * (P_upd + P_upd.T)

    nis = compute_nis(innovation, S)

    if not (np.all(np.isfinite(x_upd)) and np.all(np.isfinite(P_upd)) and np.isfinite(nis)):
        raise SingularInnovationError("Correction produced non-finite values")

    return CorrectionResult(x=x_upd, P=P_upd, innovation=innovation, K=K, Tc=Tc, nis=nis)
