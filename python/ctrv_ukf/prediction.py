"""
CTRV-UKF - Process Propagation
==============================

Pushes the augmented sigma points through the CTRV model and recombines
them into the predicted belief.

License: MIT (see LICENSE file)
"""

import numpy as np
from dataclasses import dataclass

from .config import N_X, N_SIGMA, YAW_INDEX
from .models import ctrv_transition
from .sigma_points import augmented_sigma_points, recombine


@dataclass
class PredictedBelief:
    """Prior belief plus the sigma points it was recombined from."""
    x: np.ndarray          # [5]
    P: np.ndarray          # [5, 5]
    Xsig_pred: np.ndarray  # [15, 5]
    residuals: np.ndarray  # [15, 5] yaw-normalized (Xsig_pred - x)


def predict_sigma_points(Xsig_aug: np.ndarray, dt: float) -> np.ndarray:
    """
    Apply the motion model to every augmented sigma point.

    Args:
        Xsig_aug: [15, 7] augmented sigma points
        dt: Elapsed time [s]

    Returns:
        Xsig_pred: [15, 5]
    """
    Xsig_pred = np.zeros((N_SIGMA, N_X))
    for i in range(N_SIGMA):
        Xsig_pred[i] = ctrv_transition(Xsig_aug[i], dt)
    return Xsig_pred


def propagate(x: np.ndarray, P: np.ndarray,
              process_noise: np.ndarray, dt: float) -> PredictedBelief:
    """
    Prediction step: belief at t -> belief at t + dt.

    Does not modify its inputs.

    Args:
        x: State mean [5]
        P: State covariance [5, 5]
        process_noise: Covariance of [nu_a, nu_yawdd] [2, 2]
        dt: Elapsed time [s], >= 0

    Returns:
        PredictedBelief

    Raises:
        DegenerateCovarianceError: augmented covariance has no Cholesky factor
    """
    Xsig_aug = augmented_sigma_points(x, P, process_noise)
    Xsig_pred = predict_sigma_points(Xsig_aug, dt)

    x_pred, P_pred, residuals = recombine(Xsig_pred, angle_index=YAW_INDEX)

    return PredictedBelief(x=x_pred, P=P_pred, Xsig_pred=Xsig_pred, residuals=residuals)
