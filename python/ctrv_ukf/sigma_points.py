"""
CTRV-UKF - Sigma Point Generation
=================================

Augmented unscented transform for the 5-state CTRV model.

Theory:
    The belief (x, P) is augmented with the two zero-mean process noise
    terms [nu_a, nu_yawdd]. A lower-triangular square root L of the
    augmented covariance gives 2*7+1 = 15 points

        X_0     = x_aug
        X_i     = x_aug + sqrt(lambda + 7) * L[:, i-1]     i = 1..7
        X_{i+7} = x_aug - sqrt(lambda + 7) * L[:, i-1]

    whose weighted mean and weighted outer-product sum reproduce
    (x_aug, P_aug) exactly.

License: MIT (see LICENSE file)
"""

import numpy as np
from scipy.linalg import cholesky, LinAlgError
from typing import Tuple

from .config import N_X, N_AUG, N_SIGMA, LAMBDA
from .angles import normalize_angle, normalize_residuals
from .exceptions import DegenerateCovarianceError


def sigma_weights() -> np.ndarray:
    """
    Weights shared by mean and covariance recombination.

    Returns:
        weights: [15] with w0 = lambda/(lambda+7), wi = 1/(2(lambda+7))
    """
    weights = np.full(N_SIGMA, 0.5 / (LAMBDA + N_AUG))
    weights[0] = LAMBDA / (LAMBDA + N_AUG)
    return weights


WEIGHTS = sigma_weights()
WEIGHTS.setflags(write=False)


def augment(x: np.ndarray, P: np.ndarray,
            process_noise: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Build the augmented mean and covariance.

    Args:
        x: State mean [5]
        P: State covariance [5, 5]
        process_noise: Covariance of [nu_a, nu_yawdd] [2, 2]

    Returns:
        x_aug: [7] (noise means are zero)
        P_aug: [7, 7] block diagonal
    """
    x_aug = np.zeros(N_AUG)
    x_aug[:N_X] = x

    P_aug = np.zeros((N_AUG, N_AUG))
    P_aug[:N_X, :N_X] = P
    P_aug[N_X:, N_X:] = process_noise

    return x_aug, P_aug


def generate_sigma_points(x_aug: np.ndarray, P_aug: np.ndarray) -> np.ndarray:
    """
    Generate the 15 augmented sigma points.

    Args:
        x_aug: Augmented mean [n]
        P_aug: Augmented covariance [n, n], symmetric positive definite

    Returns:
        sigma: [2n+1, n] sigma points, one per row

    Raises:
        DegenerateCovarianceError: P_aug is non-finite or not positive definite
    """
    n = len(x_aug)
    if n != N_AUG or P_aug.shape != (N_AUG, N_AUG):
        raise ValueError(f"Expected a {N_AUG}-dim augmented belief, got {n} / {P_aug.shape}")
    if not (np.all(np.isfinite(x_aug)) and np.all(np.isfinite(P_aug))):
        raise DegenerateCovarianceError("Augmented belief contains NaN/Inf")

    try:
        # P_aug = L @ L.T
        L = cholesky(P_aug, lower=True, check_finite=False)
    except LinAlgError as e:
        raise DegenerateCovarianceError(
            f"Augmented covariance is not positive definite: {e}"
        ) from e

    spread = np.sqrt(LAMBDA + n) * L

    sigma = np.zeros((2 * n + 1, n))
    sigma[0] = x_aug
    for i in range(n):
        sigma[i + 1] = x_aug + spread[:, i]
        sigma[i + 1 + n] = x_aug - spread[:, i]

    return sigma


def augmented_sigma_points(x: np.ndarray, P: np.ndarray,
                           process_noise: np.ndarray) -> np.ndarray:
    """Augment (x, P) and return its [15, 7] sigma points."""
    x_aug, P_aug = augment(x, P, process_noise)
    return generate_sigma_points(x_aug, P_aug)


def recombine(points: np.ndarray, angle_index=None,
              unwrap: bool = False) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Weighted mean and covariance of a sigma point set.

    The mean is the plain weighted sum of the points. With ``unwrap`` the
    angle component is first shifted by multiples of 2*pi to lie within pi
    of the central point, for angles produced by atan2 that can jump
    across the +-pi seam (radar bearing).

    Args:
        points: [15, dim] transformed sigma points
        angle_index: Component whose residuals are wrapped to (-pi, pi], or None
        unwrap: Unwrap the angle component around point 0 before averaging

    Returns:
        mean: [dim]
        cov: [dim, dim]
        residuals: [15, dim] angle-normalized (point - mean)
    """
    if unwrap and angle_index is not None:
        # Unwrap around the central point so a set straddling +-pi averages correctly
        points = points.copy()
        offsets = normalize_angle(points[:, angle_index] - points[0, angle_index])
        points[:, angle_index] = points[0, angle_index] + offsets

    mean = WEIGHTS @ points
    residuals = normalize_residuals(points - mean, angle_index)
    cov = (WEIGHTS[:, np.newaxis] * residuals).T @ residuals

    # Ensure symmetry
    cov = 0.5 * (cov + cov.T)
    return mean, cov, residuals
