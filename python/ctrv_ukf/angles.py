"""
CTRV-UKF - Angle Wrapping
=========================

Every angular residual in the filter (heading in state space, bearing in
radar space) goes through ``normalize_angle``.

License: MIT (see LICENSE file)
"""

import numpy as np
from typing import Union

ArrayOrFloat = Union[float, np.ndarray]


def normalize_angle(angle: ArrayOrFloat) -> ArrayOrFloat:
    """
    Wrap an angle (or array of angles) into (-pi, pi].

    Closed form, so large inputs cost the same as small ones and
    ``normalize_angle(normalize_angle(a)) == normalize_angle(a)``.

    Args:
        angle: Angle(s) [rad]

    Returns:
        Wrapped angle(s) [rad], same shape as input
    """
    angle = np.asarray(angle, dtype=np.float64)
    wrapped = np.pi - np.mod(np.pi - angle, 2.0 * np.pi)
    # mod() can round up to exactly 2*pi for tiny negative inputs
    wrapped = np.where(wrapped <= -np.pi, np.pi, wrapped)
    # in-range angles pass through bit-exact
    wrapped = np.where((angle > -np.pi) & (angle <= np.pi), angle, wrapped)
    if np.ndim(wrapped) == 0:
        return float(wrapped)
    return wrapped


def normalize_residuals(residuals: np.ndarray, angle_index) -> np.ndarray:
    """
    Wrap one column of a residual array in place and return it.

    Args:
        residuals: [n_points, dim] or [dim] residuals
        angle_index: Column holding an angle, or None for none
    """
    if angle_index is not None:
        residuals[..., angle_index] = normalize_angle(residuals[..., angle_index])
    return residuals
