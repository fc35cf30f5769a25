"""
CTRV-UKF - Motion Model
=======================

Constant Turn Rate and Velocity (CTRV) model with longitudinal and yaw
acceleration noise.

State:     [px, py, v, yaw, yawd]
Augmented: [px, py, v, yaw, yawd, nu_a, nu_yawdd]

License: MIT (see LICENSE file)
"""

import numpy as np

# Below this turn rate the straight-line integral is used
YAWD_EPS = 0.001


def ctrv_transition(x_aug: np.ndarray, dt: float) -> np.ndarray:
    """
    Propagate one augmented point by dt seconds.

    Args:
        x_aug: Augmented point [7]
        dt: Elapsed time [s]

    Returns:
        x_pred: Predicted state [5]
    """
    px, py, v, yaw, yawd, nu_a, nu_yawdd = x_aug

    if abs(yawd) > YAWD_EPS:
        # Exact integral along the circular arc
        px_p = px + v / yawd * (np.sin(yaw + yawd * dt) - np.sin(yaw))
        py_p = py + v / yawd * (np.cos(yaw) - np.cos(yaw + yawd * dt))
    else:
        px_p = px + v * dt * np.cos(yaw)
        py_p = py + v * dt * np.sin(yaw)

    v_p = v
    yaw_p = yaw + yawd * dt
    yawd_p = yawd

    # Constant-acceleration noise contribution
    half_dt2 = 0.5 * dt * dt
    px_p += half_dt2 * nu_a * np.cos(yaw)
    py_p += half_dt2 * nu_a * np.sin(yaw)
    v_p += nu_a * dt
    yaw_p += half_dt2 * nu_yawdd
    yawd_p += nu_yawdd * dt

    return np.array([px_p, py_p, v_p, yaw_p, yawd_p])
