"""
CTRV-UKF - Observation Models
=============================

Maps predicted state sigma points into the observation space of the
arriving sensor and recombines them into the predicted observation.

DIRECT:        z = [px, py]                       (linear projection)
RANGE_BEARING: z = [rho, phi, rho_dot]            (Cartesian -> polar)

License: MIT (see LICENSE file)
"""

import numpy as np
from dataclasses import dataclass

from .measurement import SensorType
from .sigma_points import recombine

BEARING_INDEX = 1

# Floor on range when dividing for range-rate
RANGE_EPS = 1e-6


@dataclass
class ObservationPrediction:
    """Predicted observation statistics for one sensor update."""
    sensor_type: SensorType
    Zsig: np.ndarray       # [15, n_z] observation sigma points
    z_pred: np.ndarray     # [n_z]
    S: np.ndarray          # [n_z, n_z] including measurement noise
    residuals: np.ndarray  # [15, n_z] angle-normalized (Zsig - z_pred)

    @property
    def angle_index(self):
        return residual_angle_index(self.sensor_type)


def residual_angle_index(sensor_type: SensorType):
    """Observation component holding an angle, or None."""
    return BEARING_INDEX if sensor_type is SensorType.RANGE_BEARING else None


def h_direct(Xsig_pred: np.ndarray) -> np.ndarray:
    """Position projection, [15, 5] -> [15, 2]."""
    return Xsig_pred[:, :2].copy()


def h_range_bearing(Xsig_pred: np.ndarray) -> np.ndarray:
    """
    Cartesian state to polar observation, [15, 5] -> [15, 3].

    Range-rate divides by range; range is floored at RANGE_EPS for that
    division so a point at the origin yields a finite value.
    """
    px = Xsig_pred[:, 0]
    py = Xsig_pred[:, 1]
    v = Xsig_pred[:, 2]
    yaw = Xsig_pred[:, 3]

    rho = np.sqrt(px**2 + py**2)
    phi = np.arctan2(py, px)
    rho_dot = (px * v * np.cos(yaw) + py * v * np.sin(yaw)) / np.maximum(rho, RANGE_EPS)

    return np.column_stack([rho, phi, rho_dot])


OBSERVATION_MODELS = {
    SensorType.DIRECT: h_direct,
    SensorType.RANGE_BEARING: h_range_bearing,
}


def predict_observation(sensor_type: SensorType, Xsig_pred: np.ndarray,
                        R: np.ndarray) -> ObservationPrediction:
    """
    Predicted observation mean and covariance.

    Args:
        sensor_type: Arriving sensor
        Xsig_pred: [15, 5] predicted state sigma points
        R: Measurement noise covariance [n_z, n_z]

    Returns:
        ObservationPrediction
    """
    Zsig = OBSERVATION_MODELS[sensor_type](Xsig_pred)
    angle_index = residual_angle_index(sensor_type)
    # atan2 bearings jump at +-pi; propagated headings are continuous
    z_pred, S, residuals = recombine(Zsig, angle_index=angle_index,
                                     unwrap=angle_index is not None)

    # Measurement noise is additive and independent of process noise
    S = S + R

    return ObservationPrediction(
        sensor_type=sensor_type,
        Zsig=Zsig,
        z_pred=z_pred,
        S=S,
        residuals=residuals,
    )
