"""
CTRV-UKF: Unscented Kalman Filter for CTRV targets

Fuses Cartesian position (laser-like) and range/bearing/range-rate
(radar-like) measurements into a single belief over
[px, py, speed, heading, heading rate].

Features:
- Augmented unscented transform (15 sigma points)
- Exact CTRV propagation with straight-line fallback
- Two observation models selected by sensor type
- Per-sensor NIS recording and chi-squared consistency reports

License: MIT (see LICENSE file)
"""

from .config import UKFConfig, N_X, N_AUG, N_SIGMA, LAMBDA, N_Z
from .exceptions import (
    ConfigurationError,
    FilterError,
    DegenerateCovarianceError,
    SingularInnovationError,
)
from .measurement import SensorType, MeasurementPackage, create_measurement
from .angles import normalize_angle
from .sigma_points import sigma_weights, augment, generate_sigma_points, recombine
from .models import ctrv_transition
from .prediction import PredictedBelief, propagate, predict_sigma_points
from .measurement_models import ObservationPrediction, predict_observation
from .update import CorrectionResult, correct
from .ukf import UnscentedKalmanFilter, create_ukf
from .diagnostics import NISReport, nis_bound, nis_consistency, compute_nis, sensor_consistency

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Filter
    "UnscentedKalmanFilter",
    "UKFConfig",
    "create_ukf",
    # Measurements
    "SensorType",
    "MeasurementPackage",
    "create_measurement",
    # Stages
    "normalize_angle",
    "sigma_weights",
    "augment",
    "generate_sigma_points",
    "recombine",
    "ctrv_transition",
    "PredictedBelief",
    "propagate",
    "predict_sigma_points",
    "ObservationPrediction",
    "predict_observation",
    "CorrectionResult",
    "correct",
    # Diagnostics
    "NISReport",
    "nis_bound",
    "nis_consistency",
    "compute_nis",
    "sensor_consistency",
    # Errors
    "ConfigurationError",
    "FilterError",
    "DegenerateCovarianceError",
    "SingularInnovationError",
    # Constants
    "N_X",
    "N_AUG",
    "N_SIGMA",
    "LAMBDA",
    "N_Z",
]
