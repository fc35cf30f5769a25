"""
CTRV-UKF - Configuration
========================

Fixed noise configuration and sensor switches for the CTRV unscented
filter. Everything here is set once at construction.

Dimensions are structural: 5 states, 2 process-noise terms, 15 sigma
points. They are module constants, not options.

License: MIT (see LICENSE file)
"""

import numpy as np
from dataclasses import dataclass, field

from .exceptions import ConfigurationError
from .measurement import SensorType


# =============================================================================
# Structural constants
# =============================================================================

N_X = 5                      # [px, py, v, yaw, yawd]
N_AUG = 7                    # state + [nu_a, nu_yawdd]
N_SIGMA = 2 * N_AUG + 1      # 15
LAMBDA = 3 - N_X             # spreading parameter

YAW_INDEX = 3                # heading component of the state vector

# Observation-space widths
N_Z = {
    SensorType.DIRECT: 2,         # [px, py]
    SensorType.RANGE_BEARING: 3,  # [rho, phi, rho_dot]
}


def _default_initial_covariance() -> np.ndarray:
    return np.diag([0.3, 0.2, 0.3, 1.0, 1.0])


@dataclass(frozen=True, eq=False)
class UKFConfig:
    """
    Fixed UKF configuration.

    Args:
        use_direct: Accept DIRECT (laser) updates after initialization
        use_range_bearing: Accept RANGE_BEARING (radar) updates after initialization
        std_a: Longitudinal acceleration noise std [m/s^2]
        std_yawdd: Yaw acceleration noise std [rad/s^2]
        std_px, std_py: DIRECT position noise std [m]
        std_range: Range noise std [m]
        std_bearing: Bearing noise std [rad]
        std_range_rate: Range-rate noise std [m/s]
        initial_covariance: Covariance installed on the first measurement (5x5)
    """
    use_direct: bool = True
    use_range_bearing: bool = True

    std_a: float = 6.0
    std_yawdd: float = np.pi / 6

    std_px: float = 0.15
    std_py: float = 0.15

    std_range: float = 0.3
    std_bearing: float = 0.03
    std_range_rate: float = 0.3

    initial_covariance: np.ndarray = field(default_factory=_default_initial_covariance)

    def __post_init__(self):
        for name in ("std_a", "std_yawdd", "std_px", "std_py",
                     "std_range", "std_bearing", "std_range_rate"):
            value = getattr(self, name)
            if not np.isfinite(value) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive finite number, got {value!r}")

        if not (self.use_direct or self.use_range_bearing):
            raise ConfigurationError("At least one sensor type must be enabled")

        P0 = np.array(self.initial_covariance, dtype=np.float64)
        if P0.shape != (N_X, N_X):
            raise ConfigurationError(f"initial_covariance must be {N_X}x{N_X}, got {P0.shape}")
        if not np.all(np.isfinite(P0)) or not np.allclose(P0, P0.T):
            raise ConfigurationError("initial_covariance must be finite and symmetric")
        try:
            np.linalg.cholesky(P0)
        except np.linalg.LinAlgError:
            raise ConfigurationError("initial_covariance must be positive definite") from None

        P0.setflags(write=False)
        object.__setattr__(self, "initial_covariance", P0)

    # -------------------------------------------------------------------------
    # Derived matrices
    # -------------------------------------------------------------------------

    @property
    def process_noise(self) -> np.ndarray:
        """Covariance of [nu_a, nu_yawdd] (2x2)."""
        return np.diag([self.std_a**2, self.std_yawdd**2])

    @property
    def R_direct(self) -> np.ndarray:
        return np.diag([self.std_px**2, self.std_py**2])

    @property
    def R_range_bearing(self) -> np.ndarray:
        return np.diag([self.std_range**2, self.std_bearing**2, self.std_range_rate**2])

    def measurement_noise(self, sensor_type: SensorType) -> np.ndarray:
        """Additive measurement noise covariance for a sensor."""
        if sensor_type is SensorType.DIRECT:
            return self.R_direct
        return self.R_range_bearing

    def is_enabled(self, sensor_type: SensorType) -> bool:
        if sensor_type is SensorType.DIRECT:
            return self.use_direct
        return self.use_range_bearing
