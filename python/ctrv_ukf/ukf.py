"""
CTRV-UKF - Unscented Kalman Filter
==================================

Fuses DIRECT (Cartesian position) and RANGE_BEARING (range, bearing,
range-rate) measurements into a CTRV belief [px, py, v, yaw, yawd].

Per measurement:
    first      -> bootstrap belief from the single observation
    afterwards -> propagate(dt) -> predict_observation -> correct

Stages are pure functions over explicit arrays; this class owns the
belief and commits a step only after every stage has succeeded.

License: MIT (see LICENSE file)
"""

import logging
import numpy as np
from typing import Dict, Iterable, List, Optional

from .config import UKFConfig, N_X
from .exceptions import FilterError
from .measurement import MeasurementPackage, SensorType
from .measurement_models import predict_observation
from .prediction import propagate
from .update import correct

logger = logging.getLogger(__name__)

# Timestamps are in microseconds
US_PER_S = 1e6

# Smallest position magnitude accepted when bootstrapping from DIRECT
MIN_INIT_POSITION = 0.001


class UnscentedKalmanFilter:
    """
    Unscented Kalman Filter with a CTRV motion model.

    Not thread-safe: callers feeding one filter from several threads
    must serialize ``process_measurement``.

    Example:
        >>> ukf = UnscentedKalmanFilter(UKFConfig())
        >>> ukf.process_measurement(create_measurement("direct", 0, [1.0, 1.0]))
        >>> ukf.process_measurement(create_measurement("range_bearing", 50000, [1.4, 0.78, 0.1]))
        >>> ukf.x, ukf.nis(SensorType.RANGE_BEARING)
    """

    def __init__(self, config: Optional[UKFConfig] = None):
        self.cfg = config or UKFConfig()
        self._process_noise = self.cfg.process_noise
        self._R = {
            SensorType.DIRECT: self.cfg.R_direct,
            SensorType.RANGE_BEARING: self.cfg.R_range_bearing,
        }
        self.reset()

    def reset(self):
        """Drop the belief; the next measurement bootstraps it again."""
        self._x = np.zeros(N_X)
        self._P = self.cfg.initial_covariance.copy()
        self._initialized = False
        self._previous_timestamp: Optional[int] = None
        self._nis: Dict[SensorType, Optional[float]] = {s: None for s in SensorType}
        self._nis_history: Dict[SensorType, List[float]] = {s: [] for s in SensorType}

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def x(self) -> np.ndarray:
        """Current mean [px, py, v, yaw, yawd] (copy)."""
        return self._x.copy()

    @property
    def P(self) -> np.ndarray:
        """Current covariance [5, 5] (copy)."""
        return self._P.copy()

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def previous_timestamp(self) -> Optional[int]:
        return self._previous_timestamp

    def nis(self, sensor_type: SensorType) -> Optional[float]:
        """Last NIS for a sensor, None before its first correction."""
        return self._nis[SensorType(sensor_type)]

    def nis_history(self, sensor_type: SensorType) -> np.ndarray:
        """All NIS values recorded for a sensor, oldest first."""
        return np.array(self._nis_history[SensorType(sensor_type)], dtype=np.float64)

    # -------------------------------------------------------------------------
    # Filtering
    # -------------------------------------------------------------------------

    def process_measurement(self, meas: MeasurementPackage) -> None:
        """
        Advance the belief with one measurement.

        Args:
            meas: Measurement record, timestamps non-decreasing

        Raises:
            DegenerateCovarianceError: no sigma points for the current belief
            SingularInnovationError: gain could not be computed
            (the belief, timestamp and NIS are left unchanged in both cases)
        """
        if not self._initialized:
            self._initialize(meas)
            return

        dt = self._elapsed_seconds(meas.timestamp)
        timestamp = max(meas.timestamp, self._previous_timestamp)

        if not self.cfg.is_enabled(meas.sensor_type):
            self._previous_timestamp = timestamp
            logger.debug("Ignoring %s measurement at t=%d (sensor disabled)",
                         meas.sensor_type.name, meas.timestamp)
            return

        try:
            predicted = propagate(self._x, self._P, self._process_noise, dt)
            observation = predict_observation(
                meas.sensor_type, predicted.Xsig_pred, self._R[meas.sensor_type]
            )
            result = correct(predicted, observation, meas.raw_measurements)
        except FilterError as e:
            logger.warning("Rejected %s update at t=%d: %s",
                           meas.sensor_type.name, meas.timestamp, e)
            raise

        self._x = result.x
        self._P = result.P
        self._previous_timestamp = timestamp
        self._nis[meas.sensor_type] = result.nis
        self._nis_history[meas.sensor_type].append(result.nis)

        logger.debug("%s update: dt=%.4fs NIS=%.3f",
                     meas.sensor_type.name, dt, result.nis)

    def predict(self, delta_t: float) -> None:
        """
        Propagate the committed belief by delta_t seconds without a correction.

        The stored timestamp advances by delta_t, so a following measurement
        only propagates over the remaining interval.

        Raises:
            RuntimeError: filter not initialized
            ValueError: negative delta_t
            DegenerateCovarianceError: no sigma points for the current belief
        """
        if not self._initialized:
            raise RuntimeError("Filter not initialized. Process a measurement first.")
        if delta_t < 0:
            raise ValueError(f"delta_t must be non-negative, got {delta_t}")

        predicted = propagate(self._x, self._P, self._process_noise, float(delta_t))
        self._x = predicted.x
        self._P = predicted.P
        self._previous_timestamp += int(round(delta_t * US_PER_S))

    def process_batch(self, measurements: Iterable[MeasurementPackage]) -> np.ndarray:
        """
        Run a measurement stream through the filter.

        Rejected updates are skipped; the next record is processed against
        the last valid belief.

        Args:
            measurements: Records in timestamp order

        Returns:
            estimates: (N, 5) mean after each record
        """
        estimates = []
        n_rejected = 0
        for meas in measurements:
            try:
                self.process_measurement(meas)
            except FilterError:
                n_rejected += 1
            estimates.append(self._x.copy())

        if n_rejected:
            logger.warning("%d of %d measurements rejected", n_rejected, len(estimates))
        return np.array(estimates).reshape(-1, N_X)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _initialize(self, meas: MeasurementPackage):
        """Bootstrap the belief from a single measurement (no propagation)."""
        if meas.sensor_type is SensorType.RANGE_BEARING:
            rho, phi, rho_dot = meas.raw_measurements
            px = rho * np.cos(phi)
            py = rho * np.sin(phi)
            vx = rho_dot * np.cos(phi)
            vy = rho_dot * np.sin(phi)
            v = np.sqrt(vx * vx + vy * vy)
        else:
            px, py = meas.raw_measurements
            # Keep the initial position away from the origin
            if abs(px) < MIN_INIT_POSITION:
                px = MIN_INIT_POSITION
            if abs(py) < MIN_INIT_POSITION:
                py = MIN_INIT_POSITION
            v = 0.0

        self._x = np.array([px, py, v, 0.0, 0.0], dtype=np.float64)
        self._P = self.cfg.initial_covariance.copy()
        self._previous_timestamp = meas.timestamp
        self._initialized = True

        logger.info("Initialized from %s measurement at t=%d: x=%s",
                    meas.sensor_type.name, meas.timestamp, np.array2string(self._x, precision=3))

    def _elapsed_seconds(self, timestamp: int) -> float:
        """Seconds since the last accepted timestamp, floored at zero."""
        delta_us = timestamp - self._previous_timestamp
        if delta_us < 0:
            logger.warning("Out-of-order timestamp %d (previous %d); using dt=0",
                           timestamp, self._previous_timestamp)
            return 0.0
        return delta_us / US_PER_S


def create_ukf(use_direct: bool = True, use_range_bearing: bool = True,
               **noise) -> UnscentedKalmanFilter:
    """
    Create a filter from keyword configuration.

    Args:
        use_direct: Accept DIRECT updates
        use_range_bearing: Accept RANGE_BEARING updates
        **noise: Any other UKFConfig field (std_a, std_yawdd, std_px, ...)
    """
    cfg = UKFConfig(use_direct=use_direct, use_range_bearing=use_range_bearing, **noise)
    return UnscentedKalmanFilter(cfg)
