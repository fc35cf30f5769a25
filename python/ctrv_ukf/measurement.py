"""
CTRV-UKF - Measurement Records
==============================

Canonical measurement record handed to the filter by the acquisition
layer. Parsing raw sensor packets into this record happens elsewhere.

License: MIT (see LICENSE file)
"""

import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union


class SensorType(Enum):
    """Measurement modality."""
    DIRECT = "direct"                # Cartesian position (laser)
    RANGE_BEARING = "range_bearing"  # range, bearing, range-rate (radar)


RAW_SIZE = {
    SensorType.DIRECT: 2,
    SensorType.RANGE_BEARING: 3,
}


@dataclass
class MeasurementPackage:
    """
    One sensor reading.

    Attributes:
        sensor_type: DIRECT or RANGE_BEARING
        timestamp: Acquisition time [us], non-decreasing across a stream
        raw_measurements: [px, py] or [rho, phi, rho_dot]
    """
    sensor_type: SensorType
    timestamp: int
    raw_measurements: np.ndarray

    def __post_init__(self):
        if not isinstance(self.sensor_type, SensorType):
            self.sensor_type = SensorType(self.sensor_type)
        self.timestamp = int(self.timestamp)
        self.raw_measurements = np.asarray(self.raw_measurements, dtype=np.float64).reshape(-1)

        expected = RAW_SIZE[self.sensor_type]
        if self.raw_measurements.shape != (expected,):
            raise ValueError(
                f"{self.sensor_type.name} measurement needs {expected} values, "
                f"got {self.raw_measurements.size}"
            )
        if not np.all(np.isfinite(self.raw_measurements)):
            raise ValueError("Measurement values must be finite")


def create_measurement(sensor_type: Union[SensorType, str],
                       timestamp: int,
                       values: Sequence[float]) -> MeasurementPackage:
    """
    Build a measurement record.

    Example:
        >>> create_measurement("range_bearing", 1477010443050000, [5.0, 0.1, 0.2])
    """
    return MeasurementPackage(SensorType(sensor_type), timestamp, np.asarray(values))
