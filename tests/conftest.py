"""
Shared fixtures for the CTRV-UKF test suite.

Run: pytest tests/ -v
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Allow running from a source checkout without installing
sys.path.insert(0, str(Path(__file__).parent.parent / "python"))

from ctrv_ukf import SensorType, create_measurement  # noqa: E402


def simulate_ctrv(seed=7, n=200, dt_us=50000, x0=(1.0, 2.0, 5.0, 0.5, 0.3),
                  std_px=0.15, std_py=0.15, std_range=0.3, std_bearing=0.03,
                  std_range_rate=0.3):
    """
    Noise-free CTRV truth with alternating DIRECT / RANGE_BEARING readings.

    Returns:
        truth: (n, 5) true states at each measurement time
        measurements: list of MeasurementPackage
    """
    rng = np.random.default_rng(seed)
    px, py, v, yaw, yawd = x0
    dt = dt_us / 1e6

    truth = np.zeros((n, 5))
    measurements = []
    for k in range(n):
        if k > 0:
            px += v / yawd * (np.sin(yaw + yawd * dt) - np.sin(yaw))
            py += v / yawd * (np.cos(yaw) - np.cos(yaw + yawd * dt))
            yaw += yawd * dt
        truth[k] = [px, py, v, yaw, yawd]
        t = 1_000_000 + k * dt_us

        if k % 2 == 0:
            z = [px + rng.normal(0, std_px), py + rng.normal(0, std_py)]
            measurements.append(create_measurement(SensorType.DIRECT, t, z))
        else:
            rho = np.hypot(px, py)
            phi = np.arctan2(py, px)
            rho_dot = (px * v * np.cos(yaw) + py * v * np.sin(yaw)) / rho
            z = [rho + rng.normal(0, std_range),
                 phi + rng.normal(0, std_bearing),
                 rho_dot + rng.normal(0, std_range_rate)]
            measurements.append(create_measurement(SensorType.RANGE_BEARING, t, z))

    return truth, measurements


@pytest.fixture
def ctrv_scenario():
    return simulate_ctrv()


def random_spd(rng, dim, low=0.05, high=1.0):
    """Random symmetric positive definite matrix with eigenvalues in [low, high]."""
    Q, _ = np.linalg.qr(rng.normal(size=(dim, dim)))
    return Q @ np.diag(rng.uniform(low, high, dim)) @ Q.T
