"""
CTRV-UKF - NIS Diagnostics Tests
"""

import numpy as np
import pytest

from ctrv_ukf import (
    SensorType,
    UnscentedKalmanFilter,
    compute_nis,
    nis_bound,
    nis_consistency,
    sensor_consistency,
)


class TestNISBound:
    """Chi-squared bounds"""

    def test_known_values(self):
        assert nis_bound(2, 0.95) == pytest.approx(5.991, abs=1e-3)
        assert nis_bound(3, 0.95) == pytest.approx(7.815, abs=1e-3)
        assert nis_bound(3, 0.05) == pytest.approx(0.352, abs=1e-3)

    def test_invalid_confidence(self):
        with pytest.raises(ValueError):
            nis_bound(2, 1.0)


class TestComputeNIS:
    """Normalized innovation squared"""

    def test_identity_covariance(self):
        assert compute_nis(np.array([3.0, 4.0]), np.eye(2)) == pytest.approx(25.0)

    def test_non_negative(self):
        rng = np.random.default_rng(5)
        for _ in range(100):
            A = rng.normal(size=(3, 3))
            S = A @ A.T + 0.1 * np.eye(3)
            assert compute_nis(rng.normal(size=3), S) >= 0.0


class TestConsistency:
    """NIS sequence against its distribution"""

    def test_chi2_samples_are_consistent(self):
        rng = np.random.default_rng(11)
        samples = rng.chisquare(3, size=2000)
        report = nis_consistency(samples, dof=3)

        assert report.count == 2000
        assert report.mean == pytest.approx(3.0, abs=0.2)
        assert report.expected_mean == 3.0
        assert report.fraction_above == pytest.approx(0.05, abs=0.02)
        assert report.consistent

    def test_overconfident_filter_flagged(self):
        rng = np.random.default_rng(12)
        samples = 4.0 * rng.chisquare(2, size=1000)
        report = nis_consistency(samples, dof=2)
        assert not report.consistent

    def test_empty(self):
        with pytest.raises(ValueError):
            nis_consistency([], dof=2)

    def test_filter_report(self, ctrv_scenario):
        _, measurements = ctrv_scenario
        ukf = UnscentedKalmanFilter()
        ukf.process_batch(measurements)

        for sensor in SensorType:
            report = sensor_consistency(ukf, sensor)
            assert report.count == len(ukf.nis_history(sensor))
            assert report.mean > 0.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
