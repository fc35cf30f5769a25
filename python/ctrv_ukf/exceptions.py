"""
CTRV-UKF - Exceptions
=====================

Configuration problems are raised once, at construction. Numerical
failures are raised per update; the filter leaves its belief untouched
when one of them escapes ``process_measurement``.

License: MIT (see LICENSE file)
"""


class ConfigurationError(ValueError):
    """Invalid fixed configuration (noise levels, sensor flags, prior)."""


class FilterError(RuntimeError):
    """A single filter update could not be completed."""


class DegenerateCovarianceError(FilterError):
    """Augmented covariance is not positive definite (no Cholesky factor)."""


class SingularInnovationError(FilterError):
    """Predicted observation covariance cannot be inverted."""
