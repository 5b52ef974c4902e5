"""Value objects - immutable data with validation."""

from .config import PreprocessConfig, Thresholds

__all__ = [
    'PreprocessConfig',
    'Thresholds',
]
