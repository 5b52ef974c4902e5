"""Comic Text Prep - OCR preprocessing and text region detection for comic pages."""

__version__ = "1.0.0"

from .core import preprocess, preprocess_file, detect_regions, RegionScan, annotate_regions
from .domain import RasterImage, TextRegion, PreprocessConfig, Thresholds
from .exceptions import (
    ComicTextPrepError,
    ImageDecodeError,
    PreprocessError,
    DetectionError,
    OCRError,
)
from .utils.env import setup_logging

__all__ = [
    '__version__',
    # Core operations
    'preprocess',
    'preprocess_file',
    'detect_regions',
    'RegionScan',
    'annotate_regions',
    # Domain
    'RasterImage',
    'TextRegion',
    'PreprocessConfig',
    'Thresholds',
    'setup_logging',
    # Exceptions
    'ComicTextPrepError',
    'ImageDecodeError',
    'PreprocessError',
    'DetectionError',
    'OCRError',
]
