"""Core processing functionality."""

from .image_ops import (
    to_grayscale,
    adjust_brightness_gamma,
    stretch_contrast,
    unsharp_mask,
    median_filter,
    resolution_guard_size,
    upscale_for_ocr,
    annotate_regions,
)
from .preprocessor import preprocess, preprocess_file
from .region_detector import (
    RegionScan,
    RowExtent,
    OpenRegion,
    detect_regions,
    row_ink_extent,
    scan_row,
    finish_scan,
)

__all__ = [
    # Image operations
    'to_grayscale',
    'adjust_brightness_gamma',
    'stretch_contrast',
    'unsharp_mask',
    'median_filter',
    'resolution_guard_size',
    'upscale_for_ocr',
    'annotate_regions',
    # Preprocessing
    'preprocess',
    'preprocess_file',
    # Region detection
    'RegionScan',
    'RowExtent',
    'OpenRegion',
    'detect_regions',
    'row_ink_extent',
    'scan_row',
    'finish_scan',
]
