"""Configuration and constants for the comic text preprocessing project."""

from dataclasses import dataclass


# Image processing constants
@dataclass(frozen=True)
class ImageProcessingConfig:
    """Fixed parameters of the preprocessing and extraction pipeline."""
    # Resolution guard
    min_ocr_dimension: int = 300  # Inputs below this in either axis get upscaled
    upscale_factor: int = 2  # Minimum upscale applied by the guard
    upscale_floor: int = 600  # Each axis reaches at least this after upscaling
    max_output_pixels: int = 100_000_000

    # Unsharp mask: detail at or below this magnitude counts as "flat"
    sharpen_flat_threshold: float = 2.0

    # Region annotation
    annotation_color: tuple[int, int, int] = (255, 0, 0)
    annotation_thickness: int = 2

    # OCR result filtering
    ocr_min_word_confidence: float = 50.0


IMAGE_CONFIG = ImageProcessingConfig()


# File handling - formats Pillow decodes out of the box
SUPPORTED_IMAGE_EXTENSIONS: tuple[str, ...] = (
    '.jpg', '.jpeg', '.jpe',
    '.png',
    '.bmp', '.dib',
    '.tiff', '.tif',
    '.webp',
    '.gif',
    '.pbm', '.pgm', '.ppm', '.pnm',
)

PROCESSED_FILE_PREFIX = "processed"


# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
