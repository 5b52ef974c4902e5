"""Image operations used to prepare pages for OCR."""

import logging
import math
from typing import Iterable, Optional

import cv2
import numpy as np
import numpy.typing as npt
from PIL import Image

from ..config import IMAGE_CONFIG
from ..domain.entities.raster_image import RasterImage
from ..domain.entities.text_region import TextRegion

logger = logging.getLogger(__name__)

# Type aliases
FloatArray = npt.NDArray[np.float32]
ImageArray = npt.NDArray[np.uint8]  # HxW or HxWx3


def _to_uint8(values: FloatArray) -> ImageArray:
    """Round and clamp float samples back to 8-bit."""
    return np.rint(np.clip(values, 0.0, 255.0)).astype(np.uint8)


def _require_grayscale(image: RasterImage, operation: str) -> None:
    if not image.is_grayscale:
        raise ValueError(f"{operation} expects a grayscale image, got {image.channels} channels")


def to_grayscale(image: RasterImage) -> RasterImage:
    """Convert to single-channel luma (ITU-R 601-2).

    Images with an alpha channel are composited onto white first, so fully
    transparent areas come out white rather than as ink.

    Args:
        image: Input image with 1, 3 or 4 channels

    Returns:
        New single-channel image
    """
    if image.is_grayscale:
        return RasterImage.from_array(image.pixels, image.source_path)

    rgb = image.pixels
    if image.channels == 4:
        alpha = rgb[:, :, 3:4].astype(np.float32) / 255.0
        composited = rgb[:, :, :3].astype(np.float32) * alpha + 255.0 * (1.0 - alpha)
        rgb = _to_uint8(composited)

    gray = cv2.cvtColor(np.ascontiguousarray(rgb[:, :, :3]), cv2.COLOR_RGB2GRAY)
    return RasterImage.from_array(gray, image.source_path)


def adjust_brightness_gamma(
    image: RasterImage,
    brightness: float,
    gamma: float
) -> RasterImage:
    """Scale brightness, then apply a gamma curve.

    The gamma curve is ``255 * (v / 255) ** (1 / gamma)``, so values above 1
    brighten mid-tones and values below 1 darken them.

    Args:
        image: Grayscale input image
        brightness: Multiplicative brightness factor
        gamma: Gamma exponent (> 0)

    Returns:
        New grayscale image
    """
    _require_grayscale(image, "adjust_brightness_gamma")
    if gamma <= 0:
        raise ValueError(f"gamma must be positive, got {gamma}")

    values = np.clip(image.pixels.astype(np.float32) * brightness, 0.0, 255.0)
    if gamma != 1.0:
        values = 255.0 * np.power(values / 255.0, 1.0 / gamma)
    return RasterImage.from_array(_to_uint8(values), image.source_path)


def stretch_contrast(image: RasterImage, contrast: float) -> RasterImage:
    """Apply ``contrast * v + (128 - 128 * contrast)`` around mid-grey.

    Args:
        image: Grayscale input image
        contrast: Linear contrast multiplier (1.0 leaves the image unchanged)

    Returns:
        New grayscale image
    """
    _require_grayscale(image, "stretch_contrast")
    offset = 128.0 - 128.0 * contrast
    values = image.pixels.astype(np.float32) * contrast + offset
    return RasterImage.from_array(_to_uint8(values), image.source_path)


def unsharp_mask(
    image: RasterImage,
    sigma: float = 1.0,
    flat: float = 1.0,
    jagged: float = 2.0,
    threshold: float = IMAGE_CONFIG.sharpen_flat_threshold
) -> RasterImage:
    """Sharpen by adding back the difference from a Gaussian blur.

    Detail with magnitude at or below ``threshold`` (flat areas) is scaled by
    ``flat``; stronger detail (glyph edges) is scaled by ``jagged``.

    Args:
        image: Grayscale input image
        sigma: Gaussian blur sigma
        flat: Gain for low-amplitude detail
        jagged: Gain for high-amplitude detail
        threshold: Detail magnitude separating flat from jagged

    Returns:
        New grayscale image
    """
    _require_grayscale(image, "unsharp_mask")
    values = image.pixels.astype(np.float32)
    blurred = cv2.GaussianBlur(
        values, (0, 0), sigmaX=sigma, sigmaY=sigma, borderType=cv2.BORDER_REPLICATE
    )
    detail = values - blurred
    gain = np.where(np.abs(detail) <= threshold, flat, jagged).astype(np.float32)
    return RasterImage.from_array(_to_uint8(values + gain * detail), image.source_path)


def median_filter(image: RasterImage, size: int = 3) -> RasterImage:
    """Rank-order filter over a size x size window.

    Args:
        image: Grayscale input image
        size: Odd window size (>= 3)

    Returns:
        New grayscale image
    """
    _require_grayscale(image, "median_filter")
    if size < 3 or size % 2 == 0:
        raise ValueError(f"Median window must be odd and >= 3, got {size}")
    filtered = cv2.medianBlur(np.ascontiguousarray(image.to_array()), size)
    return RasterImage.from_array(filtered, image.source_path)


def resolution_guard_size(width: int, height: int) -> Optional[tuple[int, int]]:
    """Compute the upscale target for images too small for OCR.

    Images with either side below ``min_ocr_dimension`` are scaled
    uniformly by at least ``upscale_factor`` and until both sides reach
    ``upscale_floor``. Larger images are left alone.

    Args:
        width: Original width in pixels (> 0)
        height: Original height in pixels (> 0)

    Returns:
        (new_width, new_height), or None if no upscale is needed
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Cannot size a {width}x{height} image")
    if width >= IMAGE_CONFIG.min_ocr_dimension and height >= IMAGE_CONFIG.min_ocr_dimension:
        return None

    scale = max(
        float(IMAGE_CONFIG.upscale_factor),
        IMAGE_CONFIG.upscale_floor / width,
        IMAGE_CONFIG.upscale_floor / height,
    )
    # Tolerance keeps exact products (e.g. 600.0000001) from rounding up a pixel
    new_width = math.ceil(width * scale - 1e-6)
    new_height = math.ceil(height * scale - 1e-6)
    return (new_width, new_height)


def upscale_for_ocr(image: RasterImage, size: tuple[int, int]) -> RasterImage:
    """Resize with Lanczos resampling.

    Args:
        image: Input image
        size: Target (width, height)

    Returns:
        Resized image
    """
    resized = image.to_pil().resize(size, Image.Resampling.LANCZOS)
    return RasterImage.from_pil(resized, image.source_path)


def annotate_regions(
    image: RasterImage,
    regions: Iterable[TextRegion],
    color: tuple[int, int, int] = IMAGE_CONFIG.annotation_color,
    thickness: int = IMAGE_CONFIG.annotation_thickness
) -> RasterImage:
    """Draw region outlines on an RGB copy of the image.

    Args:
        image: Image the regions were detected in
        regions: Regions to outline
        color: RGB outline colour
        thickness: Line thickness in pixels

    Returns:
        New RGB image with outlines drawn
    """
    canvas = image.to_array()
    if image.channels == 1:
        canvas = cv2.cvtColor(canvas, cv2.COLOR_GRAY2RGB)
    elif image.channels == 4:
        canvas = cv2.cvtColor(canvas, cv2.COLOR_RGBA2RGB)
    canvas = np.ascontiguousarray(canvas)

    count = 0
    for region in regions:
        cv2.rectangle(
            canvas,
            (region.x, region.y),
            (region.right, region.bottom),
            color,
            thickness,
        )
        count += 1

    logger.debug(f"Annotated {count} region(s)")
    return RasterImage.from_array(canvas, image.source_path)
