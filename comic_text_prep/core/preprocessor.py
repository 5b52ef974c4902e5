"""Prepare page images for OCR.

Stage order is fixed: grayscale, brightness/gamma (when ``enhance``),
contrast stretch (always), sharpen, denoise, then the resolution guard
evaluated against the original size. Sharpening runs before the median
pass so artifacts it amplifies are removed by the denoise step.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..config import IMAGE_CONFIG, PROCESSED_FILE_PREFIX
from ..domain.entities.raster_image import ImageSource, RasterImage, source_label
from ..domain.value_objects.config import PreprocessConfig
from ..exceptions import ImageDecodeError, PreprocessError
from .image_ops import (
    adjust_brightness_gamma,
    median_filter,
    resolution_guard_size,
    stretch_contrast,
    to_grayscale,
    unsharp_mask,
    upscale_for_ocr,
)

logger = logging.getLogger(__name__)


def resolve_config(
    config: PreprocessConfig | Mapping[str, Any] | None,
    overrides: Mapping[str, Any]
) -> PreprocessConfig:
    """Build the effective config from a base (or mapping) and overrides.

    Raises:
        PreprocessError: If the resulting config is invalid
    """
    try:
        if config is None:
            base = PreprocessConfig()
        elif isinstance(config, PreprocessConfig):
            base = config
        else:
            base = PreprocessConfig(**config)
        return base.with_overrides(**overrides) if overrides else base
    except (ValidationError, TypeError) as e:
        raise PreprocessError(f"Invalid preprocess configuration: {e}", stage="config") from e


def preprocess(
    image: ImageSource,
    config: PreprocessConfig | Mapping[str, Any] | None = None,
    **overrides: Any
) -> RasterImage:
    """Produce a grayscale image tuned for OCR legibility.

    The input is never modified; a new image is returned.

    Args:
        image: RasterImage, path to an image file, or encoded image bytes
        config: Base configuration (defaults to PreprocessConfig())
        **overrides: Individual config fields to replace

    Returns:
        Preprocessed single-channel image

    Raises:
        PreprocessError: On undecodable input, invalid configuration,
            zero-area input or a degenerate output size
    """
    settings = resolve_config(config, overrides)
    image_path = source_label(image)

    try:
        source = RasterImage.open(image)
    except ImageDecodeError as e:
        raise PreprocessError(e.message, stage="decode", image_path=image_path) from e

    if source.is_empty:
        raise PreprocessError(
            f"Image has zero area ({source.width}x{source.height})",
            stage="input",
            image_path=image_path,
        )

    original_width, original_height = source.size

    result = to_grayscale(source)
    if settings.enhance:
        result = adjust_brightness_gamma(result, settings.brightness, settings.gamma)
    result = stretch_contrast(result, settings.contrast)
    if settings.sharpen:
        result = unsharp_mask(
            result,
            sigma=settings.sharpen_sigma,
            flat=settings.sharpen_flat,
            jagged=settings.sharpen_jagged,
        )
    if settings.denoise:
        result = median_filter(result, settings.median_size)

    target = resolution_guard_size(original_width, original_height)
    if target is not None:
        if target[0] * target[1] > IMAGE_CONFIG.max_output_pixels:
            raise PreprocessError(
                f"Upscaled size {target[0]}x{target[1]} exceeds "
                f"{IMAGE_CONFIG.max_output_pixels} pixels",
                stage="resize",
                image_path=image_path,
            )
        result = upscale_for_ocr(result, target)

    if result.is_empty:
        raise PreprocessError("Preprocessing produced an empty image", stage="resize",
                              image_path=image_path)

    logger.debug(
        f"Preprocessed {image_path or 'in-memory image'}: "
        f"{original_width}x{original_height} -> {result.width}x{result.height}"
    )
    return result


def preprocess_file(
    path: Path | str,
    output_dir: Path | str | None = None,
    config: PreprocessConfig | Mapping[str, Any] | None = None,
    **overrides: Any
) -> Path:
    """Preprocess an image file and write the result as PNG.

    The output is named ``processed-<uuid>-<stem>.png`` and placed next to
    the input unless ``output_dir`` is given.

    Returns:
        Path of the written file

    Raises:
        PreprocessError: On any preprocessing failure or if the output
            cannot be written
    """
    path = Path(path)
    result = preprocess(path, config, **overrides)

    target_dir = Path(output_dir) if output_dir is not None else path.parent
    output_path = target_dir / f"{PROCESSED_FILE_PREFIX}-{uuid.uuid4()}-{path.stem}.png"
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        result.save(output_path)
    except OSError as e:
        raise PreprocessError(f"Cannot write output: {e}", stage="encode",
                              image_path=str(path)) from e

    logger.debug(f"Image preprocessed: {path.name} -> {output_path.name}")
    return output_path
