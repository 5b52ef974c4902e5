"""Locate rectangular areas of dense ink with a single raster scan.

The scan walks rows top to bottom, keeping at most one open region. A row
whose ink extent is wider than ``min_region_width`` opens or grows the
region; other rows are gaps. Once a gap exceeds ``max_vertical_gap`` rows
the region is closed and emitted if it is taller than ``min_region_height``.

This is a coarse heuristic: text blocks closer than the gap tolerance are
merged, and side-by-side columns sharing rows come out as one box.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterator, NamedTuple, Optional

import numpy as np
import numpy.typing as npt
from pydantic import ValidationError

from ..domain.entities.raster_image import ImageSource, RasterImage, source_label
from ..domain.entities.text_region import TextRegion
from ..domain.value_objects.config import Thresholds
from ..exceptions import DetectionError, ImageDecodeError
from .image_ops import to_grayscale

logger = logging.getLogger(__name__)

GrayArray = npt.NDArray[np.uint8]  # HxW


class RowExtent(NamedTuple):
    """Leftmost and rightmost ink columns of one row."""
    left: int
    right: int

    @property
    def width(self) -> int:
        return self.right - self.left


@dataclass(frozen=True, slots=True)
class OpenRegion:
    """Region still accumulating rows."""
    left: int
    top: int
    right: int
    bottom: int

    @property
    def height(self) -> int:
        return self.bottom - self.top

    def extend(self, y: int, extent: RowExtent) -> OpenRegion:
        """Grow horizontally by union and down to row y."""
        return OpenRegion(
            left=min(self.left, extent.left),
            top=self.top,
            right=max(self.right, extent.right),
            bottom=y,
        )

    def to_text_region(self) -> TextRegion:
        return TextRegion(
            x=self.left,
            y=self.top,
            width=self.right - self.left,
            height=self.bottom - self.top,
        )


def row_ink_extent(row: GrayArray, dark_pixel_threshold: int) -> Optional[RowExtent]:
    """Find the ink extent of a single row.

    Args:
        row: One row of grayscale samples
        dark_pixel_threshold: Samples strictly below this count as ink

    Returns:
        RowExtent, or None if the row has no ink
    """
    ink = np.flatnonzero(row.astype(np.int16) < dark_pixel_threshold)
    if ink.size == 0:
        return None
    return RowExtent(int(ink[0]), int(ink[-1]))


def _close(state: OpenRegion, thresholds: Thresholds) -> Optional[TextRegion]:
    if state.height > thresholds.min_region_height:
        return state.to_text_region()
    return None


def scan_row(
    state: Optional[OpenRegion],
    y: int,
    extent: Optional[RowExtent],
    thresholds: Thresholds
) -> tuple[Optional[OpenRegion], Optional[TextRegion]]:
    """Advance the scan by one row.

    Args:
        state: Currently open region, if any
        y: Row index
        extent: Ink extent of row y (None for an ink-free row)
        thresholds: Detection thresholds

    Returns:
        Tuple of (new_state, emitted_region_or_None)
    """
    if extent is not None and extent.width > thresholds.min_region_width:
        if state is None:
            return OpenRegion(left=extent.left, top=y, right=extent.right, bottom=y), None
        return state.extend(y, extent), None

    if state is not None and y - state.bottom > thresholds.max_vertical_gap:
        return None, _close(state, thresholds)

    return state, None


def finish_scan(state: Optional[OpenRegion], thresholds: Thresholds) -> Optional[TextRegion]:
    """Emit the region still open after the last row, if tall enough."""
    if state is None:
        return None
    return _close(state, thresholds)


class RegionScan:
    """Lazy, restartable sequence of detected regions.

    Each iteration re-runs the scan over the same grayscale raster, yielding
    regions in the order they were opened (top to bottom).
    """

    def __init__(self, gray: GrayArray, thresholds: Thresholds):
        self._gray = gray
        self._thresholds = thresholds

    @property
    def thresholds(self) -> Thresholds:
        return self._thresholds

    @property
    def size(self) -> tuple[int, int]:
        return (int(self._gray.shape[1]), int(self._gray.shape[0]))

    def __iter__(self) -> Iterator[TextRegion]:
        thresholds = self._thresholds
        state: Optional[OpenRegion] = None
        for y, row in enumerate(self._gray):
            extent = row_ink_extent(row, thresholds.dark_pixel_threshold)
            state, emitted = scan_row(state, y, extent, thresholds)
            if emitted is not None:
                yield emitted
        final = finish_scan(state, thresholds)
        if final is not None:
            yield final

    def to_list(self) -> list[TextRegion]:
        return list(self)

    def __repr__(self) -> str:
        width, height = self.size
        return f"RegionScan({width}x{height}, {self._thresholds!r})"


def resolve_thresholds(
    thresholds: Thresholds | Mapping[str, Any] | None,
    overrides: Mapping[str, Any]
) -> Thresholds:
    """Build the effective thresholds from a base (or mapping) and overrides.

    Raises:
        DetectionError: If the resulting thresholds are invalid
    """
    try:
        if thresholds is None:
            base = Thresholds()
        elif isinstance(thresholds, Thresholds):
            base = thresholds
        else:
            base = Thresholds(**thresholds)
        return base.with_overrides(**overrides) if overrides else base
    except (ValidationError, TypeError) as e:
        raise DetectionError(f"Invalid detection thresholds: {e}", stage="config") from e


def detect_regions(
    image: ImageSource,
    thresholds: Thresholds | Mapping[str, Any] | None = None,
    **overrides: Any
) -> RegionScan:
    """Find rectangles likely to contain text.

    Decoding and validation happen immediately; the scan itself runs each
    time the returned sequence is iterated.

    Args:
        image: RasterImage, path to an image file, or encoded image bytes
        thresholds: Base thresholds (defaults to Thresholds())
        **overrides: Individual threshold fields to replace

    Returns:
        RegionScan yielding TextRegion findings (possibly none)

    Raises:
        DetectionError: On undecodable input, zero-area input or invalid
            thresholds
    """
    settings = resolve_thresholds(thresholds, overrides)
    image_path = source_label(image)

    try:
        source = RasterImage.open(image)
    except ImageDecodeError as e:
        raise DetectionError(e.message, stage="decode", image_path=image_path) from e

    if source.is_empty:
        raise DetectionError(
            f"Image has zero area ({source.width}x{source.height})",
            stage="input",
            image_path=image_path,
        )

    gray = to_grayscale(source)
    logger.debug(f"Scanning {gray.width}x{gray.height} image for text regions")
    return RegionScan(gray.pixels, settings)
