"""RasterImage entity - immutable decoded bitmap."""

from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Union

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from ...exceptions import ImageDecodeError

if TYPE_CHECKING:
    from .text_region import TextRegion

PixelArray = npt.NDArray[np.uint8]  # HxW or HxWxC

ImageSource = Union["RasterImage", Path, str, bytes]

_MAX_16BIT = 65535.0


def source_label(source: ImageSource) -> str | None:
    """Path to report in errors for an image source, if it has one."""
    if isinstance(source, (str, Path)):
        return str(source)
    if isinstance(source, RasterImage) and source.source_path is not None:
        return str(source.source_path)
    return None


@dataclass(frozen=True, slots=True, eq=False)
class RasterImage:
    """Domain entity representing a decoded image.

    Pixels are held in a read-only uint8 array of shape (H, W) for
    single-channel images or (H, W, C) with C in {3, 4}. Every transform
    returns a new RasterImage; the backing array is never written to.
    """
    _pixels: PixelArray
    source_path: Path | None = None

    def __post_init__(self) -> None:
        pixels = self._pixels
        if pixels.dtype != np.uint8:
            raise ValueError(f"Expected uint8 pixels, got {pixels.dtype}")
        if pixels.ndim == 3 and pixels.shape[2] not in (3, 4):
            raise ValueError(f"Unsupported channel count: {pixels.shape[2]}")
        if pixels.ndim not in (2, 3):
            raise ValueError(f"Expected 2D or 3D pixel array, got {pixels.ndim}D")
        if pixels.flags.writeable:
            raise ValueError("Pixel array must be read-only; use RasterImage.from_array")

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def channels(self) -> int:
        return 1 if self._pixels.ndim == 2 else int(self._pixels.shape[2])

    @property
    def is_grayscale(self) -> bool:
        return self.channels == 1

    @property
    def is_empty(self) -> bool:
        """True when the image has zero area."""
        return self.width == 0 or self.height == 0

    @property
    def pixels(self) -> PixelArray:
        """Read-only view of the pixel data."""
        return self._pixels

    def pixel(self, x: int, y: int) -> int | tuple[int, ...]:
        """Get the sample(s) at column x, row y."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        value = self._pixels[y, x]
        if self._pixels.ndim == 2:
            return int(value)
        return tuple(int(v) for v in value)

    def crop(self, region: TextRegion) -> RasterImage:
        """Crop to a region, clamped to the image bounds."""
        x0 = max(0, region.x)
        y0 = max(0, region.y)
        x1 = min(self.width, region.x + region.width)
        y1 = min(self.height, region.y + region.height)
        if x1 <= x0 or y1 <= y0:
            raise ValueError(f"Region {region} lies outside the {self.width}x{self.height} image")
        return RasterImage.from_array(self._pixels[y0:y1, x0:x1], self.source_path)

    def to_array(self) -> PixelArray:
        """Return a writable copy of the pixel data."""
        return self._pixels.copy()

    def to_pil(self) -> PILImage.Image:
        """Convert to a PIL image."""
        return PILImage.fromarray(self.to_array())

    def save(self, path: Path | str, **kwargs) -> None:
        """Save image to path (format chosen from the suffix)."""
        self.to_pil().save(path, **kwargs)

    def to_png_bytes(self) -> bytes:
        """Encode as PNG."""
        buffer = io.BytesIO()
        self.to_pil().save(buffer, format="PNG")
        return buffer.getvalue()

    @classmethod
    def from_array(cls, data: object, source_path: Path | None = None) -> RasterImage:
        """Create from a numpy array (copied; values clipped to 0..255)."""
        array = np.asarray(data)
        if array.dtype == np.bool_:
            array = array.astype(np.uint8) * 255
        elif array.dtype != np.uint8:
            array = np.clip(np.rint(array), 0, 255).astype(np.uint8)
        if array.ndim == 3 and array.shape[2] == 1:
            array = array[:, :, 0]
        pixels = np.array(array, dtype=np.uint8, copy=True, order="C")
        pixels.flags.writeable = False
        return cls(_pixels=pixels, source_path=source_path)

    @classmethod
    def from_pil(cls, image: PILImage.Image, source_path: Path | None = None) -> RasterImage:
        """Create from a PIL image, normalising its mode to L, RGB or RGBA.

        Integer modes deeper than 8 bits ("I;16*", "I") are rescaled from
        0..65535 to 0..255. Float images ("F") are taken as 0..1 when no
        sample exceeds 1, otherwise as 0..255.
        """
        if image.mode in ("L", "RGB", "RGBA"):
            converted = image
        elif image.mode in ("LA", "PA") or (image.mode == "P" and "transparency" in image.info):
            converted = image.convert("RGBA")
        elif image.mode.startswith("I"):
            samples = np.asarray(image, dtype=np.float32)
            return cls.from_array(samples * (255.0 / _MAX_16BIT), source_path)
        elif image.mode == "F":
            samples = np.asarray(image, dtype=np.float32)
            if samples.size and np.nanmax(samples) <= 1.0:
                samples = samples * 255.0
            return cls.from_array(np.nan_to_num(samples), source_path)
        elif image.mode == "1":
            converted = image.convert("L")
        else:
            converted = image.convert("RGB")
        return cls.from_array(np.asarray(converted), source_path)

    @classmethod
    def from_file(cls, path: Path | str) -> RasterImage:
        """Load and decode an image file."""
        path = Path(path)
        try:
            with PILImage.open(path) as image:
                image.load()
                return cls.from_pil(image, source_path=path)
        except FileNotFoundError as e:
            raise ImageDecodeError("Image file not found", image_path=str(path)) from e
        except (UnidentifiedImageError, PILImage.DecompressionBombError, OSError, ValueError) as e:
            raise ImageDecodeError(f"Cannot decode image: {e}", image_path=str(path)) from e

    @classmethod
    def from_bytes(cls, data: bytes) -> RasterImage:
        """Decode an encoded image held in memory."""
        try:
            with PILImage.open(io.BytesIO(data)) as image:
                image.load()
                return cls.from_pil(image)
        except (UnidentifiedImageError, PILImage.DecompressionBombError, OSError, ValueError) as e:
            raise ImageDecodeError(f"Cannot decode image bytes: {e}") from e

    @classmethod
    def open(cls, source: ImageSource) -> RasterImage:
        """Accept a RasterImage, a path or encoded bytes."""
        if isinstance(source, RasterImage):
            return source
        if isinstance(source, (bytes, bytearray, memoryview)):
            return cls.from_bytes(bytes(source))
        if isinstance(source, (str, Path)):
            return cls.from_file(source)
        raise ImageDecodeError(f"Unsupported image source type: {type(source).__name__}")

    def __repr__(self) -> str:
        return f"RasterImage({self.width}x{self.height}, channels={self.channels})"
