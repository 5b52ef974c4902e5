"""OCR Engine port - interface for text recognition."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from ...domain.entities.raster_image import RasterImage


@dataclass(frozen=True, slots=True)
class OCRWord:
    """A recognized word and its box as (x0, y0, x1, y1)."""
    text: str
    confidence: float
    bbox: tuple[int, int, int, int]

    def translated(self, dx: int, dy: int) -> OCRWord:
        """Shift the box, e.g. from crop to page coordinates."""
        x0, y0, x1, y1 = self.bbox
        return OCRWord(self.text, self.confidence, (x0 + dx, y0 + dy, x1 + dx, y1 + dy))


@dataclass(frozen=True, slots=True)
class OCRResult:
    """Result of recognizing one image."""
    text: str
    confidence: float
    words: tuple[OCRWord, ...] = ()

    @property
    def word_count(self) -> int:
        return len(self.words)


@runtime_checkable
class OCREngine(Protocol):
    """Port for OCR engines.

    Implementations wrap Tesseract, PaddleOCR, EasyOCR, a remote API, etc.
    """

    @property
    def name(self) -> str:
        """Engine name."""
        ...

    def recognize(self, image: RasterImage, language: str) -> OCRResult:
        """Recognize text in an image.

        Args:
            image: Image to process (typically preprocessed)
            language: Engine language identifier, e.g. "eng" or "jpn"

        Returns:
            Recognized text, overall confidence and word boxes
        """
        ...
