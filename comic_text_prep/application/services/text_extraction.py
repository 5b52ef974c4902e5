"""Text extraction service - preprocess, segment and hand off to OCR."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any

from ...config import IMAGE_CONFIG
from ...core.preprocessor import preprocess as run_preprocess
from ...core.region_detector import detect_regions
from ...domain.entities.raster_image import ImageSource, RasterImage
from ...domain.entities.text_region import TextRegion
from ...domain.value_objects.config import PreprocessConfig, Thresholds
from ...exceptions import OCRError
from ..ports.ocr_engine import OCREngine, OCRResult, OCRWord

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Text extracted from one image.

    Word boxes and regions are in the coordinates of the image handed to
    the OCR engine (the preprocessed image when preprocessing is on).
    """
    text: str
    confidence: float
    word_count: int
    detected_blocks: tuple[OCRWord, ...] = ()
    regions: tuple[TextRegion, ...] = ()
    processing_time_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "confidence": self.confidence,
            "word_count": self.word_count,
            "detected_blocks": [
                {"text": w.text, "confidence": w.confidence, "bbox": list(w.bbox)}
                for w in self.detected_blocks
            ],
            "regions": [r.to_dict() for r in self.regions],
        }


@dataclass
class _Recognized:
    """OCR output for one crop, with its offset in the full image."""
    result: OCRResult
    offset: tuple[int, int] = (0, 0)
    words: list[OCRWord] = field(default_factory=list)


def _inclusive(region: TextRegion) -> TextRegion:
    # Detected right/bottom edges are ink pixels; crop() clamps the extra row/column
    return TextRegion(region.x, region.y, region.width + 1, region.height + 1)


class TextExtractionService:
    """Run the preprocessing core in front of an OCR engine."""

    def __init__(
        self,
        engine: OCREngine,
        preprocess_config: PreprocessConfig | None = None,
        thresholds: Thresholds | None = None
    ):
        self._engine = engine
        self._preprocess_config = preprocess_config or PreprocessConfig()
        self._thresholds = thresholds or Thresholds()

    @property
    def engine(self) -> OCREngine:
        return self._engine

    def extract(
        self,
        source: ImageSource,
        language: str = "eng",
        preprocess: bool = True,
        use_regions: bool = False
    ) -> ExtractionResult:
        """Extract text from a single image.

        Args:
            source: RasterImage, image path or encoded bytes
            language: OCR language identifier
            preprocess: Run the preprocessor before OCR
            use_regions: Recognize each detected text region separately

        Returns:
            Extraction result

        Raises:
            PreprocessError: If preprocessing fails
            DetectionError: If region detection fails
            ImageDecodeError: If preprocessing is off and the image is unreadable
            OCRError: If the engine fails
        """
        start_time = time.time()

        if preprocess:
            prepared = run_preprocess(source, self._preprocess_config)
        else:
            prepared = RasterImage.open(source)

        regions: tuple[TextRegion, ...] = ()
        if use_regions:
            regions = tuple(detect_regions(prepared, self._thresholds))
            logger.debug(f"Found {len(regions)} text region(s)")

        if regions:
            recognized = [
                self._recognize(prepared.crop(_inclusive(region)), language, (region.x, region.y))
                for region in regions
            ]
        else:
            recognized = [self._recognize(prepared, language, (0, 0))]

        texts = [r.result.text.strip() for r in recognized if r.result.text.strip()]
        words = [w for r in recognized for w in r.words]
        confidence = sum(r.result.confidence for r in recognized) / len(recognized)
        detected_blocks = tuple(
            w for w in words if w.confidence > IMAGE_CONFIG.ocr_min_word_confidence
        )

        elapsed = (time.time() - start_time) * 1000
        logger.info(
            f"OCR completed with {self._engine.name} ({language}), "
            f"confidence: {confidence:.1f}%"
        )

        return ExtractionResult(
            text="\n".join(texts),
            confidence=confidence,
            word_count=len(words),
            detected_blocks=detected_blocks,
            regions=regions,
            processing_time_ms=elapsed,
        )

    def _recognize(
        self,
        image: RasterImage,
        language: str,
        offset: tuple[int, int]
    ) -> _Recognized:
        try:
            result = self._engine.recognize(image, language)
        except OCRError:
            raise
        except Exception as e:
            raise OCRError(f"OCR engine failed: {e}", engine=self._engine.name) from e

        dx, dy = offset
        words = [w.translated(dx, dy) if offset != (0, 0) else w for w in result.words]
        return _Recognized(result=result, offset=offset, words=words)
