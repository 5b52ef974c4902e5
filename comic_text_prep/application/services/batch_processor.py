"""Batch processor for extracting text from multiple images."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from ...config import SUPPORTED_IMAGE_EXTENSIONS
from ...exceptions import ComicTextPrepError
from .text_extraction import ExtractionResult, TextExtractionService

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FileResult:
    """Outcome for one file of a batch."""
    path: Path
    result: ExtractionResult | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None and self.result is not None


@dataclass
class BatchResult:
    """Result of batch processing."""
    total: int
    successful: int
    failed: int
    processing_time_ms: float
    results: list[FileResult]

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        if self.total == 0:
            return 0.0
        return self.successful / self.total


class BatchProcessor:
    """Extract text from many images, recording failures per file."""

    def __init__(self, extraction_service: TextExtractionService):
        self._service = extraction_service

    def process_files(
        self,
        files: list[Path],
        language: str = "eng",
        preprocess: bool = True,
        use_regions: bool = False,
        progress_callback: Callable[[int, int, str], None] | None = None
    ) -> BatchResult:
        """Process multiple files.

        A failing file is recorded and the batch continues.

        Args:
            files: Image files to process
            language: OCR language identifier
            preprocess: Run the preprocessor before OCR
            use_regions: Recognize detected regions separately
            progress_callback: Optional callback(current, total, message)

        Returns:
            Batch processing result
        """
        start_time = time.time()

        results: list[FileResult] = []
        successful = 0
        failed = 0

        for i, file_path in enumerate(files, 1):
            file_path = Path(file_path)
            if progress_callback:
                progress_callback(i, len(files), f"Processing {file_path.name}")

            if not file_path.is_file():
                logger.error(f"File not found: {file_path}")
                results.append(FileResult(file_path, error="File not found"))
                failed += 1
                continue

            try:
                result = self._service.extract(
                    file_path,
                    language=language,
                    preprocess=preprocess,
                    use_regions=use_regions,
                )
                results.append(FileResult(file_path, result=result))
                successful += 1
            except ComicTextPrepError as e:
                logger.error(f"Failed {file_path.name}: {e}")
                results.append(FileResult(file_path, error=str(e)))
                failed += 1
            except Exception as e:
                logger.exception(f"Unexpected error processing {file_path.name}")
                results.append(FileResult(file_path, error=f"{type(e).__name__}: {e}"))
                failed += 1

        elapsed = (time.time() - start_time) * 1000
        logger.info(f"Batch OCR completed for {len(files)} files ({successful} succeeded)")

        return BatchResult(
            total=len(files),
            successful=successful,
            failed=failed,
            processing_time_ms=elapsed,
            results=results
        )

    def process_directory(
        self,
        input_dir: Path,
        extensions: tuple[str, ...] = SUPPORTED_IMAGE_EXTENSIONS,
        **kwargs: Any
    ) -> BatchResult:
        """Process all images in directory.

        Args:
            input_dir: Input directory
            extensions: File extensions to process
            **kwargs: Additional args for process_files

        Returns:
            Batch processing result
        """
        files = [
            f for f in Path(input_dir).iterdir()
            if f.is_file() and f.suffix.lower() in extensions
        ]
        files.sort()

        return self.process_files(files, **kwargs)
