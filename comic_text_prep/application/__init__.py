"""Application layer - OCR orchestration around the preprocessing core."""

from .services.text_extraction import TextExtractionService, ExtractionResult
from .services.batch_processor import BatchProcessor, BatchResult, FileResult

__all__ = [
    'TextExtractionService',
    'ExtractionResult',
    'BatchProcessor',
    'BatchResult',
    'FileResult',
]
