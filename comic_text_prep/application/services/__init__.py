"""Application services."""

from .text_extraction import TextExtractionService, ExtractionResult
from .batch_processor import BatchProcessor, BatchResult, FileResult

__all__ = [
    'TextExtractionService',
    'ExtractionResult',
    'BatchProcessor',
    'BatchResult',
    'FileResult',
]
