"""Ports - interfaces for external dependencies (Dependency Inversion)."""

from .ocr_engine import OCREngine, OCRResult, OCRWord

__all__ = [
    'OCREngine',
    'OCRResult',
    'OCRWord',
]
