"""Custom exceptions for comic text preprocessing."""

from typing import Optional


class ComicTextPrepError(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Human-readable error description
        error_code: Optional error code for programmatic handling
    """

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ImageDecodeError(ComicTextPrepError):
    """Image data could not be read or decoded.

    Attributes:
        image_path: Path of the image being decoded (if it came from a file)
    """

    def __init__(self, message: str, image_path: Optional[str] = None):
        super().__init__(message, error_code="DECODE_ERROR")
        self.image_path = image_path

    def __str__(self) -> str:
        if self.image_path:
            return f"{super().__str__()} (image: {self.image_path})"
        return super().__str__()


class _StageError(ComicTextPrepError):
    """Error raised by one stage of a single-image operation."""

    code = "STAGE_ERROR"

    def __init__(
        self,
        message: str,
        stage: str,
        image_path: Optional[str] = None
    ):
        super().__init__(message, error_code=self.code)
        self.stage = stage
        self.image_path = image_path

    def __str__(self) -> str:
        text = f"{super().__str__()} (stage: {self.stage})"
        if self.image_path:
            text = f"{text} (image: {self.image_path})"
        return text


class PreprocessError(_StageError):
    """Error while preparing an image for OCR.

    Attributes:
        stage: Pipeline stage that failed ("decode", "config", "input",
            "resize" or "encode")
        image_path: Path to the image being processed when error occurred
    """

    code = "PREPROCESS_ERROR"


class DetectionError(_StageError):
    """Error while scanning an image for text regions.

    Attributes:
        stage: Stage that failed ("decode", "config" or "input")
        image_path: Path to the image being scanned when error occurred
    """

    code = "DETECTION_ERROR"


class OCRError(ComicTextPrepError):
    """Error reported by an OCR engine.

    Attributes:
        engine: Name of the engine that failed (if known)
    """

    def __init__(self, message: str, engine: Optional[str] = None):
        super().__init__(message, error_code="OCR_ERROR")
        self.engine = engine
