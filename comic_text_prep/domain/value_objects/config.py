"""Configuration value objects with validation."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PreprocessConfig(BaseModel):
    """Options for preparing an image for OCR.

    Immutable; use ``with_overrides`` to derive a changed copy.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Stage switches
    enhance: bool = True
    denoise: bool = True
    sharpen: bool = True

    # Point operations
    contrast: float = Field(default=1.2, ge=0.0, allow_inf_nan=False)
    brightness: float = Field(default=1.1, ge=0.0, allow_inf_nan=False)
    gamma: float = Field(default=1.0, gt=0.0, allow_inf_nan=False)

    # Unsharp mask
    sharpen_sigma: float = Field(default=1.0, gt=0.0, le=50.0, allow_inf_nan=False)
    sharpen_flat: float = Field(default=1.0, ge=0.0, allow_inf_nan=False)
    sharpen_jagged: float = Field(default=2.0, ge=0.0, allow_inf_nan=False)

    # Median filter window (pixels per side)
    median_size: int = Field(default=3, ge=3, le=31)

    @field_validator('median_size')
    @classmethod
    def validate_median_size(cls, v: int) -> int:
        """Median window must be odd."""
        if v % 2 == 0:
            raise ValueError(f"median_size must be odd, got {v}")
        return v

    def with_overrides(self, **changes: Any) -> PreprocessConfig:
        """Return a new, validated config with some fields replaced."""
        return type(self)(**{**self.model_dump(), **changes})


class Thresholds(BaseModel):
    """Detection-time constants for the text region scan."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Intensity below which a pixel counts as ink (8-bit grayscale)
    dark_pixel_threshold: int = Field(default=100, ge=0, le=256)
    min_region_width: int = Field(default=50, ge=0)
    min_region_height: int = Field(default=20, ge=0)
    # Longest run of text-free rows tolerated before a region is closed
    max_vertical_gap: int = Field(default=10, ge=0)

    def with_overrides(self, **changes: Any) -> Thresholds:
        """Return a new, validated set of thresholds with some fields replaced."""
        return type(self)(**{**self.model_dump(), **changes})


__all__ = [
    'PreprocessConfig',
    'Thresholds',
]
