"""Unit tests for configuration."""

import pytest
from pydantic import ValidationError

from comic_text_prep.config import IMAGE_CONFIG, SUPPORTED_IMAGE_EXTENSIONS
from comic_text_prep.domain.value_objects.config import PreprocessConfig, Thresholds


class TestPreprocessConfig:
    """Tests for PreprocessConfig."""

    def test_default_values(self):
        config = PreprocessConfig()
        assert config.enhance is True
        assert config.denoise is True
        assert config.sharpen is True
        assert config.contrast == 1.2
        assert config.brightness == 1.1
        assert config.gamma == 1.0
        assert config.median_size == 3

    def test_custom_values(self):
        config = PreprocessConfig(enhance=False, contrast=1.5, median_size=5)
        assert config.enhance is False
        assert config.contrast == 1.5
        assert config.median_size == 5

    def test_frozen(self):
        config = PreprocessConfig()
        with pytest.raises(ValidationError):
            config.contrast = 2.0

    def test_with_overrides(self):
        base = PreprocessConfig(denoise=False)
        changed = base.with_overrides(gamma=2.2)
        assert changed.gamma == 2.2
        assert changed.denoise is False
        assert base.gamma == 1.0

    def test_validation_gamma_positive(self):
        with pytest.raises(ValidationError):
            PreprocessConfig(gamma=0)
        with pytest.raises(ValidationError):
            PreprocessConfig(gamma=-1.0)

    def test_validation_non_finite(self):
        with pytest.raises(ValidationError):
            PreprocessConfig(contrast=float("inf"))
        with pytest.raises(ValidationError):
            PreprocessConfig(brightness=float("nan"))

    def test_validation_median_size(self):
        with pytest.raises(ValidationError):
            PreprocessConfig(median_size=4)
        with pytest.raises(ValidationError):
            PreprocessConfig(median_size=1)

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            PreprocessConfig(sharpness=3)

    def test_override_validated(self):
        with pytest.raises(ValidationError):
            PreprocessConfig().with_overrides(contrast=-0.5)


class TestThresholds:
    """Tests for Thresholds."""

    def test_default_values(self):
        thresholds = Thresholds()
        assert thresholds.dark_pixel_threshold == 100
        assert thresholds.min_region_width == 50
        assert thresholds.min_region_height == 20
        assert thresholds.max_vertical_gap == 10

    def test_threshold_range(self):
        assert Thresholds(dark_pixel_threshold=0).dark_pixel_threshold == 0
        assert Thresholds(dark_pixel_threshold=256).dark_pixel_threshold == 256
        with pytest.raises(ValidationError):
            Thresholds(dark_pixel_threshold=257)
        with pytest.raises(ValidationError):
            Thresholds(dark_pixel_threshold=-1)

    def test_negative_sizes_rejected(self):
        with pytest.raises(ValidationError):
            Thresholds(min_region_width=-1)
        with pytest.raises(ValidationError):
            Thresholds(max_vertical_gap=-1)

    def test_equality(self):
        assert Thresholds() == Thresholds()
        assert Thresholds().with_overrides(max_vertical_gap=3) == Thresholds(max_vertical_gap=3)


class TestImageConfig:
    """Tests for the fixed pipeline constants."""

    def test_resolution_guard_constants(self):
        assert IMAGE_CONFIG.min_ocr_dimension == 300
        assert IMAGE_CONFIG.upscale_factor == 2
        assert IMAGE_CONFIG.upscale_floor == 600

    def test_extensions_lowercase(self):
        assert '.png' in SUPPORTED_IMAGE_EXTENSIONS
        assert all(ext == ext.lower() and ext.startswith('.') for ext in SUPPORTED_IMAGE_EXTENSIONS)
