"""Tests for the OCR preprocessor."""

from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from ..core.preprocessor import preprocess, preprocess_file
from ..domain.entities.raster_image import RasterImage
from ..domain.value_objects.config import PreprocessConfig
from ..exceptions import PreprocessError

PLAIN = dict(enhance=False, sharpen=False, denoise=False)


def _uniform(value: int, width: int = 300, height: int = 300, channels: int = 1) -> RasterImage:
    shape = (height, width) if channels == 1 else (height, width, channels)
    return RasterImage.from_array(np.full(shape, value, dtype=np.uint8))


def _page(width: int = 320, height: int = 320) -> RasterImage:
    """White page with a few dark strokes and some noise."""
    rng = np.random.default_rng(3)
    data = np.full((height, width, 3), 235, dtype=np.uint8)
    data[40:60, 30:250] = 20
    data[100:110, 60:200] = 40
    noise = rng.integers(0, 2, (height, width)).astype(bool) & (rng.random((height, width)) < 0.02)
    data[noise] = 0
    return RasterImage.from_array(data)


class TestPipeline:
    """Test stage composition."""

    def test_output_is_grayscale(self):
        """Test color input comes out single-channel."""
        result = preprocess(_page())
        assert result.channels == 1

    def test_default_pipeline_value(self):
        """Test defaults on a flat image: 100 -> 110 (brightness) -> 106 (contrast)."""
        result = preprocess(_uniform(100, 400, 400))
        assert result.size == (400, 400)
        assert np.all(result.pixels == 106)

    def test_contrast_applied_without_enhance(self):
        """Test the contrast stretch runs even when enhance is off."""
        result = preprocess(_uniform(100), contrast=1.2, **PLAIN)
        assert np.all(result.pixels == 94)

    def test_enhance_applies_brightness(self):
        """Test enhance scales brightness before contrast."""
        result = preprocess(_uniform(100), contrast=1.0, enhance=True,
                            sharpen=False, denoise=False)
        assert np.all(result.pixels == 110)

    def test_all_stages_off_is_identity(self):
        """Test a neutral config only converts to grayscale."""
        rng = np.random.default_rng(11)
        data = rng.integers(0, 256, (310, 305), dtype=np.uint8)
        img = RasterImage.from_array(data)

        result = preprocess(img, contrast=1.0, **PLAIN)

        assert np.array_equal(result.pixels, data)

    def test_denoise_runs_after_sharpen(self):
        """Test an isolated speck is gone even though sharpening runs first."""
        data = np.full((300, 300), 200, dtype=np.uint8)
        data[150, 150] = 0
        img = RasterImage.from_array(data)

        result = preprocess(img, contrast=1.0, enhance=False, sharpen=True, denoise=True)

        # Sharpening leaves a bright halo; the median takes a halo value
        assert result.pixel(150, 150) >= 200
        assert result.pixels.min() >= 200

    def test_input_not_mutated(self):
        """Test the input pixels are unchanged."""
        img = _page()
        before = img.to_array()

        preprocess(img)

        assert np.array_equal(img.pixels, before)

    def test_deterministic(self):
        """Test repeated calls give identical output."""
        img = _page()
        assert np.array_equal(preprocess(img).pixels, preprocess(img).pixels)

    def test_config_object_and_overrides(self):
        """Test overrides apply on top of an explicit config."""
        config = PreprocessConfig(contrast=1.0, **PLAIN)
        result = preprocess(_uniform(100), config, contrast=1.2)
        assert np.all(result.pixels == 94)

    def test_mapping_config(self):
        """Test a plain mapping is accepted as config."""
        result = preprocess(_uniform(100), {"contrast": 1.0, **PLAIN})
        assert np.all(result.pixels == 100)


class TestResolutionGuard:
    """Test upscaling of small inputs."""

    @pytest.mark.parametrize("size", [(100, 50), (250, 400), (299, 299), (40, 500)])
    def test_small_inputs_reach_600(self, size):
        """Test inputs below 300 on either side come out at least 600x600."""
        width, height = size
        result = preprocess(_uniform(180, width, height))
        assert result.width >= 600
        assert result.height >= 600
        assert result.width >= 2 * width
        assert result.height >= 2 * height

    def test_aspect_ratio_preserved(self):
        """Test a 100x50 image keeps its 2:1 ratio."""
        result = preprocess(_uniform(180, 100, 50))
        assert result.size == (1200, 600)

    @pytest.mark.parametrize("size", [(300, 300), (640, 480), (1000, 300)])
    def test_large_inputs_not_upscaled(self, size):
        """Test inputs already 300x300 or larger keep their size."""
        result = preprocess(_uniform(180, *size))
        assert result.size == size

    def test_guard_uses_original_size(self):
        """Test the guard reads the original dimensions, whatever the filters did."""
        result = preprocess(_uniform(180, 120, 120, channels=3), **PLAIN)
        assert result.size == (600, 600)

    def test_oversized_output_rejected(self):
        """Test an extreme aspect ratio that would explode memory fails."""
        with pytest.raises(PreprocessError) as exc_info:
            preprocess(_uniform(180, 1, 5000))
        assert exc_info.value.stage == "resize"


class TestFailures:
    """Test error reporting."""

    def test_zero_area(self):
        """Test a 0x0 image fails at the input stage."""
        empty = RasterImage.from_array(np.zeros((0, 0), dtype=np.uint8))
        with pytest.raises(PreprocessError) as exc_info:
            preprocess(empty)
        assert exc_info.value.stage == "input"

    def test_error_reports_image_source_path(self):
        """Test a loaded image's source path is attached to errors."""
        empty = RasterImage.from_array(np.zeros((0, 10), dtype=np.uint8), Path("pages/p1.png"))
        with pytest.raises(PreprocessError) as exc_info:
            preprocess(empty)
        assert exc_info.value.image_path == str(Path("pages/p1.png"))

    def test_undecodable_bytes(self):
        """Test garbage bytes fail at the decode stage."""
        with pytest.raises(PreprocessError) as exc_info:
            preprocess(b"definitely not an image")
        assert exc_info.value.stage == "decode"

    def test_missing_file(self, tmp_path: Path):
        """Test a missing path fails at the decode stage with the path attached."""
        missing = tmp_path / "missing.png"
        with pytest.raises(PreprocessError) as exc_info:
            preprocess(missing)
        assert exc_info.value.stage == "decode"
        assert exc_info.value.image_path == str(missing)

    @pytest.mark.parametrize("overrides", [
        {"gamma": 0.0},
        {"contrast": float("nan")},
        {"brightness": float("inf")},
        {"median_size": 4},
        {"unknown_option": True},
    ])
    def test_invalid_config(self, overrides):
        """Test invalid settings fail at the config stage."""
        with pytest.raises(PreprocessError) as exc_info:
            preprocess(_uniform(100), **overrides)
        assert exc_info.value.stage == "config"

    def test_error_code(self):
        """Test the error carries its code."""
        with pytest.raises(PreprocessError) as exc_info:
            preprocess(b"")
        assert exc_info.value.error_code == "PREPROCESS_ERROR"
        assert "decode" in str(exc_info.value)


class TestPreprocessFile:
    """Test file-based preprocessing."""

    def test_writes_png_to_output_dir(self, tmp_path: Path):
        """Test output is a grayscale PNG named after the input."""
        src = tmp_path / "page01.jpg"
        Image.new("RGB", (320, 320), color="white").save(src)
        out_dir = tmp_path / "out"

        output = preprocess_file(src, out_dir)

        assert output.parent == out_dir
        assert output.name.startswith("processed-")
        assert output.name.endswith("-page01.png")
        with Image.open(output) as written:
            assert written.mode == "L"
            assert written.size == (320, 320)

    def test_defaults_to_input_directory(self, tmp_path: Path):
        """Test output lands beside the input when no directory is given."""
        src = tmp_path / "small.png"
        Image.new("RGB", (100, 80), color="white").save(src)

        output = preprocess_file(src)

        assert output.parent == tmp_path
        with Image.open(output) as written:
            assert written.size == (750, 600)

    def test_unique_names(self, tmp_path: Path):
        """Test repeated runs do not overwrite each other."""
        src = tmp_path / "page.png"
        Image.new("L", (300, 300), color=255).save(src)

        assert preprocess_file(src, tmp_path) != preprocess_file(src, tmp_path)

    def test_bad_input_leaves_no_output(self, tmp_path: Path):
        """Test a failure writes nothing."""
        src = tmp_path / "broken.png"
        src.write_bytes(b"not a png")
        out_dir = tmp_path / "out"

        with pytest.raises(PreprocessError):
            preprocess_file(src, out_dir)

        assert not out_dir.exists()
