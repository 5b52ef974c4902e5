"""Command-line interface for comic text preprocessing."""

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError as ConfigValidationError

from .config import SUPPORTED_IMAGE_EXTENSIONS
from .core import annotate_regions, detect_regions, preprocess_file
from .domain import PreprocessConfig, RasterImage, Thresholds
from .exceptions import ComicTextPrepError, PreprocessError
from .utils.env import setup_logging

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = PreprocessConfig()
_DEFAULT_THRESHOLDS = Thresholds()


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="comic-text-prep",
        description="Prepare comic/manga pages for OCR and locate text regions"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--log-file",
        help="Also write logs to this file"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # preprocess
    prep = subparsers.add_parser("preprocess", help="Enhance images for OCR")
    prep.add_argument("input", help="Input image or folder")
    prep.add_argument("-o", "--output", required=True, help="Output folder")
    prep.add_argument(
        "--no-enhance",
        action="store_true",
        help="Skip brightness/gamma normalization"
    )
    prep.add_argument(
        "--no-denoise",
        action="store_true",
        help="Skip the median noise filter"
    )
    prep.add_argument(
        "--no-sharpen",
        action="store_true",
        help="Skip edge sharpening"
    )
    prep.add_argument(
        "--contrast",
        type=float,
        default=_DEFAULT_CONFIG.contrast,
        help=f"Linear contrast multiplier (default: {_DEFAULT_CONFIG.contrast})"
    )
    prep.add_argument(
        "--brightness",
        type=float,
        default=_DEFAULT_CONFIG.brightness,
        help=f"Brightness factor (default: {_DEFAULT_CONFIG.brightness})"
    )
    prep.add_argument(
        "--gamma",
        type=float,
        default=_DEFAULT_CONFIG.gamma,
        help=f"Gamma exponent (default: {_DEFAULT_CONFIG.gamma})"
    )
    prep.add_argument(
        "--continue-on-error",
        action="store_true",
        help="Continue processing remaining images if one fails"
    )

    # regions
    regions = subparsers.add_parser("regions", help="Detect text regions and print them as JSON")
    regions.add_argument("input", help="Input image")
    regions.add_argument(
        "--threshold",
        type=int,
        default=_DEFAULT_THRESHOLDS.dark_pixel_threshold,
        help=f"Dark pixel threshold (default: {_DEFAULT_THRESHOLDS.dark_pixel_threshold})"
    )
    regions.add_argument(
        "--min-width",
        type=int,
        default=_DEFAULT_THRESHOLDS.min_region_width,
        metavar="PIXELS",
        help=f"Minimum ink run width (default: {_DEFAULT_THRESHOLDS.min_region_width})"
    )
    regions.add_argument(
        "--min-height",
        type=int,
        default=_DEFAULT_THRESHOLDS.min_region_height,
        metavar="PIXELS",
        help=f"Minimum region height (default: {_DEFAULT_THRESHOLDS.min_region_height})"
    )
    regions.add_argument(
        "--max-gap",
        type=int,
        default=_DEFAULT_THRESHOLDS.max_vertical_gap,
        metavar="ROWS",
        help=f"Largest tolerated blank gap (default: {_DEFAULT_THRESHOLDS.max_vertical_gap})"
    )
    regions.add_argument(
        "--annotate",
        type=Path,
        help="Write a copy of the image with region outlines to this path"
    )

    return parser


def _collect_files(input_path: Path) -> list[Path]:
    if input_path.is_file():
        return [input_path]
    files = [
        f for f in input_path.iterdir()
        if f.is_file() and f.suffix.lower() in SUPPORTED_IMAGE_EXTENSIONS
    ]
    files.sort()
    return files


def run_preprocess(parsed: argparse.Namespace) -> int:
    """Preprocess one image or every image in a folder."""
    input_path = Path(parsed.input)
    output_path = Path(parsed.output)

    if not input_path.exists():
        logger.error(f"Input not found: {input_path}")
        return 1

    try:
        config = PreprocessConfig(
            enhance=not parsed.no_enhance,
            denoise=not parsed.no_denoise,
            sharpen=not parsed.no_sharpen,
            contrast=parsed.contrast,
            brightness=parsed.brightness,
            gamma=parsed.gamma,
        )
    except ConfigValidationError as e:
        logger.error(f"Invalid options: {e}")
        return 1

    files = _collect_files(input_path)
    if not files:
        logger.error("No image files found")
        return 1

    logger.info(f"Processing {len(files)} image(s)...")
    success_count = 0
    failed = []

    for i, file_path in enumerate(files, 1):
        logger.info(f"[{i}/{len(files)}] Processing {file_path.name}...")
        try:
            saved = preprocess_file(file_path, output_path, config)
            logger.info(f"  Saved: {saved.name}")
            success_count += 1
        except PreprocessError as e:
            logger.error(f"  Failed to process {file_path.name}: {e}")
            failed.append((file_path.name, str(e)))
            if not parsed.continue_on_error:
                logger.error("Use --continue-on-error to process remaining images")
                break
        except Exception as e:
            logger.exception(f"  Unexpected error processing {file_path.name}")
            failed.append((file_path.name, f"Unexpected: {type(e).__name__}: {e}"))
            if not parsed.continue_on_error:
                logger.error("Use --continue-on-error to process remaining images")
                break

    logger.info("=" * 50)
    if failed:
        logger.warning(f"Completed: {success_count}/{len(files)} succeeded")
        for name, error in failed:
            logger.error(f"  - {name}: {error}")
        return 1

    logger.info(f"Completed: All {len(files)} images processed successfully")
    return 0


def run_regions(parsed: argparse.Namespace) -> int:
    """Detect regions in one image and print them as JSON."""
    input_path = Path(parsed.input)

    try:
        thresholds = Thresholds(
            dark_pixel_threshold=parsed.threshold,
            min_region_width=parsed.min_width,
            min_region_height=parsed.min_height,
            max_vertical_gap=parsed.max_gap,
        )
    except ConfigValidationError as e:
        logger.error(f"Invalid options: {e}")
        return 1

    try:
        image = RasterImage.from_file(input_path)
        found = detect_regions(image, thresholds).to_list()
    except ComicTextPrepError as e:
        logger.error(f"Failed to scan {input_path.name}: {e}")
        return 1

    logger.info(f"Found {len(found)} region(s) in {input_path.name}")
    print(json.dumps([region.to_dict() for region in found], indent=2))

    if parsed.annotate:
        try:
            annotate_regions(image, found).save(parsed.annotate)
        except (OSError, ValueError) as e:
            logger.error(f"Cannot write annotated image: {e}")
            return 1
        logger.info(f"Annotated image saved: {parsed.annotate}")

    return 0


def main(args: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    setup_logging(logging.DEBUG if parsed.verbose else logging.INFO, log_file=parsed.log_file)

    if parsed.command == "preprocess":
        return run_preprocess(parsed)
    return run_regions(parsed)


if __name__ == "__main__":
    sys.exit(main())
