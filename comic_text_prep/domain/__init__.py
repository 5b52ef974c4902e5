"""Domain layer - image entities and configuration value objects."""

from .entities.raster_image import RasterImage, ImageSource
from .entities.text_region import TextRegion
from .value_objects.config import PreprocessConfig, Thresholds

__all__ = [
    # Entities
    'RasterImage',
    'ImageSource',
    'TextRegion',
    # Value Objects
    'PreprocessConfig',
    'Thresholds',
]
