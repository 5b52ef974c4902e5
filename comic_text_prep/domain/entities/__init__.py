"""Domain entities."""

from .raster_image import RasterImage, ImageSource
from .text_region import TextRegion

__all__ = ['RasterImage', 'ImageSource', 'TextRegion']
