"""Default vector rasterizer."""

from molthumb.rasterizer.svg import CairoSvgRasterizer

__all__ = ["CairoSvgRasterizer"]
