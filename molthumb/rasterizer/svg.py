"""SVG rasterizer backed by cairosvg."""

from __future__ import annotations

import json
import logging
import re
import xml.etree.ElementTree as ET
from typing import Any

from molthumb.converter.models import ConversionFailure, RasterImage

logger = logging.getLogger(__name__)

METADATA_VERSION = 1

_LENGTH = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*(px)?\s*$")


def _parse_length(value: str | None) -> float | None:
    """Plain or px lengths only; relative units give None."""
    if not value:
        return None
    m = _LENGTH.match(value)
    return float(m.group(1)) if m else None


def _format_size(size_bytes: int) -> str:
    if size_bytes < 1024:
        return f"{size_bytes} bytes"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.0f} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"


class CairoSvgRasterizer:
    """Renders SVG files to PNG and reads their intrinsic size."""

    def rasterize(
        self, svg_path: str, dst_path: str, width: int, height: int
    ) -> RasterImage | ConversionFailure:
        try:
            import cairosvg
        except (ImportError, OSError) as e:
            # cairosvg loads libcairo at import time
            logger.warning("cairosvg unavailable: %s", e)
            return ConversionFailure(
                width=width, height=height, message=f"SVG rasterizer unavailable: {e}"
            )

        kwargs: dict[str, Any] = {}
        if width > 0:
            kwargs["output_width"] = width
        if height > 0:
            kwargs["output_height"] = height

        try:
            cairosvg.svg2png(url=svg_path, write_to=dst_path, **kwargs)
        except (OSError, ValueError, SyntaxError) as e:
            logger.warning("Rasterizing %s failed: %s", svg_path, e)
            return ConversionFailure(width=width, height=height, message=str(e))

        return RasterImage(path=dst_path, width=width, height=height)

    def get_metadata(self, svg_path: str) -> str:
        """Serialized metadata: intrinsic width/height, or an error record."""
        try:
            root = ET.parse(svg_path).getroot()
        except (OSError, ET.ParseError) as e:
            logger.warning("Cannot read SVG metadata from %s: %s", svg_path, e)
            return json.dumps({"error": {"message": str(e)}, "version": METADATA_VERSION})

        width = _parse_length(root.get("width"))
        height = _parse_length(root.get("height"))
        if width is None or height is None:
            view_box = (root.get("viewBox") or "").replace(",", " ").split()
            if len(view_box) == 4:
                try:
                    width, height = float(view_box[2]), float(view_box[3])
                except ValueError:
                    pass

        meta: dict[str, Any] = {"version": METADATA_VERSION}
        if width and height:
            meta["width"] = round(width)
            meta["height"] = round(height)
        return json.dumps(meta)

    def get_long_desc(self, metadata: dict, size_bytes: int) -> str:
        size = _format_size(size_bytes)
        width, height = metadata.get("width"), metadata.get("height")
        if width and height:
            return f"{width} × {height} pixels, file size: {size}"
        return f"file size: {size}"
