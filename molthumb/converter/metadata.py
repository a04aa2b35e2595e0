"""Metadata extraction: convert to SVG, let the rasterizer read it, clean up."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from molthumb.converter.models import ConversionFailure
from molthumb.converter.pipeline import ConversionPipeline
from molthumb.interfaces.rasterizer import VectorRasterizer

logger = logging.getLogger(__name__)


class MetadataExtractor:
    """Produces serialized metadata for a chemical table file.

    Needs the converter installed wherever uploads are processed, not just
    where thumbnails are rendered.
    """

    def __init__(self, pipeline: ConversionPipeline, rasterizer: VectorRasterizer) -> None:
        self._pipeline = pipeline
        self._rasterizer = rasterizer

    def extract(self, filename: str | Path) -> str | ConversionFailure:
        """Extract metadata for the file at filename.

        The converter picks its reader from the file extension, so the source
        is copied next to itself as <filename>.<format>. That copy and the
        generated <filename>.svg are removed on every path out.
        """
        filename = Path(filename)
        svg_path = Path(f"{filename}.svg")
        tmp_source = Path(f"{filename}.{self._pipeline.source_format}")

        try:
            shutil.copyfile(filename, tmp_source)
            result = self._pipeline.convert_to_intermediate(str(tmp_source), str(svg_path))
            if isinstance(result, ConversionFailure):
                return result
            return self._rasterizer.get_metadata(result.path)
        finally:
            tmp_source.unlink(missing_ok=True)
            svg_path.unlink(missing_ok=True)
            logger.debug("removed temporary files for %s", filename)
