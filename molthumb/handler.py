"""Media handlers for renderable chemical table files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from molthumb.config.models import MolThumbConfig
from molthumb.converter.metadata import MetadataExtractor
from molthumb.converter.models import (
    ConversionFailure,
    RasterImage,
    ThumbnailImage,
    TransformFlags,
    TransformParameterError,
)
from molthumb.converter.pipeline import ConversionPipeline, unpack_metadata
from molthumb.interfaces.rasterizer import VectorRasterizer
from molthumb.interfaces.repository import MediaFile
from molthumb.mime.sniffer import MOLFILE, RXNFILE

# MIME type -> source format tag passed to the converter
FORMAT_VARIANTS: dict[str, str] = {
    MOLFILE: "mol",
    RXNFILE: "rxn",
}


class ChemicalHandler:
    """Thumbnails, metadata and descriptions for one chemical file format."""

    def __init__(
        self,
        config: MolThumbConfig,
        rasterizer: VectorRasterizer,
        source_format: str,
        **pipeline_kwargs: Any,
    ) -> None:
        self._rasterizer = rasterizer
        self.pipeline = ConversionPipeline(config, rasterizer, source_format, **pipeline_kwargs)
        self.metadata_extractor = MetadataExtractor(self.pipeline, rasterizer)

    @property
    def source_format(self) -> str:
        return self.pipeline.source_format

    def is_animated_image(self, file: MediaFile) -> bool:
        return False

    def can_render(self, file: MediaFile) -> bool:
        """Only if the active converter handles this format and metadata is sane."""
        if not self.pipeline.is_capable():
            return False
        return "error" not in unpack_metadata(file.get_metadata())

    def do_transform(
        self,
        file: MediaFile,
        dst_path: str,
        dst_url: str,
        params: dict[str, Any],
        flags: TransformFlags = TransformFlags.NONE,
    ) -> ThumbnailImage | ConversionFailure | TransformParameterError:
        return self.pipeline.do_transform(file, dst_path, dst_url, params, flags)

    def rasterize(
        self, source_path: str, dst_path: str, width: int, height: int
    ) -> RasterImage | ConversionFailure:
        return self.pipeline.rasterize(source_path, dst_path, width, height)

    def get_metadata(self, file: MediaFile | None, filename: str | Path) -> str | ConversionFailure:
        return self.metadata_extractor.extract(filename)

    def get_long_desc(self, file: MediaFile) -> str:
        # generic image description, the SVG one does not fit molecules
        metadata = unpack_metadata(file.get_metadata())
        return self._rasterizer.get_long_desc(metadata, file.get_size())


def supported_mime_types() -> list[str]:
    return list(FORMAT_VARIANTS)


def create_handler(
    mime: str,
    config: MolThumbConfig,
    rasterizer: VectorRasterizer | None = None,
    **pipeline_kwargs: Any,
) -> ChemicalHandler:
    """Create the handler for a chemical MIME type.

    Raises ValueError for MIME types without a renderer.
    """
    source_format = FORMAT_VARIANTS.get(mime)
    if source_format is None:
        raise ValueError(
            f"No handler for MIME type {mime!r}. "
            f"Supported: {', '.join(FORMAT_VARIANTS)}"
        )
    if rasterizer is None:
        from molthumb.rasterizer.svg import CairoSvgRasterizer

        rasterizer = CairoSvgRasterizer()
    return ChemicalHandler(config, rasterizer, source_format, **pipeline_kwargs)
