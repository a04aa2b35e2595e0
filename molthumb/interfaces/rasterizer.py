"""Vector rasterizer interface consumed by the conversion pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from molthumb.converter.models import ConversionFailure, RasterImage


@runtime_checkable
class VectorRasterizer(Protocol):
    """Generic SVG handling: rasterize, parse metadata, describe."""

    def rasterize(
        self, svg_path: str, dst_path: str, width: int, height: int
    ) -> RasterImage | ConversionFailure: ...

    def get_metadata(self, svg_path: str) -> str: ...

    def get_long_desc(self, metadata: dict, size_bytes: int) -> str: ...
