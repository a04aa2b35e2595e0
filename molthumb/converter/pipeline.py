"""CTF → SVG → raster conversion with a cached SVG intermediate."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from molthumb.config.models import MolThumbConfig
from molthumb.converter.models import (
    ConversionFailure,
    ConversionRequest,
    IntermediateArtifact,
    RasterImage,
    ThumbnailImage,
    TransformFlags,
    TransformParameterError,
)
from molthumb.converter.params import normalise_params
from molthumb.converter.registry import ConverterRegistry
from molthumb.converter.shell import ShellResult, run_with_limits
from molthumb.interfaces.rasterizer import VectorRasterizer
from molthumb.interfaces.repository import LocalCopy, MediaFile, MediaRepository

logger = logging.getLogger(__name__)

Normaliser = Callable[[dict[str, Any], dict[str, Any]], "dict[str, Any] | None"]
Runner = Callable[[str, int, int], ShellResult]


def unpack_metadata(serialized: str | None) -> dict[str, Any]:
    """Decode stored metadata; anything unreadable counts as empty."""
    if not serialized:
        return {}
    try:
        data = json.loads(serialized)
    except (json.JSONDecodeError, TypeError):
        return {}
    return data if isinstance(data, dict) else {}


def _is_usable(path: Path) -> bool:
    return path.is_file() and path.stat().st_size > 0


class ConversionPipeline:
    """Renders one chemical table file format through the configured converter.

    The SVG written by the converter is kept in the media repository under a
    derived thumbnail name so later thumbnails of the same file skip the
    external process.
    """

    def __init__(
        self,
        config: MolThumbConfig,
        rasterizer: VectorRasterizer,
        source_format: str,
        *,
        registry: ConverterRegistry | None = None,
        normaliser: Normaliser = normalise_params,
        runner: Runner = run_with_limits,
    ) -> None:
        self._config = config
        self._rasterizer = rasterizer
        self.source_format = source_format
        self.registry = registry or ConverterRegistry(config.converter)
        self._normaliser = normaliser
        self._runner = runner

    # ------------------------------------------------------------------
    # Capability
    # ------------------------------------------------------------------

    def is_capable(self) -> bool:
        return self.registry.is_capable(self.source_format)

    def cache_name(self, file: MediaFile) -> str:
        # must end with the file's real name, otherwise it won't be purged with it
        return f"{self._config.cache.prefix}{file.name}"

    # ------------------------------------------------------------------
    # CTF → SVG
    # ------------------------------------------------------------------

    def convert_to_intermediate(
        self, source_path: str, svg_path: str, width: int = 0, height: int = 0
    ) -> IntermediateArtifact | ConversionFailure:
        """Run the converter unless a non-empty SVG is already at svg_path.

        width and height only end up in the failure for error reporting.
        """
        spec = self.registry.require(self.source_format)
        svg = Path(svg_path)

        if _is_usable(svg):
            logger.debug("SVG already present at %s, skipping converter", svg)
            return IntermediateArtifact(path=svg_path, reused=True)
        if svg.exists():
            svg.unlink()

        cmd = self.registry.build_command(spec, self.source_format, source_path, svg_path)
        logger.debug("running converter: %s", cmd)
        result = self._runner(cmd, spec.memory_kib, self.registry.timeout)

        removed = self._remove_bad_file(svg)
        if result.returncode != 0 or removed:
            self._log_error_for_external_process(result, cmd)
            # partial output must not end up in the cache
            svg.unlink(missing_ok=True)
            return ConversionFailure(
                width=width, height=height, message=self._diagnostic(result)
            )
        return IntermediateArtifact(path=svg_path)

    @staticmethod
    def _remove_bad_file(svg: Path) -> bool:
        """Delete a missing-or-empty converter output. True if it was bad."""
        if _is_usable(svg):
            return False
        if svg.exists():
            svg.unlink()
        return True

    @staticmethod
    def _diagnostic(result: ShellResult) -> str:
        output = result.output.strip()
        if result.returncode != 0:
            msg = f"Converter exited with status {result.returncode}"
        else:
            msg = "Converter produced no SVG output"
        return f"{msg}: {output}" if output else msg

    @staticmethod
    def _log_error_for_external_process(result: ShellResult, cmd: str) -> None:
        logger.warning(
            "Converter failed with exit code %d: %s (command: %s)",
            result.returncode,
            result.output.strip(),
            cmd,
        )

    # ------------------------------------------------------------------
    # CTF → raster
    # ------------------------------------------------------------------

    def rasterize_ctf(
        self, request: ConversionRequest, svg_path: str
    ) -> RasterImage | ConversionFailure:
        """Convert to svg_path (if needed) and hand the SVG to the rasterizer."""
        converted = self.convert_to_intermediate(
            request.source_path, svg_path, request.width, request.height
        )
        if isinstance(converted, ConversionFailure):
            return converted
        return self._rasterizer.rasterize(
            converted.path, request.destination_path, request.width, request.height
        )

    def rasterize(
        self, source_path: str, dst_path: str, width: int, height: int
    ) -> RasterImage | ConversionFailure:
        """Standalone CTF → raster conversion outside of thumbnail handling."""
        svg_path = Path(f"{dst_path}.svg")
        request = ConversionRequest(
            source_path=source_path,
            destination_path=dst_path,
            width=width,
            height=height,
            source_format=self.source_format,
        )
        try:
            return self.rasterize_ctf(request, str(svg_path))
        finally:
            svg_path.unlink(missing_ok=True)

    # ------------------------------------------------------------------
    # Thumbnails
    # ------------------------------------------------------------------

    def do_transform(
        self,
        file: MediaFile,
        dst_path: str,
        dst_url: str,
        params: dict[str, Any],
        flags: TransformFlags = TransformFlags.NONE,
    ) -> ThumbnailImage | ConversionFailure | TransformParameterError:
        metadata = unpack_metadata(file.get_metadata())
        normalised = self._normaliser(params, metadata)
        if normalised is None:
            return TransformParameterError(params=params)

        client_width = normalised["width"]
        client_height = normalised["height"]

        thumb = ThumbnailImage(
            file_name=file.name,
            url=dst_url,
            path=dst_path,
            width=client_width,
            height=client_height,
        )
        if flags & TransformFlags.LATER:
            return thumb.model_copy(update={"deferred": True})

        if "error" in metadata:
            error = metadata["error"]
            stored = error.get("message", "") if isinstance(error, dict) else str(error)
            return ConversionFailure(
                width=client_width,
                height=client_height,
                message=f"Invalid vector file: {stored}",
            )

        svg_thumb_path = file.get_thumb_path(self.cache_name(file))
        svg_path = f"{dst_path}.svg"

        try:
            Path(dst_path).parent.mkdir(parents=True, exist_ok=True)
        except OSError:
            logger.warning("Cannot create thumbnail directory for %s", dst_path, exc_info=True)
            return ConversionFailure(
                width=client_width,
                height=client_height,
                message="thumbnail destination directory could not be created",
            )

        repo = file.repo
        local_copy: LocalCopy | None = None
        refresh_cache = False
        if self._config.cache.enabled and repo.file_exists(svg_thumb_path):
            # process a local copy, the converter would fetch it anyway
            local_copy = repo.get_local_copy(svg_thumb_path)
            if local_copy is not None:
                svg_path = local_copy.path
                if _is_usable(Path(svg_path)):
                    logger.debug("SVG thumb exists at %s. Re-using.", svg_path)
                else:
                    # an empty stored SVG counts as not cached
                    logger.debug("SVG thumb at %s is empty, regenerating", svg_thumb_path)
                    refresh_cache = True

        request = ConversionRequest(
            source_path=file.get_local_ref_path(),
            destination_path=dst_path,
            width=normalised["physical_width"],
            height=normalised["physical_height"],
            source_format=self.source_format,
        )
        try:
            status = self.rasterize_ctf(request, svg_path)
        finally:
            if local_copy is None or refresh_cache:
                self._store_intermediate(repo, Path(svg_path), svg_thumb_path)
            if local_copy is not None:
                local_copy.purge()

        if isinstance(status, ConversionFailure):
            return status.model_copy(update={"width": client_width, "height": client_height})
        return thumb

    def _store_intermediate(self, repo: MediaRepository, svg: Path, svg_thumb_path: str) -> None:
        """Copy a freshly generated SVG into the repository, then delete it."""
        if not svg.is_file():
            return
        try:
            if self._config.cache.enabled and svg.stat().st_size > 0:
                try:
                    status = repo.quick_import(str(svg), svg_thumb_path)
                except OSError as e:
                    logger.warning(
                        "Cannot copy SVG file (%s) to repo (%s): %s", svg, svg_thumb_path, e
                    )
                else:
                    if not status.ok:
                        logger.warning(
                            "Cannot copy SVG file (%s) to repo (%s) because %s",
                            svg,
                            svg_thumb_path,
                            "; ".join(status.errors),
                        )
        finally:
            svg.unlink(missing_ok=True)
