"""Pydantic models and errors for the CTF conversion subsystem."""

from __future__ import annotations

from enum import IntFlag
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ConverterConfigurationError(Exception):
    """The active converter cannot handle a source format, or is unknown.

    A programming/configuration error: callers are expected to check
    capability before converting.
    """

    def __init__(self, converter: str, source_format: str | None = None) -> None:
        self.converter = converter
        self.source_format = source_format
        if source_format is None:
            msg = f"Converter '{converter}' is not configured"
        else:
            msg = (
                f"Converting {source_format} to SVG is not supported by "
                f"the currently chosen converter '{converter}'"
            )
        super().__init__(msg)


class TransformFlags(IntFlag):
    NONE = 0
    # only build the thumbnail object, render on first request
    LATER = 1


class ConversionRequest(BaseModel):
    """A single CTF → raster conversion."""

    model_config = ConfigDict(frozen=True)

    source_path: str
    destination_path: str
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)
    source_format: str


class ConversionFailure(BaseModel):
    """A failed conversion, with the requested size for error reporting."""

    model_config = ConfigDict(frozen=True)

    code: str = "thumbnail_error"
    width: int = 0
    height: int = 0
    message: str = ""


class TransformParameterError(BaseModel):
    """Requested thumbnail parameters could not be normalised."""

    model_config = ConfigDict(frozen=True)

    params: dict[str, Any] = Field(default_factory=dict)
    message: str = "Invalid thumbnail parameters"


class IntermediateArtifact(BaseModel):
    """An SVG produced (or found already present) for a source file."""

    model_config = ConfigDict(frozen=True)

    path: str
    reused: bool = False


class RasterImage(BaseModel):
    """A raster file written by the rasterizer."""

    model_config = ConfigDict(frozen=True)

    path: str
    width: int
    height: int


class ThumbnailImage(BaseModel):
    """A thumbnail of a media file, possibly not rendered yet."""

    file_name: str
    url: str
    path: str
    width: int
    height: int
    deferred: bool = False
