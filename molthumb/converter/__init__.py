"""CTF conversion through an external converter with a cached SVG intermediate."""

from molthumb.converter.metadata import MetadataExtractor
from molthumb.converter.models import (
    ConversionFailure,
    ConversionRequest,
    ConverterConfigurationError,
    IntermediateArtifact,
    RasterImage,
    ThumbnailImage,
    TransformFlags,
    TransformParameterError,
)
from molthumb.converter.params import normalise_params
from molthumb.converter.pipeline import ConversionPipeline, unpack_metadata
from molthumb.converter.registry import ConverterRegistry

__all__ = [
    "ConversionFailure",
    "ConversionPipeline",
    "ConversionRequest",
    "ConverterConfigurationError",
    "ConverterRegistry",
    "IntermediateArtifact",
    "MetadataExtractor",
    "RasterImage",
    "ThumbnailImage",
    "TransformFlags",
    "TransformParameterError",
    "normalise_params",
    "unpack_metadata",
]
