"""molthumb - chemical table file detection and PNG preview rendering."""

from molthumb.config import MolThumbConfig, load_config
from molthumb.converter import (
    ConversionFailure,
    ConversionPipeline,
    ConverterConfigurationError,
    ConverterRegistry,
    MetadataExtractor,
)
from molthumb.handler import ChemicalHandler, create_handler
from molthumb.mime import classify, guess_mime, improve_from_extension

__version__ = "0.1.0"

__all__ = [
    "ChemicalHandler",
    "ConversionFailure",
    "ConversionPipeline",
    "ConverterConfigurationError",
    "ConverterRegistry",
    "MetadataExtractor",
    "MolThumbConfig",
    "classify",
    "create_handler",
    "guess_mime",
    "improve_from_extension",
    "load_config",
]
