from .loader import load_config
from .models import (
    CacheSettings,
    ConverterSettings,
    ConverterSpec,
    MolThumbConfig,
    RepositorySettings,
    ThumbnailSettings,
)

__all__ = [
    "CacheSettings",
    "ConverterSettings",
    "ConverterSpec",
    "MolThumbConfig",
    "RepositorySettings",
    "ThumbnailSettings",
    "load_config",
]
