"""Collaborator interfaces: rasterizer, media repository, MIME resolver."""

from molthumb.interfaces.mime import MimeResolver
from molthumb.interfaces.rasterizer import VectorRasterizer
from molthumb.interfaces.repository import LocalCopy, MediaFile, MediaRepository, RepoStatus

__all__ = [
    "LocalCopy",
    "MediaFile",
    "MediaRepository",
    "MimeResolver",
    "RepoStatus",
    "VectorRasterizer",
]
