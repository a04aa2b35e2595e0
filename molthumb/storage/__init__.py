"""Local storage for originals and derived files."""

from molthumb.storage.filesystem import FilesystemRepository, LocalMediaFile, TempLocalFile

__all__ = ["FilesystemRepository", "LocalMediaFile", "TempLocalFile"]
