"""MediaRepository implementation backed by a local directory."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path

from molthumb.interfaces.repository import RepoStatus

logger = logging.getLogger(__name__)


@dataclass
class TempLocalFile:
    """A temporary copy of a repository file, deleted by purge()."""

    path: str

    def purge(self) -> None:
        Path(self.path).unlink(missing_ok=True)


class FilesystemRepository:
    """MediaRepository storing derived files under <root>/thumb/.

    Paths passed in are relative to root; anything resolving outside of it
    is rejected.
    """

    def __init__(self, root: str = ".molthumb") -> None:
        self.root = Path(root)

    def _resolve(self, path: str) -> Path:
        full = (self.root / path).resolve()
        if not full.is_relative_to(self.root.resolve()):
            raise ValueError(f"Path escapes repository root: {path}")
        return full

    # -- MediaRepository protocol ----------------------------------------------

    def file_exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def get_local_copy(self, path: str) -> TempLocalFile | None:
        """Copy a stored file to the temp directory. None if it does not exist."""
        src = self._resolve(path)
        if not src.is_file():
            return None
        fd, tmp = tempfile.mkstemp(prefix="molthumb-", suffix=src.suffix)
        os.close(fd)
        shutil.copyfile(src, tmp)
        return TempLocalFile(path=tmp)

    def quick_import(self, src_path: str, dst_path: str) -> RepoStatus:
        try:
            dst = self._resolve(dst_path)
            dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(src_path, dst)
        except (OSError, ValueError) as e:
            return RepoStatus(ok=False, errors=[str(e)])
        logger.debug("stored %s as %s", src_path, dst)
        return RepoStatus(ok=True)


@dataclass
class LocalMediaFile:
    """A MediaFile for a file on local disk, stored in a FilesystemRepository."""

    local_path: str
    repo: FilesystemRepository
    metadata: str = ""

    @property
    def name(self) -> str:
        return Path(self.local_path).name

    def get_local_ref_path(self) -> str:
        return self.local_path

    def get_thumb_path(self, suffix: str | None = None) -> str:
        base = f"thumb/{self.name}"
        return f"{base}/{suffix}" if suffix else base

    def get_metadata(self) -> str:
        return self.metadata

    def get_size(self) -> int:
        return Path(self.local_path).stat().st_size
