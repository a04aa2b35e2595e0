"""Host media repository interface and models."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


class RepoStatus(BaseModel):
    """Outcome of a repository write."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    errors: list[str] = Field(default_factory=list)


@runtime_checkable
class LocalCopy(Protocol):
    """A process-local copy of a repository file; purge() deletes it."""

    @property
    def path(self) -> str: ...

    def purge(self) -> None: ...


@runtime_checkable
class MediaRepository(Protocol):
    """Blob store for originals and derived files (thumbnails, cached SVGs)."""

    def file_exists(self, path: str) -> bool: ...

    def get_local_copy(self, path: str) -> LocalCopy | None: ...

    def quick_import(self, src_path: str, dst_path: str) -> RepoStatus: ...


@runtime_checkable
class MediaFile(Protocol):
    """An uploaded file as seen by the handlers."""

    @property
    def name(self) -> str: ...

    @property
    def repo(self) -> MediaRepository: ...

    def get_local_ref_path(self) -> str: ...

    def get_thumb_path(self, suffix: str | None = None) -> str: ...

    def get_metadata(self) -> str: ...

    def get_size(self) -> int: ...
