"""Extension-based MIME resolver interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MimeResolver(Protocol):
    """Resolves a MIME type purely from a file extension."""

    def guess_types_for_extension(self, extension: str) -> str | None: ...
