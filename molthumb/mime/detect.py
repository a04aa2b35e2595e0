"""File-type probe: generic guess, chemical content sniffing, extension hint."""

from __future__ import annotations

import logging
from pathlib import Path

import magic
from pydantic import BaseModel

from molthumb.interfaces.mime import MimeResolver
from molthumb.mime.hinter import PLAIN_TEXT, improve_from_extension
from molthumb.mime.sniffer import ProbeBuffer, classify_probe

logger = logging.getLogger(__name__)

OCTET_STREAM = "application/octet-stream"


class MimeGuess(BaseModel):
    """How a file's MIME type was arrived at."""

    path: str
    generic: str
    by_content: str | None = None
    by_extension: str | None = None
    mime: str


def _generic_guess(probe: ProbeBuffer) -> str:
    """libmagic's MIME for the head sample, as the host would record it on upload."""
    if not probe.head:
        return PLAIN_TEXT
    try:
        return magic.from_buffer(probe.head, mime=True)
    except magic.MagicException as e:
        logger.warning("libmagic could not classify sample: %s", e)
        return OCTET_STREAM


def guess_mime(path: str | Path, resolver: MimeResolver | None = None) -> MimeGuess:
    """Classify a file on disk the way a media repository does on upload."""
    path = Path(path)
    probe = ProbeBuffer.from_file(path)
    generic = _generic_guess(probe)

    by_content = classify_probe(probe, str(path))
    mime = by_content or generic

    ext = path.suffix.lstrip(".")
    improved = improve_from_extension(mime, ext, resolver)
    by_extension = None
    if improved is not None and improved != mime:
        by_extension = mime = improved

    logger.debug("%s: generic=%s content=%s final=%s", path, generic, by_content, mime)
    return MimeGuess(
        path=str(path),
        generic=generic,
        by_content=by_content,
        by_extension=by_extension,
        mime=mime,
    )
