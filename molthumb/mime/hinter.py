"""Upgrade a plain-text MIME guess using the file extension."""

from __future__ import annotations

import logging
import mimetypes

from molthumb.interfaces.mime import MimeResolver
from molthumb.mime.sniffer import MOLFILE, RDFILE, RGFILE, RXNFILE, SDFILE

logger = logging.getLogger(__name__)

PLAIN_TEXT = "text/plain"

CHEMICAL_EXTENSIONS: dict[str, str] = {
    "mol": MOLFILE,
    "sdf": SDFILE,
    "rxn": RXNFILE,
    "rd": RDFILE,
    "rg": RGFILE,
}


def is_chem_file_extension(extension: str) -> bool:
    return extension.lower().lstrip(".") in CHEMICAL_EXTENSIONS


class ExtensionMimeResolver:
    """The stdlib mimetypes table plus the chemical table file extensions."""

    def __init__(self) -> None:
        self._types = mimetypes.MimeTypes()
        for ext, mime in CHEMICAL_EXTENSIONS.items():
            self._types.add_type(mime, f".{ext}")

    def guess_types_for_extension(self, extension: str) -> str | None:
        ext = extension.lower().lstrip(".")
        if not ext:
            return None
        mime, _ = self._types.guess_type(f"file.{ext}", strict=False)
        return mime


def improve_from_extension(
    mime: str | None, extension: str, resolver: MimeResolver | None = None
) -> str | None:
    """Return a better MIME for a file whose content only looked like plain text.

    Content sniffing is authoritative; the extension is consulted only when
    the previous guess degraded to text/plain and the extension is one of
    mol, sdf, rxn, rd, rg.
    """
    if mime != PLAIN_TEXT or not is_chem_file_extension(extension):
        return mime

    resolver = resolver or _default_resolver()
    improved = resolver.guess_types_for_extension(extension)
    if improved is None:
        logger.debug("No MIME known for extension %r, keeping %s", extension, mime)
        return mime
    logger.debug("Improved %s to %s from extension %r", mime, improved, extension)
    return improved


_resolver: ExtensionMimeResolver | None = None


def _default_resolver() -> ExtensionMimeResolver:
    global _resolver
    if _resolver is None:
        _resolver = ExtensionMimeResolver()
    return _resolver
