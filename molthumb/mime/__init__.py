"""MIME detection for chemical table files."""

from molthumb.mime.detect import MimeGuess, guess_mime
from molthumb.mime.hinter import (
    CHEMICAL_EXTENSIONS,
    PLAIN_TEXT,
    ExtensionMimeResolver,
    improve_from_extension,
    is_chem_file_extension,
)
from molthumb.mime.sniffer import (
    CHEMICAL_MIME_TYPES,
    MOLFILE,
    RDFILE,
    RGFILE,
    RXNFILE,
    SDFILE,
    ProbeBuffer,
    classify,
    classify_probe,
)

__all__ = [
    "CHEMICAL_EXTENSIONS",
    "CHEMICAL_MIME_TYPES",
    "ExtensionMimeResolver",
    "MOLFILE",
    "MimeGuess",
    "PLAIN_TEXT",
    "ProbeBuffer",
    "RDFILE",
    "RGFILE",
    "RXNFILE",
    "SDFILE",
    "classify",
    "classify_probe",
    "guess_mime",
    "improve_from_extension",
    "is_chem_file_extension",
]
