"""Content sniffing for chemical table files (molfile, SDfile, RXN, RD, RG).

Classification is a fixed sequence of rule tables evaluated in order, first
match wins:

1. magic byte prefixes of the head (container formats),
2. end-of-buffer patterns of the tail,
3. the molfile counts line anywhere near the start of the head.

Container formats (RXN, RD, RG, SD) embed complete molfiles, so their rules
must run before anything that recognizes a bare molfile.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

logger = logging.getLogger(__name__)

PROBE_SIZE = 1024

MOLFILE = "chemical/x-mdl-molfile"
SDFILE = "chemical/x-mdl-sdfile"
RXNFILE = "chemical/x-mdl-rxnfile"
RDFILE = "chemical/x-mdl-rdfile"
RGFILE = "chemical/x-mdl-rgfile"

CHEMICAL_MIME_TYPES: tuple[str, ...] = (MOLFILE, SDFILE, RXNFILE, RDFILE, RGFILE)

HEADER_MAGICS: list[tuple[bytes, str]] = [
    (b"$RXN", RXNFILE),
    (b"$RDFILE ", RDFILE),
    (b"$MDL", RGFILE),
]

TAIL_PATTERNS: list[tuple[re.Pattern[bytes], str]] = [
    (re.compile(rb"\n\s*\$\$\$\$\s*$"), SDFILE),
    # any line ending
    (re.compile(rb"\n\s*M  END\s*$"), MOLFILE),
]

# counts line: #atoms #bonds #atom_lists [obsolete] [999|#property_lines] V<version>
HEAD_PATTERNS: list[tuple[re.Pattern[bytes], str]] = [
    (
        re.compile(rb"(?:\A|\n)(?:\s*\d{1,3}\s+){3}[^\n]*(?:\d+\s+){1,12}V\d{4,5}\r?\n"),
        MOLFILE,
    ),
]


class ProbeBuffer(BaseModel):
    """Head and tail samples of a candidate file, each at most 1024 bytes."""

    model_config = ConfigDict(frozen=True)

    head: bytes = b""
    tail: bytes = b""

    @field_validator("head", "tail")
    @classmethod
    def _within_probe_size(cls, v: bytes) -> bytes:
        if len(v) > PROBE_SIZE:
            raise ValueError(f"probe sample exceeds {PROBE_SIZE} bytes")
        return v

    @classmethod
    def from_bytes(cls, head: bytes, tail: bytes) -> ProbeBuffer:
        """Keep the first 1024 bytes of head and the last 1024 bytes of tail."""
        return cls(head=head[:PROBE_SIZE], tail=tail[-PROBE_SIZE:])

    @classmethod
    def from_file(cls, path: str | Path) -> ProbeBuffer:
        """Sample a file on disk. Unreadable files give an empty probe."""
        path = Path(path)
        try:
            with open(path, "rb") as f:
                head = f.read(PROBE_SIZE)
                size = f.seek(0, 2)
                f.seek(max(size - PROBE_SIZE, 0))
                tail = f.read(PROBE_SIZE)
        except OSError:
            logger.warning("Cannot read %s for content sniffing", path, exc_info=True)
            return cls()
        return cls(head=head, tail=tail)


def classify(head: bytes, tail: bytes, label: str = "") -> str | None:
    """Guess a chemical MIME type from head/tail samples.

    Returns None when no rule matches; the caller keeps whatever it guessed
    before.
    """
    for magic, candidate in HEADER_MAGICS:
        if head.startswith(magic):
            logger.debug("magic header in %s recognized as %s", label, candidate)
            return candidate

    for pattern, candidate in TAIL_PATTERNS:
        if pattern.search(tail):
            logger.debug("%s tail recognized by regexp as %s", label, candidate)
            return candidate

    for pattern, candidate in HEAD_PATTERNS:
        if pattern.search(head):
            logger.debug("%s head recognized by regexp as %s", label, candidate)
            return candidate

    return None


def classify_probe(probe: ProbeBuffer, label: str = "") -> str | None:
    return classify(probe.head, probe.tail, label)
