"""Default thumbnail parameter normalisation."""

from __future__ import annotations

from typing import Any


def normalise_params(params: dict[str, Any], metadata: dict[str, Any]) -> dict[str, Any] | None:
    """Fill in height and physical size for a thumbnail request.

    A positive integer width is required. Height, when absent, follows the
    aspect ratio recorded in metadata (square if none is known). Returns None
    if the request cannot be satisfied.
    """
    try:
        width = int(params.get("width", 0))
    except (TypeError, ValueError):
        return None
    if width <= 0:
        return None

    height = params.get("height")
    if height is None:
        src_w = metadata.get("width") or 0
        src_h = metadata.get("height") or 0
        height = round(width * src_h / src_w) if src_w > 0 and src_h > 0 else width
    try:
        height = int(height)
    except (TypeError, ValueError):
        return None
    if height <= 0:
        return None

    normalised = dict(params)
    normalised.update(
        width=width,
        height=height,
        physical_width=width,
        physical_height=height,
    )
    return normalised
