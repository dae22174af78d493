"""Parser for the ``--bytes`` size grammar, e.g. ``1K``, ``+0`` or ``32MiB``."""

from __future__ import annotations

from .model import SizeSpec, ParseError

# suffix -> multiplier; matched exactly and case-sensitively
SIZE_SUFFIXES: dict[str, int] = {
    "": 1,
    "b": 512,                           # "blocks"
    "kB": 1000, "KB": 1000,
    "K": 1024, "KiB": 1024,
    "mB": 1000 ** 2, "MB": 1000 ** 2,
    "M": 1024 ** 2, "MiB": 1024 ** 2,
    "gB": 1000 ** 3, "GB": 1000 ** 3,
    "G": 1024 ** 3, "GiB": 1024 ** 3,
}

_DIGITS = "0123456789"


def parse_byte_size(s: str) -> SizeSpec:
    """Parse `s` into a SizeSpec.

    A leading ``+`` anchors the value at the start of the resource (an
    absolute offset); without it the value counts back from the end.
    """
    body = s
    anchored = body.startswith("+")
    if anchored:
        body = body[1:]

    end = 0
    while end < len(body) and body[end] in _DIGITS:
        end += 1

    multiplier = SIZE_SUFFIXES.get(body[end:])
    if end == 0 or multiplier is None:
        raise ParseError(f'"{s}" is not a valid number of bytes')
    return SizeSpec(int(body[:end]) * multiplier, anchored)
