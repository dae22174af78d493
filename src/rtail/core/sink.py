"""Output destination for fetched bytes: a file opened for append, or stdout."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

from .model import SinkError


def _is_stdout(output) -> bool:
    return output is None or str(output) == "-"


@contextmanager
def open_sink(output: str | Path | None = None) -> Iterator[BinaryIO]:
    """Yield a binary sink; files are created if needed and always appended to.

    Standard output is flushed on exit but never closed.
    """
    if _is_stdout(output):
        sink = sys.stdout.buffer
        try:
            yield sink
        finally:
            sink.flush()
        return

    try:
        sink = open(output, "ab")
    except OSError as e:
        raise SinkError(f"cannot open output {output}: {e}") from e
    try:
        yield sink
    finally:
        sink.close()


def write_chunk(sink: BinaryIO, chunk: bytes) -> int:
    try:
        sink.write(chunk)
    except OSError as e:
        raise SinkError(f"cannot write output: {e}") from e
    return len(chunk)


def flush_sink(sink: BinaryIO) -> None:
    try:
        sink.flush()
    except OSError as e:
        raise SinkError(f"cannot flush output: {e}") from e
