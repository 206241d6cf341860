"""Reading and writing plain (P2) Portable Grey Map files.

Images are held as 2-D arrays indexed ``image[i, j]``: ``i`` is the column
counted from the left and ``j`` the row counted from the bottom. A file
stores rows from the top down.
"""

from __future__ import annotations

import os
from typing import IO, Iterator

import numpy as np

THRESHOLD = 255
PIXELS_PER_LINE = 16

__all__ = ["PgmError", "pgmsize", "pgmread", "format_pgm", "pgmwrite"]


class PgmError(Exception):
    """Raised when a PGM file cannot be opened, parsed or written."""


def _open(filename: str | os.PathLike, mode: str, who: str) -> IO[str]:
    try:
        return open(filename, mode, encoding="ascii")
    except OSError as exc:
        verb = "create" if "w" in mode else "open"
        raise PgmError(f"{who}: cannot {verb} <{os.fspath(filename)}>") from exc


def _integers(fh: IO[str], who: str) -> Iterator[int]:
    """Skip the two header lines and yield the whitespace-separated integers."""
    fh.readline()
    fh.readline()
    for token in fh.read().split():
        try:
            yield int(token)
        except ValueError as exc:
            raise PgmError(f"{who}: bad integer {token!r}") from exc


def _take(values: Iterator[int], who: str, what: str) -> int:
    try:
        return next(values)
    except StopIteration:
        raise PgmError(f"{who}: unexpected end of file reading {what}") from None


def pgmsize(filename: str | os.PathLike) -> tuple[int, int]:
    """Return the ``(nx, ny)`` size given in the header of a PGM file."""
    with _open(filename, "r", "pgmsize") as fh:
        values = _integers(fh, "pgmsize")
        nx = _take(values, "pgmsize", "width")
        ny = _take(values, "pgmsize", "height")
    return nx, ny


def pgmread(filename: str | os.PathLike, nxmax: int, nymax: int) -> np.ndarray:
    """Read a PGM file into an integer array of shape ``(nx, ny)``.

    Raises PgmError if the image is larger than ``nxmax`` by ``nymax``.
    """
    with _open(filename, "r", "pgmread") as fh:
        values = _integers(fh, "pgmread")
        nx = _take(values, "pgmread", "width")
        ny = _take(values, "pgmread", "height")
        if nx > nxmax or ny > nymax:
            raise PgmError(
                "pgmread: image larger than array "
                f"(nxmax, nymax, nxt, nyt = {nxmax}, {nymax}, {nx}, {ny})"
            )
        _take(values, "pgmread", "threshold")
        count = max(nx, 0) * max(ny, 0)
        pixels = [_take(values, "pgmread", "pixel data") for _ in range(count)]
    rows = np.array(pixels, dtype=np.int64).reshape(max(ny, 0), max(nx, 0))
    return np.ascontiguousarray(rows[::-1].T)


def _grey_levels(image: np.ndarray) -> np.ndarray:
    magnitude = np.abs(image)
    xmin = float(magnitude.min())
    xmax = float(magnitude.max())
    if xmin < 0 or xmax > THRESHOLD:
        span = xmax - xmin
        if span == 0:
            return np.zeros(image.shape, dtype=np.int64)
        scaled = THRESHOLD * np.abs(image - xmin) / span + 0.5
    else:
        scaled = magnitude + 0.5
    return np.floor(scaled).astype(np.int64)


def format_pgm(image) -> str:
    """Render a 2-D ``(nx, ny)`` array as the text of a P2 PGM file.

    Values are rescaled into 0..255 when their magnitudes exceed 255.
    """
    data = np.asarray(image, dtype=float)
    if data.ndim != 2:
        raise PgmError("pgmwrite: image must be two-dimensional")
    nx, ny = data.shape
    if data.size == 0:
        raise PgmError("pgmwrite: image is empty")

    grey = _grey_levels(data)
    lines = ["P2", "# Written by pgmwrite", f"{nx} {ny}", str(THRESHOLD)]
    # File order: top row first, left to right.
    flat = grey[:, ::-1].T.ravel()
    for start in range(0, flat.size, PIXELS_PER_LINE):
        chunk = flat[start:start + PIXELS_PER_LINE]
        lines.append("".join(f"{int(value):3d} " for value in chunk))
    return "\n".join(lines) + "\n"


def pgmwrite(filename: str | os.PathLike, image) -> None:
    """Write a 2-D ``(nx, ny)`` array to a P2 PGM file."""
    text = format_pgm(image)
    with _open(filename, "w", "pgmwrite") as fh:
        fh.write(text)