"""Sharpen a PGM image by convolving it with a Laplacian-of-Gaussian filter.

The fuzzy image is padded with a zero border, convolved with the filter, and
the rescaled convolution is subtracted from the image. Only the core of the
result is kept, since a border of width ``d`` is distorted by the filter.
"""

from __future__ import annotations

import argparse
import sys
from concurrent.futures import ThreadPoolExecutor
from functools import reduce
from typing import IO, Sequence

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from .kernel import filter_kernel
from .pgm import PgmError, pgmread, pgmsize, pgmwrite
from .utilities import Practical, print_location, wtime

__all__ = [
    "SharpenError",
    "pad_image",
    "convolve",
    "sharpen",
    "crop",
    "dosharpen",
    "main",
]

FILTER_RANGE = 8
SCALE = 2.0
DEFAULT_INPUT = "fuzzy.pgm"
DEFAULT_OUTPUT = "sharpened.pgm"

_CHUNK = 4096


class SharpenError(Exception):
    """Raised when an image cannot be sharpened."""


def _as_image(fuzzy) -> np.ndarray:
    image = np.asarray(fuzzy, dtype=float)
    if image.ndim != 2:
        raise SharpenError("image must be two-dimensional")
    return image


def pad_image(fuzzy, d: int = FILTER_RANGE) -> np.ndarray:
    """Return the image as floats surrounded by a zero border of width ``d``."""
    if d < 0:
        raise ValueError(f"border width must be non-negative, got {d}")
    return np.pad(_as_image(fuzzy), d, mode="constant", constant_values=0.0)


def convolve(fuzzy, d: int = FILTER_RANGE, workers: int = 1) -> np.ndarray:
    """Convolve the image with the ``(2d+1, 2d+1)`` sharpening filter.

    Pixels are shared among ``workers`` cyclically in row-major order; each
    worker fills its own partial array and the partial arrays are summed.
    """
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")
    image = _as_image(fuzzy)
    kernel = filter_kernel(d)
    windows = sliding_window_view(pad_image(image, d), kernel.shape)
    nx, ny = image.shape
    total = nx * ny

    def partial(rank: int) -> np.ndarray:
        result = np.zeros((nx, ny), dtype=float)
        indices = np.arange(rank, total, workers)
        for start in range(0, indices.size, _CHUNK):
            chunk = indices[start:start + _CHUNK]
            rows, cols = np.divmod(chunk, ny)
            result[rows, cols] = np.einsum("pab,ab->p", windows[rows, cols], kernel)
        return result

    if workers == 1:
        return partial(0)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        partials = list(pool.map(partial, range(workers)))
    return reduce(np.add, partials)


def sharpen(
    fuzzy,
    d: int = FILTER_RANGE,
    scale: float = SCALE,
    workers: int = 1,
) -> np.ndarray:
    """Return the full-size sharpened image: fuzzy minus the rescaled convolution."""
    image = _as_image(fuzzy)
    norm = float((2 * d - 1) * (2 * d - 1))
    return image - scale / norm * convolve(image, d, workers)


def crop(image, d: int = FILTER_RANGE) -> np.ndarray:
    """Drop a border of width ``d`` from every side of the image."""
    data = _as_image(image)
    if d < 0:
        raise ValueError(f"border width must be non-negative, got {d}")
    nx, ny = data.shape
    if nx <= 2 * d or ny <= 2 * d:
        raise SharpenError(
            f"image of size {nx} x {ny} is too small to crop a border of {d}"
        )
    return data[d:nx - d, d:ny - d].copy()


def dosharpen(
    infile: str,
    nx: int,
    ny: int,
    workers: int = 1,
    outfile: str = DEFAULT_OUTPUT,
    out: IO[str] | None = None,
) -> np.ndarray:
    """Read ``infile``, sharpen it, write the cropped result to ``outfile`` and return it."""
    stream = sys.stdout if out is None else out
    d = FILTER_RANGE

    def say(text: str = "") -> None:
        stream.write(text + "\n")
        stream.flush()

    say(f"Using a filter of size {2 * d + 1} x {2 * d + 1}")
    say()
    say(f"Reading image file: {infile}")
    fuzzy = pgmread(infile, nx, ny)
    say("... done")
    say()

    xpix, ypix = fuzzy.shape
    if xpix == 0 or ypix == 0 or nx != xpix or ny != ypix:
        say(f"Error reading {infile}")
        raise SharpenError(f"Error reading {infile}")

    say("Starting calculation ...")
    if workers > 1:
        for thread in range(workers):
            print_location(Practical.OPENMP, thread=thread, out=stream)
    else:
        print_location(Practical.SERIAL, out=stream)

    tstart = wtime()
    sharp = sharpen(fuzzy, d, SCALE, workers)
    elapsed = wtime() - tstart

    say("... finished")
    say()
    say(f"Writing output file: {outfile}")
    say()
    cropped = crop(sharp, d)
    pgmwrite(outfile, cropped)
    say("... done")
    say()
    say(f"Calculation time was {elapsed:f} seconds")
    return cropped


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pgmsharpen",
        description="Sharpen a plain PGM image with a Laplacian-of-Gaussian filter.",
    )
    parser.add_argument("infile", nargs="?", default=DEFAULT_INPUT,
                        help=f"input PGM file (default {DEFAULT_INPUT})")
    parser.add_argument("-o", "--output", default=DEFAULT_OUTPUT,
                        help=f"output PGM file (default {DEFAULT_OUTPUT})")
    parser.add_argument("-j", "--workers", type=int, default=1,
                        help="number of worker threads (default 1)")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the sharpening program; return the process exit status."""
    args = _parser().parse_args(argv)
    if args.workers < 1:
        print("pgmsharpen: workers must be at least 1", file=sys.stderr)
        return 2

    print()
    if args.workers == 1:
        print("Image sharpening code running in serial")
    else:
        print(f"Image sharpening code running on {args.workers} thread(s)")
    print()
    print(f"Input file is: {args.infile}")

    tstart = wtime()
    try:
        xpix, ypix = pgmsize(args.infile)
        print(f"Image size is {xpix} x {ypix}")
        print()
        sys.stdout.flush()
        dosharpen(args.infile, xpix, ypix, args.workers, args.output)
    except (PgmError, SharpenError) as exc:
        print(exc, file=sys.stderr)
        return 1
    elapsed = wtime() - tstart

    print(f"Overall run time was {elapsed:f} seconds")
    return 0


if __name__ == "__main__":
    sys.exit(main())