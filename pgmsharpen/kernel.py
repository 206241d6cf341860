"""The sharpening filter: a Laplacian of a Gaussian scaled to the filter range."""

from __future__ import annotations

import math

import numpy as np

_D4 = 4
_SIGMA_D4 = 1.4
_FILTER0 = -40.0

__all__ = ["filter_value", "filter_kernel"]


def _sigma_squared(d: int) -> float:
    if d == 0:
        raise ValueError("filter range d must be non-zero")
    return _SIGMA_D4 * _SIGMA_D4 * ((d * d) / (_D4 * _D4))


def filter_value(d: int, i: int, j: int) -> float:
    """Return the filter weight at offset ``(i, j)`` for a filter of range ``d``."""
    delta = (float(i) ** 2 + float(j) ** 2) / (2.0 * _sigma_squared(d))
    return _FILTER0 * (1.0 - delta) * math.exp(-delta)


def filter_kernel(d: int) -> np.ndarray:
    """Return the ``(2d+1, 2d+1)`` array of weights, centred on ``[d, d]``."""
    if d < 1:
        raise ValueError("filter range d must be at least 1")
    offsets = np.arange(-d, d + 1, dtype=float)
    rsq = offsets[:, None] ** 2 + offsets[None, :] ** 2
    delta = rsq / (2.0 * _sigma_squared(d))
    return _FILTER0 * (1.0 - delta) * np.exp(-delta)