"""Sharpen greyscale PGM images with a Laplacian-of-Gaussian filter."""

__version__ = "1.0.0"
__all__ = ["pgm", "kernel", "utilities", "sharpen"]