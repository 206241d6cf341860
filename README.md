# pgmsharpen

Sharpens a fuzzy greyscale image stored as a plain-text PGM (`P2`) file.
The image is padded with a zero border and convolved with a filter that
combines a Gaussian (to suppress noise) with a Laplacian (to pick out edges).
The convolution, scaled by `2 / (2d-1)^2`, is subtracted from the original,
and a border of width `d` is cropped away before the sharpened image is
written out. The filter range `d` is 8, giving a 17 x 17 filter.

## Installing

```
pip install .
```

## Running

Put the input image in the current directory as `fuzzy.pgm` and run:

```
pgmsharpen
```

The program prints the image size, the filter size and the time the
calculation took, and writes the result to `sharpened.pgm`.

Options:

- `infile` (positional, optional): the input file, `fuzzy.pgm` by default.
- `-o`, `--output`: the output file, `sharpened.pgm` by default.
- `-j`, `--workers`: the number of worker threads for the convolution
  (default 1). Pixels are shared among the threads in turn. With more than
  one worker, a line `Thread N on core ...` is printed for each thread,
  listing the CPUs the process may run on.

The exit status is 0 on success, 1 if the image cannot be read, sharpened or
written, and 2 if `--workers` is less than 1.

## Input format

Input files must have this layout:

1. the magic line `P2`;
2. exactly one comment line;
3. the width and height;
4. the maximum grey value;
5. the pixel values, top row first.

The first two lines are skipped without being checked. Output files follow
the same layout, with the comment `# Written by pgmwrite`, 16 pixels per
line, and values rescaled into the range 0 to 255 when their magnitudes
exceed 255.

## Using it as a library

```python
from pgmsharpen.pgm import pgmsize, pgmread, pgmwrite
from pgmsharpen.sharpen import sharpen, crop

nx, ny = pgmsize("fuzzy.pgm")
fuzzy = pgmread("fuzzy.pgm", nx, ny)   # array indexed [x, y], y = 0 at the bottom
sharp = crop(sharpen(fuzzy, 8, 2.0, 1), 8)
pgmwrite("sharpened.pgm", sharp)
```

Modules:

- `pgmsharpen.pgm`: `pgmsize`, `pgmread`, `pgmwrite`, and `format_pgm(image)`,
  which returns the PGM text without writing a file.
- `pgmsharpen.kernel`: `filter_kernel(d)` returns the (2d+1) x (2d+1) filter
  weights; `filter_value(d, i, j)` returns a single weight.
- `pgmsharpen.sharpen`: `pad_image`, `convolve`, `sharpen`, `crop`,
  `dosharpen` (the whole read, sharpen and write run, with progress messages)
  and `main`.
- `pgmsharpen.utilities`: `format_cpuset` (CPU numbers in `taskset` list
  form, such as `0-3,6`), `core_list`, `location_message`, `print_location`
  and `wtime`.

Malformed, unreadable or oversized files raise `PgmError`. An image whose
size does not match what was asked for, or that is too small to crop, raises
`SharpenError`.

## What it does not do

The work is spread only over threads within one process; there is no
support for running across several processes or machines. Only plain-text
`P2` files are read and written, not binary PGM.