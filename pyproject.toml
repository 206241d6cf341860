[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pgmsharpen"
version = "1.0.0"
description = "Sharpen greyscale PGM images by convolving with a Laplacian-of-Gaussian filter"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["pgm", "image", "sharpen", "convolution", "laplacian", "gaussian"]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Processing",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
pgmsharpen = "pgmsharpen.sharpen:main"

[tool.hatch.build.targets.wheel]
packages = ["pgmsharpen"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
