"""Pytest configuration and image helpers.

Test images are synthesized with numpy and written through pyvips into
`tmp_path`; outputs are read back as RGB(A) numpy arrays.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
import pyvips  # type: ignore


def write_array(path: Path, array: np.ndarray) -> Path:
    """Write an (h, w, bands) uint8 array to `path` (format by extension)."""
    if array.ndim == 2:
        array = array[:, :, np.newaxis]
    height, width, bands = array.shape
    data = np.ascontiguousarray(array, dtype=np.uint8).tobytes()
    image = pyvips.Image.new_from_memory(data, width, height, bands, "uchar")
    interpretation = "b-w" if bands <= 2 else "srgb"
    image.copy(interpretation=interpretation).write_to_file(str(path))
    return path


def read_array(path: Path) -> np.ndarray:
    """Read an image as an (h, w, bands) uint8 array without any conversion."""
    image = pyvips.Image.new_from_file(str(path))
    mem = image.write_to_memory()
    return np.frombuffer(mem, dtype=np.uint8).reshape(image.height, image.width, image.bands).copy()


def read_rgb(path: Path) -> np.ndarray:
    """Read an image as an (h, w, 3) uint8 sRGB array, dropping alpha."""
    image = pyvips.Image.new_from_file(str(path))
    image = image.colourspace("srgb")
    if image.hasalpha():
        image = image.extract_band(0, n=image.bands - 1)
    if image.bands < 3:
        image = pyvips.Image.bandjoin([image] * 3)
    mem = image.write_to_memory()
    return np.frombuffer(mem, dtype=np.uint8).reshape(image.height, image.width, 3).copy()


@pytest.fixture
def rgb_image(tmp_path: Path) -> Path:
    """A 6x4 PNG with distinct values per pixel and channel."""
    rng = np.random.default_rng(1234)
    array = rng.integers(0, 256, size=(4, 6, 3), dtype=np.uint8)
    return write_array(tmp_path / "in.png", array)


@pytest.fixture
def rgba_image(tmp_path: Path) -> Path:
    """A 5x3 PNG with an alpha band that is not uniform."""
    rng = np.random.default_rng(99)
    array = rng.integers(0, 256, size=(3, 5, 4), dtype=np.uint8)
    return write_array(tmp_path / "in_alpha.png", array)


@pytest.fixture
def white_image(tmp_path: Path) -> Path:
    array = np.full((8, 8, 3), 255, dtype=np.uint8)
    return write_array(tmp_path / "white.png", array)
