"""Image operations public API.

Each `*_file` handler opens an input, applies one libvips operation and writes
the output. The `*_image` helpers operate on an already-loaded `pyvips.Image`.
"""

from .filters import (
    blur_file,
    blur_image,
    brighten_file,
    brighten_image,
    grayscale_file,
    grayscale_image,
    invert_file,
    invert_image,
)
from .geometry import VALID_ROTATIONS, clamp_crop_rect, crop_file, crop_image, rotate_file, rotate_image
from .io import load_image, save_image

__all__ = [
    "VALID_ROTATIONS",
    "blur_file",
    "blur_image",
    "brighten_file",
    "brighten_image",
    "clamp_crop_rect",
    "crop_file",
    "crop_image",
    "grayscale_file",
    "grayscale_image",
    "invert_file",
    "invert_image",
    "load_image",
    "rotate_file",
    "rotate_image",
    "save_image",
]
