"""Geometric handlers: crop and rotate.

Pure functions on top of pyvips, no argument parsing here.
"""

from __future__ import annotations

import pyvips  # type: ignore

from mirage.errors import ProcessingError
from mirage.logger import get_logger
from mirage.ops.io import load_image, save_image, vips_reason

_logger = get_logger("geometry")

VALID_ROTATIONS = (90, 180, 270)


def clamp_crop_rect(img_width: int, img_height: int, crop: tuple[int, int, int, int]) -> tuple[int, int, int, int]:
    """Clamp a crop rectangle so it lies inside the image.

    Args:
        img_width: Source image width
        img_height: Source image height
        crop: (left, top, width, height); values are never negative

    Returns:
        (left, top, width, height) with the origin moved inside the image and
        the size shrunk to what is left to the right of and below it
    """
    left, top, width, height = crop
    left = min(left, img_width)
    top = min(top, img_height)
    width = min(width, img_width - left)
    height = min(height, img_height - top)
    return left, top, width, height


def crop_image(image: pyvips.Image, crop: tuple[int, int, int, int]) -> pyvips.Image:
    rect = clamp_crop_rect(image.width, image.height, crop)
    left, top, width, height = rect
    if rect != tuple(crop):
        _logger.debug("Crop %s clamped to %s for image size %dx%d", crop, rect, image.width, image.height)
    if width <= 0 or height <= 0:
        raise ProcessingError(f"Crop region {crop} is empty for image size {image.width}x{image.height}")
    try:
        return image.crop(left, top, width, height)
    except pyvips.Error as e:
        raise ProcessingError(f"crop {rect} failed: {vips_reason(e)}") from e


def rotate_image(image: pyvips.Image, degrees: int) -> pyvips.Image:
    """Rotate clockwise by 90, 180 or 270 degrees."""
    if degrees == 90:
        return image.rot90()
    if degrees == 180:
        return image.rot180()
    if degrees == 270:
        return image.rot270()
    raise ValueError(f"Unsupported rotation: {degrees} (expected one of {VALID_ROTATIONS})")


def crop_file(infile: str, outfile: str, crop: tuple[int, int, int, int]) -> str:
    """Crop an image file.

    Args:
        infile: Path to source image file
        outfile: Path to save cropped image
        crop: (left, top, width, height), clamped to the image bounds

    Returns:
        Path to saved file (same as outfile)
    """
    _logger.info("Cropping %s: crop=%s -> %s", infile, crop, outfile)
    image = load_image(infile)
    return save_image(crop_image(image, crop), outfile)


def rotate_file(infile: str, outfile: str, degree_amount: int = 90) -> str:
    _logger.info("Rotating %s by %d degrees -> %s", infile, degree_amount, outfile)
    if degree_amount not in VALID_ROTATIONS:
        raise ValueError(f"Unsupported rotation: {degree_amount} (expected one of {VALID_ROTATIONS})")
    image = load_image(infile)
    return save_image(rotate_image(image, degree_amount), outfile)
