"""Colour and convolution handlers: blur, invert, grayscale, brighten.

Each handler opens `infile`, applies one libvips operation and writes
`outfile`. The pure `*_image` helpers work on an already-loaded image.
"""

from __future__ import annotations

import pyvips  # type: ignore

from mirage.errors import ProcessingError
from mirage.logger import get_logger
from mirage.ops.io import colour_bands, load_image, save_image, vips_reason, with_alpha

_logger = get_logger("filters")


FALLBACK_BLUR_SIGMA = 1.0


def blur_image(image: pyvips.Image, sigma: float) -> pyvips.Image:
    """Gaussian blur. A sigma of zero or below blurs with sigma 1.0 instead."""
    if sigma <= 0:
        _logger.debug("blur sigma %s is not positive, using %s", sigma, FALLBACK_BLUR_SIGMA)
        sigma = FALLBACK_BLUR_SIGMA
    try:
        return image.gaussblur(sigma)
    except pyvips.Error as e:
        raise ProcessingError(f"blur with sigma {sigma} failed: {vips_reason(e)}") from e


def invert_image(image: pyvips.Image) -> pyvips.Image:
    """Invert the colour bands; alpha is carried over untouched."""
    colour, alpha = colour_bands(image)
    try:
        return with_alpha(colour.invert(), alpha)
    except pyvips.Error as e:
        raise ProcessingError(f"invert failed: {vips_reason(e)}") from e


def grayscale_image(image: pyvips.Image) -> pyvips.Image:
    try:
        return image.colourspace("b-w")
    except pyvips.Error as e:
        raise ProcessingError(f"grayscale conversion failed: {vips_reason(e)}") from e


def brighten_image(image: pyvips.Image, amount: int) -> pyvips.Image:
    """Add `amount` to every colour sample.

    The sum is cast back to the input sample format, which clips to the
    format's range: a negative amount darkens down to 0 and never wraps.
    """
    colour, alpha = colour_bands(image)
    try:
        shifted = (colour + amount).cast(colour.format)
        return with_alpha(shifted, alpha)
    except pyvips.Error as e:
        raise ProcessingError(f"brighten by {amount} failed: {vips_reason(e)}") from e


def blur_file(infile: str, outfile: str, blur_amount: float = 2.0) -> str:
    _logger.info("Blurring %s (sigma=%s) -> %s", infile, blur_amount, outfile)
    image = load_image(infile)
    return save_image(blur_image(image, blur_amount), outfile)


def invert_file(infile: str, outfile: str) -> str:
    _logger.info("Inverting %s -> %s", infile, outfile)
    image = load_image(infile)
    return save_image(invert_image(image), outfile)


def grayscale_file(infile: str, outfile: str) -> str:
    _logger.info("Converting %s to grayscale -> %s", infile, outfile)
    image = load_image(infile)
    return save_image(grayscale_image(image), outfile)


def brighten_file(infile: str, outfile: str, bright_amount: int = 50) -> str:
    """Brighten (positive amount) or darken (negative amount) an image file."""
    _logger.info("Brightening %s by %d -> %s", infile, bright_amount, outfile)
    image = load_image(infile)
    return save_image(brighten_image(image, bright_amount), outfile)
