"""Image load/save on top of pyvips.

Every handler goes through `load_image` and `save_image` so that libvips
failures are reported as decode or write errors naming the offending path.
"""

from __future__ import annotations

import contextlib

import pyvips  # type: ignore

from mirage.errors import DecodeError, WriteError
from mirage.logger import get_logger

_logger = get_logger("io")

_vips_configured = False


def configure_vips() -> None:
    """Disable the libvips operation cache. One pipeline per process never hits it."""
    global _vips_configured
    if _vips_configured:
        return
    with contextlib.suppress(Exception):
        pyvips.cache_set_max(0)
        pyvips.cache_set_max_mem(0)
        pyvips.cache_set_max_files(0)
    _vips_configured = True


def vips_reason(exc: Exception) -> str:
    """Collapse a (possibly multi-line) pyvips error into a single line."""
    return " ".join(str(exc).split())


def colour_bands(image: pyvips.Image) -> tuple[pyvips.Image, pyvips.Image | None]:
    """Split an image into its colour bands and its alpha band (or None)."""
    if image.hasalpha():
        colour = image.extract_band(0, n=image.bands - 1)
        alpha = image.extract_band(image.bands - 1)
        return colour, alpha
    return image, None


def with_alpha(colour: pyvips.Image, alpha: pyvips.Image | None) -> pyvips.Image:
    return colour if alpha is None else colour.bandjoin(alpha)


def load_image(path: str) -> pyvips.Image:
    """Open and fully decode an image file.

    The pixels are copied into memory here so that truncated or corrupt input
    fails now, as a decode error, instead of later during the write.

    Raises:
        DecodeError: if libvips cannot open or decode the file
    """
    configure_vips()
    _logger.debug("Loading %s", path)
    try:
        image = pyvips.Image.new_from_file(path)
        image = image.copy_memory()
    except pyvips.Error as e:
        _logger.debug("decode failed for %s: %s", path, e)
        raise DecodeError(path, vips_reason(e)) from e
    _logger.debug("Loaded %s: %dx%d bands=%d format=%s", path, image.width, image.height, image.bands, image.format)
    return image


def save_image(image: pyvips.Image, path: str) -> str:
    """Encode `image` to `path`; the format follows the file extension.

    Returns:
        The output path

    Raises:
        WriteError: if libvips cannot encode or write the file
    """
    configure_vips()
    _logger.debug("Writing %dx%d image to %s", image.width, image.height, path)
    try:
        image.write_to_file(path)
    except pyvips.Error as e:
        _logger.debug("write failed for %s: %s", path, e)
        raise WriteError(path, vips_reason(e)) from e
    _logger.info("Saved: %s", path)
    return path
