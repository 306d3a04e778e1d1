"""Julia-set fractal generator.

The image is a red/blue gradient background with the escape-time count of
z <- z**2 + c in the green channel. Arithmetic is float32 throughout so the
counts match a single-precision per-pixel loop.
"""

from __future__ import annotations

import numpy as np
import pyvips  # type: ignore

from mirage.logger import get_logger
from mirage.ops.io import save_image

_logger = get_logger("fractal")

FRACTAL_WIDTH = 800
FRACTAL_HEIGHT = 800
JULIA_C = complex(-0.4, 0.6)
MAX_ITERATIONS = 255
ESCAPE_RADIUS = 2.0
GRADIENT_SCALE = 0.3


def escape_counts(z: np.ndarray, c: complex = JULIA_C, max_iterations: int = MAX_ITERATIONS) -> np.ndarray:
    """Return, per element, how many times z <- z**2 + c ran before |z| > 2 or the cap.

    Real and imaginary parts are iterated as separate float32 arrays with
    re' = re*re - im*im + c.re, im' = re*im + im*re + c.im and |z| = hypot(re, im),
    which is the rounding a scalar float32 loop produces. Escaped points stop
    updating, so they never overflow.
    """
    z = np.asarray(z)
    zr = np.array(z.real, dtype=np.float32)
    zi = np.array(z.imag, dtype=np.float32)
    cr = np.float32(c.real)
    ci = np.float32(c.imag)
    radius = np.float32(ESCAPE_RADIUS)
    counts = np.zeros(zr.shape, dtype=np.int32)
    active = np.hypot(zr, zi) <= radius
    for _ in range(max_iterations):
        if not active.any():
            break
        r = zr[active]
        i = zi[active]
        zr[active] = r * r - i * i + cr
        zi[active] = r * i + i * r + ci
        counts[active] += 1
        active &= np.hypot(zr, zi) <= radius
    return counts


def julia_set(width: int = FRACTAL_WIDTH, height: int = FRACTAL_HEIGHT, c: complex = JULIA_C) -> np.ndarray:
    """Render the fractal as a (height, width, 3) uint8 RGB array.

    For pixel (x, y): red = floor(0.3 * x), blue = floor(0.3 * y) and green is
    the escape count of z0 = (y * 3/width - 1.5) + (x * 3/height - 1.5)i.
    The real part comes from the row and the imaginary part from the column;
    that orientation is what the gradient was designed against.
    """
    scale_x = np.float32(3.0) / np.float32(width)
    scale_y = np.float32(3.0) / np.float32(height)
    ys, xs = np.mgrid[0:height, 0:width]
    xs = xs.astype(np.float32)
    ys = ys.astype(np.float32)

    gradient = np.float32(GRADIENT_SCALE)
    red = np.clip(gradient * xs, 0, 255).astype(np.uint8)
    blue = np.clip(gradient * ys, 0, 255).astype(np.uint8)

    cx = ys * scale_x - np.float32(1.5)
    cy = xs * scale_y - np.float32(1.5)
    green = escape_counts(cx + 1j * cy, c).astype(np.uint8)

    return np.stack([red, green, blue], axis=-1)


def array_to_image(array: np.ndarray) -> pyvips.Image:
    """Wrap an (h, w, 3) uint8 array as an sRGB pyvips image."""
    height, width, bands = array.shape
    data = np.ascontiguousarray(array, dtype=np.uint8).tobytes()
    image = pyvips.Image.new_from_memory(data, width, height, bands, "uchar")
    return image.copy(interpretation="srgb")


def render_fractal(outfile: str) -> str:
    _logger.info("Rendering %dx%d fractal -> %s", FRACTAL_WIDTH, FRACTAL_HEIGHT, outfile)
    array = julia_set()
    return save_image(array_to_image(array), outfile)
