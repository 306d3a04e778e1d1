"""Operation descriptors.

One frozen dataclass per subcommand. The CLI builds exactly one of these per
process and hands it to the dispatcher.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_BLUR_AMOUNT = 2.0
DEFAULT_BRIGHT_AMOUNT = 50
DEFAULT_DEGREE_AMOUNT = 90


@dataclass(frozen=True)
class Blur:
    infile: str
    outfile: str
    blur_amount: float = DEFAULT_BLUR_AMOUNT


@dataclass(frozen=True)
class Fractal:
    outfile: str


@dataclass(frozen=True)
class Invert:
    infile: str
    outfile: str


@dataclass(frozen=True)
class Grayscale:
    infile: str
    outfile: str


@dataclass(frozen=True)
class Brighten:
    infile: str
    outfile: str
    bright_amount: int = DEFAULT_BRIGHT_AMOUNT


@dataclass(frozen=True)
class Crop:
    infile: str
    outfile: str
    coords: tuple[int, int, int, int]


@dataclass(frozen=True)
class Rotate:
    infile: str
    outfile: str
    degree_amount: int = DEFAULT_DEGREE_AMOUNT


Command = Blur | Fractal | Invert | Grayscale | Brighten | Crop | Rotate
