"""Command-line entry point.

Parses the arguments into one operation descriptor from `mirage.commands` and
runs the matching handler from the dispatch table.
"""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Callable
from typing import Any

from mirage import __version__
from mirage.commands import (
    DEFAULT_BLUR_AMOUNT,
    DEFAULT_BRIGHT_AMOUNT,
    DEFAULT_DEGREE_AMOUNT,
    Blur,
    Brighten,
    Command,
    Crop,
    Fractal,
    Grayscale,
    Invert,
    Rotate,
)
from mirage.errors import MirageError
from mirage.fractal import render_fractal
from mirage.logger import get_logger, setup_logger
from mirage.ops import (
    VALID_ROTATIONS,
    blur_file,
    brighten_file,
    crop_file,
    grayscale_file,
    invert_file,
    rotate_file,
)

logger = get_logger("cli")

ROTATION_ADVISORY = "Valid rotation degrees are: 90, 180, and 270"

_U32_MAX = 0xFFFFFFFF


def _u32(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid unsigned integer: {value!r}") from None
    if number < 0 or number > _U32_MAX:
        raise argparse.ArgumentTypeError(f"{value} is not in 0..{_U32_MAX}")
    return number


def _add_io_args(sub: argparse.ArgumentParser, with_input: bool = True) -> None:
    if with_input:
        sub.add_argument("infile", metavar="INPUT_FILE", help="Image to read")
    sub.add_argument("outfile", metavar="OUTPUT_FILE", help="Image to write; format follows the extension")


def build_parser() -> tuple[argparse.ArgumentParser, dict[str, argparse.ArgumentParser]]:
    """Return the top-level parser and its subcommand parsers keyed by name."""
    parser = argparse.ArgumentParser(prog="mirage", description="An image processing application")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", help="Set log level (debug, info, warning, error, critical)")
    parser.add_argument("--log-cats", help="Only log these comma-separated categories (e.g. cli,io)")
    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    subs: dict[str, argparse.ArgumentParser] = {}

    sub = subparsers.add_parser("blur", help="Gaussian blur")
    _add_io_args(sub)
    sub.add_argument(
        "-b",
        "--blur-amount",
        metavar="BLUR_AMOUNT",
        type=float,
        nargs="?",
        const=DEFAULT_BLUR_AMOUNT,
        default=DEFAULT_BLUR_AMOUNT,
        help=f"Blur sigma (default: {DEFAULT_BLUR_AMOUNT})",
    )
    subs["blur"] = sub

    sub = subparsers.add_parser("fractal", help="Generate an 800x800 Julia-set fractal")
    _add_io_args(sub, with_input=False)
    subs["fractal"] = sub

    sub = subparsers.add_parser("invert", help="Invert colours")
    _add_io_args(sub)
    subs["invert"] = sub

    sub = subparsers.add_parser("grayscale", help="Convert to grayscale")
    _add_io_args(sub)
    subs["grayscale"] = sub

    sub = subparsers.add_parser("brighten", help="Brighten (or darken, with a negative amount)")
    _add_io_args(sub)
    sub.add_argument(
        "-b",
        "--bright-amount",
        metavar="BRIGHT_AMOUNT",
        type=int,
        nargs="?",
        const=DEFAULT_BRIGHT_AMOUNT,
        default=DEFAULT_BRIGHT_AMOUNT,
        help=f"Amount added to each colour sample (default: {DEFAULT_BRIGHT_AMOUNT})",
    )
    subs["brighten"] = sub

    sub = subparsers.add_parser("crop", help="Crop to a rectangle")
    _add_io_args(sub)
    sub.add_argument(
        "-c",
        "--coords",
        metavar="COORDS",
        type=_u32,
        nargs=4,
        required=True,
        help="LEFT TOP WIDTH HEIGHT",
    )
    subs["crop"] = sub

    sub = subparsers.add_parser("rotate", help="Rotate clockwise by 90, 180 or 270 degrees")
    _add_io_args(sub)
    sub.add_argument(
        "-d",
        "--degree-amount",
        metavar="DEGREE_AMOUNT",
        type=_u32,
        nargs="?",
        const=DEFAULT_DEGREE_AMOUNT,
        default=DEFAULT_DEGREE_AMOUNT,
        help=f"Rotation in degrees (default: {DEFAULT_DEGREE_AMOUNT})",
    )
    subs["rotate"] = sub

    return parser, subs


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse `argv` (without the program name).

    A bare subcommand prints that subcommand's help, and no subcommand prints
    the top-level help; both exit with status 2 like any other usage error.
    """
    parser, subs = build_parser()
    for i, token in enumerate(argv):
        if token in subs:
            if i == len(argv) - 1:
                subs[token].print_help(sys.stderr)
                raise SystemExit(2)
            break

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help(sys.stderr)
        raise SystemExit(2)
    return args


def to_command(args: argparse.Namespace) -> Command:
    """Build the operation descriptor for a parsed namespace."""
    name = args.command
    if name == "blur":
        return Blur(args.infile, args.outfile, args.blur_amount)
    if name == "fractal":
        return Fractal(args.outfile)
    if name == "invert":
        return Invert(args.infile, args.outfile)
    if name == "grayscale":
        return Grayscale(args.infile, args.outfile)
    if name == "brighten":
        return Brighten(args.infile, args.outfile, args.bright_amount)
    if name == "crop":
        return Crop(args.infile, args.outfile, tuple(args.coords))
    if name == "rotate":
        return Rotate(args.infile, args.outfile, args.degree_amount)
    raise ValueError(f"Unknown command: {name}")


def _run_rotate(command: Rotate) -> None:
    if command.degree_amount not in VALID_ROTATIONS:
        # Soft failure: advise and do nothing, exit status stays 0
        logger.debug("Rejected rotation of %d degrees", command.degree_amount)
        print(ROTATION_ADVISORY)
        return
    rotate_file(command.infile, command.outfile, command.degree_amount)


_HANDLERS: dict[type, Callable[[Any], Any]] = {
    Blur: lambda c: blur_file(c.infile, c.outfile, c.blur_amount),
    Fractal: lambda c: render_fractal(c.outfile),
    Invert: lambda c: invert_file(c.infile, c.outfile),
    Grayscale: lambda c: grayscale_file(c.infile, c.outfile),
    Brighten: lambda c: brighten_file(c.infile, c.outfile, c.bright_amount),
    Crop: lambda c: crop_file(c.infile, c.outfile, c.coords),
    Rotate: _run_rotate,
}


def dispatch(command: Command) -> None:
    """Run the single handler for `command`. Handler errors propagate."""
    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise TypeError(f"No handler for {type(command).__name__}")
    logger.debug("Dispatching %s", command)
    handler(command)


def _apply_logging_options(args: argparse.Namespace) -> None:
    # Reflect CLI logging options into the environment, then reconfigure
    if args.log_level:
        os.environ["MIRAGE_LOG_LEVEL"] = args.log_level
    if args.log_cats:
        os.environ["MIRAGE_LOG_CATS"] = args.log_cats
    setup_logger()


def run(argv: list[str] | None = None) -> int:
    """Parse, dispatch and return the process exit status.

    Argument errors raise SystemExit(2) from argparse; runtime failures are
    logged and mapped to their exit code.
    """
    if argv is None:
        argv = sys.argv[1:]
    args = parse_args(argv)
    _apply_logging_options(args)
    command = to_command(args)
    try:
        dispatch(command)
    except MirageError as e:
        logger.error("%s", e)
        return e.exit_code
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
