"""Command-line entry-point for swizzle.

Usage::

    swizzle [options] in_path out_path

    swizzle -d 0,1,2,3,4,5,6,7 in.bin out.bin       # reverse bits of every byte
    swizzle -w 2 -b -a 0,1,2,3,4,5,6,7,8,9,10,11,12,13,14 in.bin out.bin
    swizzle -c board.yaml --invert dumped.bin original.bin
    swizzle -a -1,0 in.bin out.bin                  # rejected: index -1 out of range
"""

from __future__ import annotations

import argparse
import logging
import sys
import warnings

from swizzle import __version__
from swizzle.config import load_swizzle_config, merge_config, save_swizzle_config
from swizzle.image import swizzle_file
from swizzle.types import InvalidWordSizeError, SwizzleError, SwizzleWarning

logger = logging.getLogger("swizzle")

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_FAILURE = 1
EXIT_BAD_WORD = 255

USAGE = """\
usage: swizzle [options] in_path out_path

supported options:
  -h / --help             show this information and exit
  -a / --addr <bits>      specify address bit order (optional)
  -d / --data <bits>      specify data bit order (optional)
  -w / --word <num>       specify number of bytes per word (default 1, max 4)
  -b / --big              use big-endian byte ordering
  -s / --strict           reject bit orders that repeat an index
  -i / --invert           apply the inverse bit orders (undo a swizzle)
  -c / --config <file>    read options from a YAML file
       --save <file>      write the effective options to a YAML file
  -v / --verbose          print debug output

<bits> is a comma-separated list of 0-based bit indexes
  (comma separated, most significant first).

Example: to reverse the order of bits in each byte:
  swizzle -d0,1,2,3,4,5,6,7 in.bin out.bin
"""


class _UsageError(Exception):
    """Raised by the parser instead of exiting the process."""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise _UsageError(message)


def _build_parser() -> argparse.ArgumentParser:
    parser = _Parser(prog="swizzle", add_help=False, allow_abbrev=False)
    parser.add_argument("-h", "--help", action="store_true")
    parser.add_argument("-a", "--addr", default=None)
    parser.add_argument("-d", "--data", default=None)
    parser.add_argument("-w", "--word", default=None)
    parser.add_argument("-b", "--big", action="store_true", default=None)
    parser.add_argument("-s", "--strict", action="store_true", default=None)
    parser.add_argument("-i", "--invert", action="store_true", default=None)
    parser.add_argument("-c", "--config", default=None)
    parser.add_argument("--save", default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("in_path", nargs="?")
    parser.add_argument("out_path", nargs="?")
    return parser


# Options taking a value; the value may start with "-" (e.g. "-a -1,0").
_VALUE_OPTIONS = {
    "-a": "--addr", "--addr": "--addr",
    "-d": "--data", "--data": "--data",
    "-w": "--word", "--word": "--word",
    "-c": "--config", "--config": "--config",
    "--save": "--save",
}


def _join_option_values(argv: list[str]) -> list[str]:
    """Rewrite ``-a VALUE`` as ``--addr=VALUE`` so argparse never reads VALUE as an option."""
    joined: list[str] = []
    args = iter(argv)
    for arg in args:
        if arg == "--":
            joined.append(arg)
            joined.extend(args)
            break
        name = _VALUE_OPTIONS.get(arg)
        value = next(args, None) if name else None
        joined.append(f"{name}={value}" if value is not None else arg)
    return joined


def _usage() -> int:
    print(USAGE, end="", file=sys.stderr)
    return EXIT_USAGE


def _parse_word(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw, 10)
    except ValueError:
        raise InvalidWordSizeError(raw) from None


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def _log_warning(message, category, filename, lineno, file=None, line=None) -> None:
    logger.warning("%s", message)


def _run(args: argparse.Namespace) -> int:
    try:
        file_options = load_swizzle_config(args.config) if args.config else {}
        config = merge_config(
            file_options,
            addr_bits=args.addr,
            data_bits=args.data,
            bytes_per_word=_parse_word(args.word),
            big_endian=args.big,
            strict=args.strict,
            invert=args.invert,
        )
    except InvalidWordSizeError as exc:
        print(exc, file=sys.stderr)
        return EXIT_BAD_WORD
    except SwizzleError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    with warnings.catch_warnings():
        warnings.simplefilter("always", SwizzleWarning)
        warnings.showwarning = _log_warning
        try:
            if args.save:
                save_swizzle_config(config, args.save)
            swizzle_file(args.in_path, args.out_path, config)
        except SwizzleError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return EXIT_FAILURE
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """CLI entry-point. Returns the process exit code."""
    print(f"swizzle v{__version__}")

    parser = _build_parser()
    try:
        args = parser.parse_args(_join_option_values(sys.argv[1:] if argv is None else argv))
    except _UsageError:
        return _usage()
    if args.help or args.out_path is None:
        return _usage()

    _setup_logging(args.verbose)
    return _run(args)


if __name__ == "__main__":
    sys.exit(main())
