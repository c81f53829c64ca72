import argparse
import logging
import sys
from collections.abc import MutableSequence
from dataclasses import dataclass
from enum import Enum, unique
from typing import Final, Sequence

# ---------------------------------------------------------------------------
# Shared CLI utilities
# ---------------------------------------------------------------------------
from transcoder_core import (
    STDIN_MARKER,
    STDOUT_MARKER,
    LogLevel,
    dump_units,
    read_input,
    setup_logging,
    write_output,
)

# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------
from transcoder.code_units import (
    ByteOrder,
    Encoding,
    allocate,
    utf16_from_bytes,
    utf16_to_bytes,
)
from transcoder.converter import utf8_to_utf16, utf8_to_viscii, utf16_to_utf8
from transcoder.panel_text import TERMINATOR
from transcoder.viscii import viscii_lowercase, viscii_uppercase

SEP: Final[str] = "-" * 80

_logger = logging.getLogger(__name__)


@unique
class Direction(str, Enum):
    UTF16_TO_UTF8 = "utf16-to-utf8"
    UTF8_TO_UTF16 = "utf8-to-utf16"
    UTF8_TO_VISCII = "utf8-to-viscii"

    @property
    def target(self) -> Encoding:
        return {
            Direction.UTF16_TO_UTF8: Encoding.UTF8,
            Direction.UTF8_TO_UTF16: Encoding.UTF16,
            Direction.UTF8_TO_VISCII: Encoding.VISCII,
        }[self]


@unique
class CaseFold(str, Enum):
    NONE = "none"
    UPPER = "upper"
    LOWER = "lower"


# ---------------------------------------------------------------------------
# CLI argument parsing
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CliArgs:
    direction: Direction
    input_path: str
    output_path: str
    byteorder: ByteOrder
    case_fold: CaseFold
    measure_only: bool
    terminate: bool
    dump: bool
    log_level: LogLevel


def parse_args(argv: Sequence[str] | None = None) -> CliArgs:
    p = argparse.ArgumentParser("UTF-16 / UTF-8 / VISCII transcoder")
    p.add_argument(
        "direction",
        choices=[d.value for d in Direction],
        help="Conversion to run",
    )
    p.add_argument(
        "input_path",
        nargs="?",
        default=STDIN_MARKER,
        help=f"Input file ({STDIN_MARKER}=stdin)",
    )
    p.add_argument(
        "-o",
        "--output",
        default=STDOUT_MARKER,
        help=f"Output file ({STDOUT_MARKER}=stdout)",
    )
    p.add_argument(
        "--byteorder",
        default="little",
        choices=["little", "big"],
        help="Byte order of UTF-16 input/output",
    )
    p.add_argument(
        "--case",
        default=CaseFold.NONE.value,
        choices=[c.value for c in CaseFold],
        help="Fold VISCII output to upper or lower case",
    )
    p.add_argument(
        "--measure",
        action="store_true",
        help="Only print the number of destination units required",
    )
    p.add_argument(
        "--terminate",
        action="store_true",
        help="Append a zero unit after the converted text",
    )
    p.add_argument(
        "--dump",
        action="store_true",
        help="Print a hex/binary dump instead of raw output",
    )
    p.add_argument(
        "-l",
        "--log-level",
        default=LogLevel.WARNING.value,
        choices=[lvl.value for lvl in LogLevel],
        help="Logging level",
    )
    ns = p.parse_args(argv)

    direction = Direction(ns.direction)
    case_fold = CaseFold(ns.case)
    if case_fold is not CaseFold.NONE and direction is not Direction.UTF8_TO_VISCII:
        p.error("--case only applies to utf8-to-viscii")

    return CliArgs(
        direction=direction,
        input_path=ns.input_path,
        output_path=ns.output,
        byteorder=ns.byteorder,
        case_fold=case_fold,
        measure_only=ns.measure,
        terminate=ns.terminate,
        dump=ns.dump,
        log_level=LogLevel(ns.log_level),
    )


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


def convert(
    direction: Direction,
    data: bytes,
    *,
    byteorder: ByteOrder = "little",
    measure_only: bool = False,
    case_fold: CaseFold = CaseFold.NONE,
    terminate: bool = False,
) -> int | MutableSequence[int]:
    """Run one measure/write cycle over *data*.

    Returns:
        The required unit count when *measure_only*, otherwise the converted
        destination buffer (``bytearray`` or ``array("H")``)
    """
    match direction:
        case Direction.UTF16_TO_UTF8:
            source = utf16_from_bytes(data, byteorder)
            run = utf16_to_utf8
        case Direction.UTF8_TO_UTF16:
            source = data
            run = utf8_to_utf16
        case Direction.UTF8_TO_VISCII:
            source = data
            run = utf8_to_viscii

    required = run(source)
    if measure_only:
        return required

    destination = allocate(direction.target, required + (1 if terminate else 0))
    written = run(source, destination)
    _logger.info("%s: %d source units -> %d units", direction.value, len(source), written)

    match case_fold:
        case CaseFold.UPPER:
            viscii_uppercase(destination, written)
        case CaseFold.LOWER:
            viscii_lowercase(destination, written)

    if terminate:
        destination[written] = TERMINATOR
    return destination


def run_transcoder(args: CliArgs) -> int:
    """Read, convert and write - returns the process exit status."""
    setup_logging(args.log_level)

    try:
        result = convert(
            args.direction,
            read_input(args.input_path),
            byteorder=args.byteorder,
            measure_only=args.measure_only,
            case_fold=args.case_fold,
            terminate=args.terminate,
        )

        if isinstance(result, int):
            write_output(args.output_path, f"{result}\n".encode())
        elif args.dump:
            dump = dump_units(result, args.direction.target.unit_bits)
            write_output(args.output_path, f"{SEP}\n{dump}\n{SEP}\n".encode())
        elif args.direction.target is Encoding.UTF16:
            write_output(args.output_path, utf16_to_bytes(result, args.byteorder))
        else:
            write_output(args.output_path, bytes(result))
        return 0

    except (KeyboardInterrupt, BrokenPipeError):
        return 0

    except (OSError, ValueError) as exc:
        logging.exception("Fatal error: %s", exc)
        return 1


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: Sequence[str] | None = None) -> None:  # pragma: no cover
    sys.exit(run_transcoder(parse_args(argv)))


if __name__ == "__main__":
    main()
