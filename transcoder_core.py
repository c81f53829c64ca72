"""Shared helpers for the command-line tools - logging, IO and dumps."""

from __future__ import annotations
import logging
import sys
from enum import Enum, unique
from pathlib import Path
from typing import Final, Sequence

from bitstring import Bits

STDIN_MARKER: Final[str] = "-"
STDOUT_MARKER: Final[str] = "-"
DUMP_UNITS_PER_LINE: Final[int] = 4


# ------------------------------------------------------------------
# Logging
# ------------------------------------------------------------------
@unique
class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def to_int(self) -> int:
        return getattr(logging, self.value)


def setup_logging(level: LogLevel) -> None:
    logging.basicConfig(
        level=level.to_int(),
        format="%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s",
    )


# ------------------------------------------------------------------
# IO helpers
# ------------------------------------------------------------------
def read_input(path: str | Path) -> bytes:
    """Read all of *path*, or stdin when *path* is '-'."""
    if path == STDIN_MARKER:
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()


def write_output(path: str | Path, data: bytes) -> None:
    """Write *data* to *path*, or stdout when *path* is '-'."""
    if path == STDOUT_MARKER:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    else:
        Path(path).write_bytes(data)


# ------------------------------------------------------------------
# Dumps
# ------------------------------------------------------------------
def dump_units(units: Sequence[int], unit_bits: int = 8) -> str:
    """Format code units as offset, hex and binary columns.

    Example:
        >>> print(dump_units(b"A"))
        00000000  41  01000001
    """
    width = unit_bits // 4
    lines: list[str] = []
    for start in range(0, len(units), DUMP_UNITS_PER_LINE):
        chunk = [Bits(uint=u, length=unit_bits) for u in units[start : start + DUMP_UNITS_PER_LINE]]
        hex_col = " ".join(f"{b.uint:0{width}X}" for b in chunk)
        bin_col = " ".join(b.bin for b in chunk)
        lines.append(f"{start:08X}  {hex_col}  {bin_col}")
    return "\n".join(lines)
