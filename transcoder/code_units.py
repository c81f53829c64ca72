"""Typed, caller-owned code-unit buffers.

UTF-16 text lives in ``array("H")`` (16-bit unsigned units); UTF-8 and VISCII
text live in ``bytearray``. Every conversion takes its source as a plain
``Sequence[int]`` and writes into a ``MutableSequence[int]`` whose capacity is
its ``len()``. Nothing here grows a buffer: callers measure first, then
allocate.
"""

import sys
from array import array
from collections.abc import MutableSequence, Sequence
from enum import Enum, unique
from logging import getLogger
from typing import Final, Literal, TypeAlias

CodeUnits: TypeAlias = Sequence[int]
Destination: TypeAlias = MutableSequence[int] | None
ByteOrder: TypeAlias = Literal["little", "big"]

UTF16_TYPECODE: Final[str] = "H"
UTF16_UNIT_SIZE: Final[int] = 2

_logger = getLogger(__name__)


@unique
class Encoding(str, Enum):
    UTF16 = "utf-16"
    UTF8 = "utf-8"
    VISCII = "viscii"

    @property
    def unit_bits(self) -> int:
        return 16 if self is Encoding.UTF16 else 8


def allocate(encoding: Encoding, capacity: int) -> MutableSequence[int]:
    """Return a zero-filled destination buffer of *capacity* units."""
    if capacity < 0:
        raise ValueError(f"Capacity must not be negative: {capacity}")
    if encoding is Encoding.UTF16:
        return array(UTF16_TYPECODE, bytes(capacity * UTF16_UNIT_SIZE))
    return bytearray(capacity)


def check_source_len(source: CodeUnits, source_len: int | None) -> int:
    """Resolve the explicit source length of a conversion call.

    Raises:
        ValueError: *source_len* is negative or larger than *source*
    """
    if source_len is None:
        return len(source)
    if not 0 <= source_len <= len(source):
        raise ValueError(
            f"Source length {source_len} out of range for {len(source)} units"
        )
    return source_len


def utf16_from_bytes(data: bytes, byteorder: ByteOrder = "little") -> array:
    """Split raw UTF-16 bytes into 16-bit units.

    A trailing odd byte is dropped; it cannot form a unit.
    """
    odd = len(data) % UTF16_UNIT_SIZE
    if odd:
        _logger.warning(
            "Dropping %d trailing byte(s) of %d-byte UTF-16 input", odd, len(data)
        )
    units = array(UTF16_TYPECODE)
    units.frombytes(data[: len(data) - odd])
    if byteorder != sys.byteorder:
        units.byteswap()
    return units


def utf16_to_bytes(units: CodeUnits, byteorder: ByteOrder = "little") -> bytes:
    """Serialize 16-bit units into raw bytes in *byteorder*."""
    swapped = array(UTF16_TYPECODE, units)
    if byteorder != sys.byteorder:
        swapped.byteswap()
    return swapped.tobytes()
