"""Direction-specific conversions built on one shared decode/encode walk.

Every conversion follows the same two-phase protocol:

* **measure** - call with ``destination=None`` (or the ``measure_*`` entry
  point). The whole source is decoded and the exact number of destination
  units is returned; nothing is written.
* **write** - call again with a buffer of at least the measured size. The
  identical walk runs and every unit is written; the return value is the
  number of units written.

A character that does not fit in the remaining destination space is skipped
as a whole and does not count towards the result, so always measure right
before writing and do not touch the source in between.
"""

from collections.abc import Callable, MutableSequence
from logging import getLogger
from typing import TypeAlias

from .code_units import CodeUnits, Destination, check_source_len
from .codepoint import REPLACEMENT_CODEPOINT, Codepoint
from .utf16 import decode_utf16, encode_utf16, utf16_len
from .utf8 import decode_utf8, encode_utf8, utf8_len
from .viscii import encode_viscii, viscii_len

Decoder: TypeAlias = Callable[[CodeUnits, int, int], tuple[Codepoint, int]]
LengthFunc: TypeAlias = Callable[[Codepoint], int]
Encoder: TypeAlias = Callable[[Codepoint, MutableSequence[int], int], int]

_logger = getLogger(__name__)


def _transcode(
    source: CodeUnits,
    source_len: int | None,
    destination: Destination,
    decode: Decoder,
    measure: LengthFunc,
    encode: Encoder,
) -> int:
    length = check_source_len(source, source_len)
    dest_index = 0
    src_index = 0

    while src_index < length:
        codepoint, last_index = decode(source, length, src_index)
        if codepoint == REPLACEMENT_CODEPOINT:
            _logger.debug(
                "Replacement codepoint at source units %d-%d", src_index, last_index
            )

        if destination is None:
            dest_index += measure(codepoint)
        else:
            written = encode(codepoint, destination, dest_index)
            if not written:
                _logger.debug(
                    "No room for U+%04X at destination index %d of %d",
                    codepoint,
                    dest_index,
                    len(destination),
                )
            dest_index += written

        src_index = last_index + 1

    return dest_index


def utf16_to_utf8(
    utf16: CodeUnits,
    utf8: Destination = None,
    *,
    source_len: int | None = None,
) -> int:
    """Convert UTF-16 units to UTF-8 bytes.

    Args:
        utf16: Source UTF-16 units
        utf8: Destination bytes, or None to only measure
        source_len: Number of source units to convert (default: all)

    Returns:
        Bytes required (measure) or bytes written (write)

    Example:
        >>> utf16_to_utf8([0x0048, 0x0069])
        2
    """
    return _transcode(utf16, source_len, utf8, decode_utf16, utf8_len, encode_utf8)


def utf8_to_utf16(
    utf8: CodeUnits,
    utf16: Destination = None,
    *,
    source_len: int | None = None,
) -> int:
    """Convert UTF-8 bytes to UTF-16 units.

    Args:
        utf8: Source UTF-8 bytes
        utf16: Destination 16-bit units, or None to only measure
        source_len: Number of source bytes to convert (default: all)

    Returns:
        Units required (measure) or units written (write)
    """
    return _transcode(utf8, source_len, utf16, decode_utf8, utf16_len, encode_utf16)


def utf8_to_viscii(
    utf8: CodeUnits,
    viscii: Destination = None,
    *,
    source_len: int | None = None,
) -> int:
    """Convert UTF-8 bytes to VISCII bytes.

    Args:
        utf8: Source UTF-8 bytes
        viscii: Destination bytes, or None to only measure
        source_len: Number of source bytes to convert (default: all)

    Returns:
        Bytes required (measure) or bytes written (write). One byte per
        decoded codepoint, whatever the codepoint.

    Example:
        >>> buf = bytearray(utf8_to_viscii("Việt".encode()))
        >>> utf8_to_viscii("Việt".encode(), buf), bytes(buf)
        (4, b'Vi\\xaet')
    """
    return _transcode(utf8, source_len, viscii, decode_utf8, viscii_len, encode_viscii)


def measure_utf16_to_utf8(utf16: CodeUnits, source_len: int | None = None) -> int:
    return utf16_to_utf8(utf16, None, source_len=source_len)


def measure_utf8_to_utf16(utf8: CodeUnits, source_len: int | None = None) -> int:
    return utf8_to_utf16(utf8, None, source_len=source_len)


def measure_utf8_to_viscii(utf8: CodeUnits, source_len: int | None = None) -> int:
    return utf8_to_viscii(utf8, None, source_len=source_len)
