from collections.abc import MutableSequence
from typing import Final

from bitstring import Bits

from .code_units import CodeUnits
from .codepoint import REPLACEMENT_CODEPOINT, Codepoint, is_valid_codepoint

BYTE_BITS: Final[int] = 8
BYTE_MASK: Final[int] = 0xFF

# Highest codepoint encodable with 1, 2 and 3 bytes
UTF8_1_MAX: Final[Codepoint] = 0x7F
UTF8_2_MAX: Final[Codepoint] = 0x7FF
UTF8_3_MAX: Final[Codepoint] = 0xFFFF

# Leading byte prefixes; the pattern at position N starts an (N + 1)-byte sequence
LEADING_PATTERNS: Final[tuple[Bits, ...]] = (
    Bits("0b0"),  # 0xxxxxxx
    Bits("0b110"),  # 110xxxxx
    Bits("0b1110"),  # 1110xxxx
    Bits("0b11110"),  # 11110xxx
)
CONTINUATION_PATTERN: Final[Bits] = Bits("0b10")  # 10xxxxxx
CONTINUATION_VALUE: Final[int] = CONTINUATION_PATTERN.uint << 6
CONTINUATION_BITS: Final[int] = BYTE_BITS - len(CONTINUATION_PATTERN)
CONTINUATION_VALUE_MASK: Final[int] = (1 << CONTINUATION_BITS) - 1


def _as_bits(value: int) -> Bits:
    return Bits(uint=value & BYTE_MASK, length=BYTE_BITS)


def _leading_template(size: int) -> tuple[int, int]:
    """Return ``(prefix value, payload mask)`` of an *size*-byte leading byte."""
    pattern = LEADING_PATTERNS[size - 1]
    payload_bits = BYTE_BITS - len(pattern)
    return pattern.uint << payload_bits, (1 << payload_bits) - 1


def utf8_len(codepoint: Codepoint) -> int:
    """Number of UTF-8 bytes needed for *codepoint* (not validated)."""
    if codepoint <= UTF8_1_MAX:
        return 1
    if codepoint <= UTF8_2_MAX:
        return 2
    if codepoint <= UTF8_3_MAX:
        return 3
    return 4


def decode_utf8(data: CodeUnits, length: int, index: int) -> tuple[Codepoint, int]:
    """Decode the codepoint whose leading byte is at *index*.

    Args:
        data: UTF-8 bytes
        length: Number of valid bytes in *data*
        index: Position of the leading byte

    Returns:
        ``(codepoint, last_index)``. *last_index* is the position of the last
        byte consumed; continuation bytes read before a failure was detected
        stay consumed. Malformed input yields ``REPLACEMENT_CODEPOINT``:

        * a leading byte matching none of :data:`LEADING_PATTERNS`
        * a sequence cut short by the end of the buffer
        * a byte that should continue the sequence but is not ``10xxxxxx``
        * an overlong encoding (more bytes than the value needs)
        * a surrogate value or anything above U+10FFFF

    Example:
        >>> decode_utf8(b"\\xe1\\xbb\\x87", 3, 0)
        (7879, 2)
        >>> decode_utf8(b"\\xc0\\x80", 2, 0)
        (65533, 1)
    """
    lead = _as_bits(data[index])

    for size, pattern in enumerate(LEADING_PATTERNS, start=1):
        if lead.startswith(pattern):
            break
    else:
        return REPLACEMENT_CODEPOINT, index

    codepoint = lead[len(pattern) :].uint

    for _ in range(size - 1):
        if index + 1 >= length:
            return REPLACEMENT_CODEPOINT, index

        continuation = _as_bits(data[index + 1])
        if not continuation.startswith(CONTINUATION_PATTERN):
            return REPLACEMENT_CODEPOINT, index

        codepoint <<= CONTINUATION_BITS
        codepoint |= continuation[len(CONTINUATION_PATTERN) :].uint
        index += 1

    # Overlong: a shorter sequence would have held this value
    if utf8_len(codepoint) != size:
        return REPLACEMENT_CODEPOINT, index

    if not is_valid_codepoint(codepoint):
        return REPLACEMENT_CODEPOINT, index

    return codepoint, index


def encode_utf8(codepoint: Codepoint, data: MutableSequence[int], index: int) -> int:
    """Write *codepoint* at *index* and return the number of bytes written.

    Continuation bytes are filled in from the last one backwards, then the
    leading byte takes whatever high bits remain. Returns 0 without touching
    *data* when the sequence does not fit.
    """
    size = utf8_len(codepoint)
    if index + size > len(data):
        return 0

    for offset in range(size - 1, 0, -1):
        data[index + offset] = CONTINUATION_VALUE | (codepoint & CONTINUATION_VALUE_MASK)
        codepoint >>= CONTINUATION_BITS

    prefix, payload_mask = _leading_template(size)
    data[index] = prefix | (codepoint & payload_mask)
    return size
