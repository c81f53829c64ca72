from collections.abc import MutableSequence
from typing import Final

from .code_units import CodeUnits
from .codepoint import (
    BMP_END,
    HIGH_SURROGATE_VALUE,
    LOW_SURROGATE_VALUE,
    REPLACEMENT_CODEPOINT,
    SURROGATE_CODEPOINT_BITS,
    SURROGATE_CODEPOINT_MASK,
    SURROGATE_CODEPOINT_OFFSET,
    Codepoint,
    is_high_surrogate,
    is_low_surrogate,
    is_surrogate,
)

UNIT_MASK: Final[int] = 0xFFFF


def decode_utf16(units: CodeUnits, length: int, index: int) -> tuple[Codepoint, int]:
    """Decode the codepoint starting at *index*.

    Args:
        units: UTF-16 code units
        length: Number of valid units in *units*
        index: Position of the first unit of the codepoint

    Returns:
        ``(codepoint, last_index)`` where *last_index* is the position of the
        last unit that makes up the codepoint: *index* for a single unit or
        any invalid sequence, ``index + 1`` for a surrogate pair.

    Example:
        >>> decode_utf16([0xD83D, 0xDE00], 2, 0)
        (128512, 1)
        >>> decode_utf16([0xD800, 0x0041], 2, 0)
        (65533, 0)
    """
    high = units[index] & UNIT_MASK

    if not is_surrogate(high):
        return high, index

    # Unmatched low surrogate, or a high surrogate with nothing after it
    if not is_high_surrogate(high) or index >= length - 1:
        return REPLACEMENT_CODEPOINT, index

    low = units[index + 1] & UNIT_MASK
    if not is_low_surrogate(low):
        return REPLACEMENT_CODEPOINT, index

    codepoint = (high & SURROGATE_CODEPOINT_MASK) << SURROGATE_CODEPOINT_BITS
    codepoint |= low & SURROGATE_CODEPOINT_MASK
    return codepoint + SURROGATE_CODEPOINT_OFFSET, index + 1


def utf16_len(codepoint: Codepoint) -> int:
    """Number of UTF-16 units needed for *codepoint* (not validated)."""
    return 1 if codepoint <= BMP_END else 2


def encode_utf16(
    codepoint: Codepoint, units: MutableSequence[int], index: int
) -> int:
    """Write *codepoint* at *index* and return the number of units written.

    Returns 0 without touching *units* when fewer than the required units
    are left. A surrogate pair is never split.
    """
    size = utf16_len(codepoint)
    if index + size > len(units):
        return 0

    if size == 1:
        units[index] = codepoint
        return 1

    value = codepoint - SURROGATE_CODEPOINT_OFFSET
    units[index] = HIGH_SURROGATE_VALUE | (
        (value >> SURROGATE_CODEPOINT_BITS) & SURROGATE_CODEPOINT_MASK
    )
    units[index + 1] = LOW_SURROGATE_VALUE | (value & SURROGATE_CODEPOINT_MASK)
    return 2
