from collections.abc import MutableSequence
from logging import getLogger
from typing import Final

from .codepoint import BMP_END, Codepoint
from .viscii_table import (
    UNICODE_TO_VISCII,
    VISCII_LOWER_TO_UPPER,
    VISCII_UPPER_TO_LOWER,
    VisciiByte,
)

LATIN1_PASSTHROUGH_END: Final[Codepoint] = 0xFF
FALLBACK_BYTE: Final[VisciiByte] = ord("?")
ASCII_CASE_OFFSET: Final[int] = ord("a") - ord("A")

_logger = getLogger(__name__)


def viscii_from_codepoint(codepoint: Codepoint) -> VisciiByte:
    """Map one codepoint to its VISCII byte.

    Vietnamese letters come from the table. Anything else below 0xFF keeps its
    low byte, which can land on a byte the table already gives to a Vietnamese
    letter (e.g. U+00C5 and U+0102 both become 0xC5). Everything else is '?'.
    """
    mapped = UNICODE_TO_VISCII.get(codepoint)
    if mapped is not None:
        return mapped
    if codepoint < LATIN1_PASSTHROUGH_END:
        return codepoint & 0xFF
    return FALLBACK_BYTE


def viscii_len(codepoint: Codepoint) -> int:
    """Every codepoint takes exactly one VISCII byte, even above the BMP."""
    return 1


def encode_viscii(
    codepoint: Codepoint, viscii: MutableSequence[int], index: int
) -> int:
    """Write the VISCII byte for *codepoint* at *index*.

    Codepoints beyond the BMP are written as a single '?', matching
    :func:`viscii_len`. Returns the number of bytes written, 0 if *index* is
    past the end of *viscii*.
    """
    if index >= len(viscii):
        return 0

    if codepoint > BMP_END:
        _logger.debug("U+%06X has no VISCII form, writing '?'", codepoint)
        viscii[index] = FALLBACK_BYTE
    else:
        viscii[index] = viscii_from_codepoint(codepoint)
    return 1


def _resolve_length(buffer: MutableSequence[int], length: int | None) -> int:
    if length is None:
        return len(buffer)
    if not 0 <= length <= len(buffer):
        raise ValueError(f"Length {length} out of range for {len(buffer)} bytes")
    return length


def viscii_uppercase(buffer: MutableSequence[int], length: int | None = None) -> None:
    """Uppercase the first *length* bytes of a VISCII buffer in place.

    Each byte is read once and then overwritten, left to right, so the buffer
    is both source and destination. ASCII letters shift by 0x20; Vietnamese
    letters follow the case-pair table; every other byte is kept.

    Args:
        buffer: VISCII bytes (``bytearray`` or any mutable byte sequence)
        length: Number of bytes to fold, defaults to the whole buffer

    Raises:
        ValueError: *length* is negative or larger than *buffer*
    """
    for idx in range(_resolve_length(buffer, length)):
        value = buffer[idx]
        if ord("a") <= value <= ord("z"):
            buffer[idx] = value - ASCII_CASE_OFFSET
        else:
            buffer[idx] = VISCII_LOWER_TO_UPPER.get(value, value)


def viscii_lowercase(buffer: MutableSequence[int], length: int | None = None) -> None:
    """Lowercase the first *length* bytes of a VISCII buffer in place.

    The mirror image of :func:`viscii_uppercase` over the same case-pair table.
    """
    for idx in range(_resolve_length(buffer, length)):
        value = buffer[idx]
        if ord("A") <= value <= ord("Z"):
            buffer[idx] = value + ASCII_CASE_OFFSET
        else:
            buffer[idx] = VISCII_UPPER_TO_LOWER.get(value, value)
