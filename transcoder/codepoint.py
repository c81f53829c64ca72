from typing import Final, TypeAlias

Codepoint: TypeAlias = int

# Last codepoint UTF-16 can hold in a single unit
BMP_END: Final[Codepoint] = 0xFFFF
UNICODE_MAX: Final[Codepoint] = 0x10FFFF
REPLACEMENT_CODEPOINT: Final[Codepoint] = 0xFFFD

GENERIC_SURROGATE_MASK: Final[int] = 0xF800
GENERIC_SURROGATE_VALUE: Final[int] = 0xD800
SURROGATE_MASK: Final[int] = 0xFC00
HIGH_SURROGATE_VALUE: Final[int] = 0xD800
LOW_SURROGATE_VALUE: Final[int] = 0xDC00

SURROGATE_CODEPOINT_OFFSET: Final[int] = 0x10000
SURROGATE_CODEPOINT_MASK: Final[int] = 0x03FF
SURROGATE_CODEPOINT_BITS: Final[int] = 10


def is_surrogate(value: int) -> bool:
    """Return True if the 16-bit *value* lies in 0xD800-0xDFFF."""
    return (value & GENERIC_SURROGATE_MASK) == GENERIC_SURROGATE_VALUE


def is_high_surrogate(value: int) -> bool:
    return (value & SURROGATE_MASK) == HIGH_SURROGATE_VALUE


def is_low_surrogate(value: int) -> bool:
    return (value & SURROGATE_MASK) == LOW_SURROGATE_VALUE


def is_valid_codepoint(value: int) -> bool:
    """Check that *value* is a Unicode scalar value.

    Decoders use this as their last line of defence; encoders never call it.
    """
    return 0 <= value <= UNICODE_MAX and not (value <= BMP_END and is_surrogate(value))
