"""Tests for the UTF-8 decoder and encoder."""

import pytest

from transcoder.codepoint import REPLACEMENT_CODEPOINT
from transcoder.utf8 import decode_utf8, encode_utf8, utf8_len


def _decode(data: bytes, index: int = 0) -> tuple[int, int]:
    return decode_utf8(data, len(data), index)


class TestDecodeUtf8:
    """Tests for decode_utf8."""

    def test_ascii(self) -> None:
        assert _decode(b"A") == (0x41, 0)
        assert _decode(b"\x00") == (0x0, 0)

    def test_multibyte(self) -> None:
        assert _decode("é".encode()) == (0xE9, 1)
        assert _decode("ệ".encode()) == (0x1EC7, 2)
        assert _decode("😀".encode()) == (0x1F600, 3)

    def test_matches_stdlib_for_boundaries(self) -> None:
        for codepoint in (0x7F, 0x80, 0x7FF, 0x800, 0xD7FF, 0xE000, 0xFFFF, 0x10000, 0x10FFFF):
            data = chr(codepoint).encode()
            assert _decode(data) == (codepoint, len(data) - 1)

    def test_overlong_nul_rejected(self) -> None:
        assert _decode(b"\xc0\x80") == (REPLACEMENT_CODEPOINT, 1)

    def test_overlong_three_byte_rejected(self) -> None:
        # U+002F encoded in three bytes
        assert _decode(b"\xe0\x80\xaf") == (REPLACEMENT_CODEPOINT, 2)

    def test_overlong_four_byte_rejected(self) -> None:
        # U+FFFF encoded in four bytes
        assert _decode(b"\xf0\x8f\xbf\xbf") == (REPLACEMENT_CODEPOINT, 3)

    def test_lone_continuation_byte(self) -> None:
        assert _decode(b"\x80") == (REPLACEMENT_CODEPOINT, 0)

    @pytest.mark.parametrize("lead", [0xF8, 0xFC, 0xFE, 0xFF])
    def test_unknown_leading_byte(self, lead: int) -> None:
        assert _decode(bytes([lead, 0x80, 0x80, 0x80, 0x80])) == (
            REPLACEMENT_CODEPOINT,
            0,
        )

    def test_truncated_sequence(self) -> None:
        assert _decode(b"\xe1\xbb") == (REPLACEMENT_CODEPOINT, 1)
        assert _decode(b"\xe1") == (REPLACEMENT_CODEPOINT, 0)

    def test_truncated_by_declared_length(self) -> None:
        assert decode_utf8(b"\xc3\xa9", 1, 0) == (REPLACEMENT_CODEPOINT, 0)

    def test_bad_continuation_not_consumed(self) -> None:
        # The 'A' stays available for the next decode call
        assert _decode(b"\xe1\xbbA") == (REPLACEMENT_CODEPOINT, 1)
        assert _decode(b"\xe1\xbbA", 2) == (0x41, 2)

    def test_encoded_surrogate_rejected(self) -> None:
        assert _decode(b"\xed\xa0\x80") == (REPLACEMENT_CODEPOINT, 2)
        assert _decode(b"\xed\xbf\xbf") == (REPLACEMENT_CODEPOINT, 2)

    def test_above_unicode_max_rejected(self) -> None:
        # 0x110000 and the largest 4-byte pattern value
        assert _decode(b"\xf4\x90\x80\x80") == (REPLACEMENT_CODEPOINT, 3)
        assert _decode(b"\xf7\xbf\xbf\xbf") == (REPLACEMENT_CODEPOINT, 3)

    def test_genuine_replacement_character(self) -> None:
        assert _decode("�".encode()) == (REPLACEMENT_CODEPOINT, 2)


class TestUtf8Len:
    @pytest.mark.parametrize(
        ("codepoint", "expected"),
        [
            (0x0, 1),
            (0x7F, 1),
            (0x80, 2),
            (0x7FF, 2),
            (0x800, 3),
            (0xFFFF, 3),
            (0x10000, 4),
            (0x10FFFF, 4),
        ],
    )
    def test_thresholds(self, codepoint: int, expected: int) -> None:
        assert utf8_len(codepoint) == expected


class TestEncodeUtf8:
    """Tests for encode_utf8."""

    @pytest.mark.parametrize(
        "codepoint",
        [0x0, 0x41, 0x7F, 0x80, 0xE9, 0x7FF, 0x800, 0x1EC7, 0xFFFD, 0xFFFF, 0x10000, 0x1F600, 0x10FFFF],
    )
    def test_matches_stdlib(self, codepoint: int) -> None:
        data = bytearray(4)
        size = encode_utf8(codepoint, data, 0)
        assert bytes(data[:size]) == chr(codepoint).encode()

    @pytest.mark.parametrize("codepoint", [0x41, 0x7FF, 0xE000, 0xFFFF, 0x10000, 0x10FFFF])
    def test_decode_reverses_encode(self, codepoint: int) -> None:
        data = bytearray(4)
        size = encode_utf8(codepoint, data, 0)
        assert decode_utf8(data, size, 0) == (codepoint, size - 1)

    def test_supplementary_uses_four_bytes(self) -> None:
        data = bytearray(4)
        assert encode_utf8(0x10000, data, 0) == 4
        assert bytes(data) == b"\xf0\x90\x80\x80"

    def test_writes_at_index(self) -> None:
        data = bytearray(b"xx\x00\x00\x00")
        assert encode_utf8(0x1EC7, data, 2) == 3
        assert bytes(data) == b"xx\xe1\xbb\x87"

    def test_no_room_writes_nothing(self) -> None:
        data = bytearray(b"\xaa\xaa\xaa")
        assert encode_utf8(0x1F600, data, 0) == 0
        assert bytes(data) == b"\xaa\xaa\xaa"

    def test_exact_fit(self) -> None:
        data = bytearray(3)
        assert encode_utf8(0x20AC, data, 0) == 3
        assert bytes(data) == "€".encode()


class TestUtf8RoundTrip:
    """Encode then decode every scalar value in the BMP and a stride above it."""

    @staticmethod
    def _check(codepoints) -> None:
        data = bytearray(4)
        for codepoint in codepoints:
            size = encode_utf8(codepoint, data, 0)
            assert size == utf8_len(codepoint)
            assert decode_utf8(data, size, 0) == (codepoint, size - 1)

    def test_every_bmp_scalar_value(self) -> None:
        self._check(cp for cp in range(0x10000) if not 0xD800 <= cp <= 0xDFFF)

    def test_supplementary_planes(self) -> None:
        self._check([*range(0x10000, 0x110000, 0x3F), 0x10FFFF])
