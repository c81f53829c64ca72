"""Tests for the Vietnamese table, VISCII encoder and case folders."""

import pytest

from transcoder import viscii_table
from transcoder.viscii import (
    FALLBACK_BYTE,
    encode_viscii,
    viscii_from_codepoint,
    viscii_len,
    viscii_lowercase,
    viscii_uppercase,
)
from transcoder.viscii_table import (
    UNICODE_TO_VISCII,
    UNICODE_TO_VISCII_ROWS,
    VISCII_CASE_PAIR_ROWS,
    VISCII_LOWER_TO_UPPER,
    VISCII_UPPER_TO_LOWER,
)


class TestTables:
    """Sanity checks on the static tables."""

    def test_row_counts(self) -> None:
        assert len(UNICODE_TO_VISCII_ROWS) == 134
        assert len(VISCII_CASE_PAIR_ROWS) == 67

    def test_lookup_matches_first_row_scan(self) -> None:
        for codepoint, _ in UNICODE_TO_VISCII_ROWS:
            first = next(b for cp, b in UNICODE_TO_VISCII_ROWS if cp == codepoint)
            assert UNICODE_TO_VISCII[codepoint] == first

    def test_mapped_bytes_unique(self) -> None:
        values = [b for _, b in UNICODE_TO_VISCII_ROWS]
        assert len(set(values)) == len(values)

    def test_case_pairs_agree_with_encoding_table(self) -> None:
        for upper, lower in VISCII_CASE_PAIR_ROWS:
            upper_cp = next(cp for cp, b in UNICODE_TO_VISCII_ROWS if b == upper)
            lower_cp = next(cp for cp, b in UNICODE_TO_VISCII_ROWS if b == lower)
            assert chr(upper_cp).lower() == chr(lower_cp)

    def test_upper_and_lower_columns_disjoint(self) -> None:
        assert not set(VISCII_LOWER_TO_UPPER) & set(VISCII_UPPER_TO_LOWER)

    def test_tables_are_read_only(self) -> None:
        with pytest.raises(TypeError):
            UNICODE_TO_VISCII[0x41] = 0x41  # type: ignore[index]

    def test_duplicate_key_rejected(self) -> None:
        with pytest.raises(ValueError, match="Duplicate key"):
            viscii_table._build_lookup([(0x1EA0, 0x80), (0x1EA0, 0xD5)], "rows")


class TestVisciiFromCodepoint:
    def test_vietnamese_letter(self) -> None:
        assert viscii_from_codepoint(0x1EC7) == 0xAE  # ệ
        assert viscii_from_codepoint(0x1EC6) == 0x8E  # Ệ
        assert viscii_from_codepoint(0x0111) == 0xF0  # đ

    def test_remapped_latin1_letter(self) -> None:
        assert viscii_from_codepoint(0x00D5) == 0xA0  # Õ

    def test_ascii_identity(self) -> None:
        assert viscii_from_codepoint(0x41) == 0x41
        assert viscii_from_codepoint(0x00) == 0x00

    def test_latin1_passthrough_collides_with_table(self) -> None:
        # Å is not Vietnamese and keeps its byte, the one Ă maps to
        assert viscii_from_codepoint(0x00C5) == 0xC5
        assert viscii_from_codepoint(0x0102) == 0xC5

    @pytest.mark.parametrize("codepoint", [0xFF, 0x20AC, 0xFFFD, 0x1F600])
    def test_fallback(self, codepoint: int) -> None:
        assert viscii_from_codepoint(codepoint) == FALLBACK_BYTE == ord("?")


class TestEncodeViscii:
    def test_writes_one_byte(self) -> None:
        buf = bytearray(1)
        assert encode_viscii(0x1EC7, buf, 0) == 1
        assert buf == bytearray(b"\xae")

    def test_supplementary_writes_single_question_mark(self) -> None:
        buf = bytearray(1)
        assert viscii_len(0x1F600) == 1
        assert encode_viscii(0x1F600, buf, 0) == 1
        assert buf == bytearray(b"?")

    def test_no_room(self) -> None:
        buf = bytearray(b"x")
        assert encode_viscii(0x41, buf, 1) == 0
        assert buf == bytearray(b"x")


class TestVisciiUppercase:
    """Tests for viscii_uppercase."""

    def test_ascii_letters(self) -> None:
        buf = bytearray(b"hello, World 42!")
        viscii_uppercase(buf)
        assert buf == bytearray(b"HELLO, WORLD 42!")

    def test_vietnamese_pair(self) -> None:
        buf = bytearray([0xAE])
        viscii_uppercase(buf)
        assert buf == bytearray([0x8E])

    def test_uppercase_ascii_unchanged(self) -> None:
        buf = bytearray([0x41])
        viscii_uppercase(buf)
        assert buf == bytearray([0x41])

    def test_every_pair(self) -> None:
        buf = bytearray(lower for _, lower in VISCII_CASE_PAIR_ROWS)
        viscii_uppercase(buf)
        assert buf == bytearray(upper for upper, _ in VISCII_CASE_PAIR_ROWS)

    def test_length_limits_fold(self) -> None:
        buf = bytearray(b"abc\x00")
        viscii_uppercase(buf, 2)
        assert buf == bytearray(b"ABc\x00")

    def test_length_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            viscii_uppercase(bytearray(b"abc"), 4)

    def test_idempotent_over_all_bytes(self) -> None:
        once = bytearray(range(256))
        viscii_uppercase(once)
        twice = bytearray(once)
        viscii_uppercase(twice)
        assert twice == once

    def test_works_on_memoryview(self) -> None:
        buf = bytearray(b"xay")
        viscii_uppercase(memoryview(buf)[1:])
        assert buf == bytearray(b"xAY")


class TestVisciiLowercase:
    def test_ascii_and_vietnamese(self) -> None:
        buf = bytearray([0x48, 0x8E, 0x31])
        viscii_lowercase(buf)
        assert buf == bytearray([0x68, 0xAE, 0x31])

    def test_reverses_uppercase_for_table_letters(self) -> None:
        lowers = bytearray(lower for _, lower in VISCII_CASE_PAIR_ROWS) + bytearray(b"abcxyz")
        buf = bytearray(lowers)
        viscii_uppercase(buf)
        viscii_lowercase(buf)
        assert buf == lowers

    def test_idempotent_over_all_bytes(self) -> None:
        once = bytearray(range(256))
        viscii_lowercase(once)
        twice = bytearray(once)
        viscii_lowercase(twice)
        assert twice == once
