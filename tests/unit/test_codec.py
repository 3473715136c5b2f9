"""Tests for the category list binary encoding."""

import pytest
from what2play.errors import CodecError
from what2play.storage.codec import UINT16_MAX, decode_categories, encode_categories


class TestEncodeCategories:
    """Tests for encode_categories."""

    def test_layout(self) -> None:
        """Count then codes, all little-endian uint16."""
        assert encode_categories([1, 49, 0x0102]) == bytes(
            [0x03, 0x00, 0x01, 0x00, 0x31, 0x00, 0x02, 0x01]
        )

    def test_empty_list(self) -> None:
        """An empty list is just the header."""
        assert encode_categories([]) == b"\x00\x00"

    def test_order_and_duplicates_preserved(self) -> None:
        """Codes are stored as given."""
        encoded = encode_categories([36, 1, 36])

        assert decode_categories(encoded) == [36, 1, 36]

    @pytest.mark.parametrize("code", [-1, UINT16_MAX + 1])
    def test_code_out_of_range(self, code: int) -> None:
        """Codes must fit in an unsigned 16-bit integer."""
        with pytest.raises(CodecError, match="out of range"):
            encode_categories([1, code])

    def test_boundary_codes(self) -> None:
        """Zero and 65535 are both valid codes."""
        assert decode_categories(encode_categories([0, UINT16_MAX])) == [0, UINT16_MAX]

    def test_too_many_codes(self) -> None:
        """The count must fit in the header."""
        with pytest.raises(CodecError, match="too many"):
            encode_categories([1] * (UINT16_MAX + 1))


class TestDecodeCategories:
    """Tests for decode_categories."""

    def test_decode(self) -> None:
        """Decode a stored payload."""
        assert decode_categories(b"\x02\x00\x01\x00\x24\x00") == [1, 36]

    def test_header_only(self) -> None:
        """A header with nothing after it is an empty list."""
        assert decode_categories(b"\x00\x00") == []

    @pytest.mark.parametrize("encoded", [b"", b"\x01"])
    def test_truncated_header(self, encoded: bytes) -> None:
        """Fewer than two bytes can't hold a count."""
        with pytest.raises(CodecError, match="too short"):
            decode_categories(encoded)

    @pytest.mark.parametrize(
        "encoded",
        [
            b"\x02\x00\x01\x00",  # one code short
            b"\x01\x00\x01\x00\x02\x00",  # one code too many
            b"\x01\x00\x01",  # odd payload
        ],
    )
    def test_length_mismatch(self, encoded: bytes) -> None:
        """Payload length must equal twice the declared count."""
        with pytest.raises(CodecError):
            decode_categories(encoded)

    def test_codec_error_is_value_error(self) -> None:
        """Callers catching ValueError see codec failures."""
        with pytest.raises(ValueError):
            decode_categories(b"\x05\x00\x01\x00")
