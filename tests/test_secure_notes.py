"""Tests for the secure notes and logins metadata codecs."""

import pytest

from vaultwire import (
    CodecSettings,
    FramingError,
    SecureNote,
    TruncationWarning,
    ValueOutOfRangeError,
    decode_logins_metadata,
    decode_secure_notes,
    encode_logins_metadata,
    encode_secure_notes,
)
from vaultwire.testing import sample_logins_metadata, sample_secure_notes


class TestEncodeSecureNotes:
    """Tests for encode_secure_notes()."""

    def test_single_note(self) -> None:
        """Test header [label_len, note_hi, note_lo, index] then label and note."""
        result = encode_secure_notes({3: SecureNote(label="foo", note="bar")})
        assert result == bytes([3, 0, 3, 3, 102, 111, 111, 98, 97, 114])

    def test_multiple_notes(self) -> None:
        """Test that notes are concatenated in index order."""
        result = encode_secure_notes({
            2: SecureNote(label="BC", note="YZ"),
            1: SecureNote(label="A", note="X"),
        })
        assert result == bytes([
            1, 0, 1, 1, 65, 88,
            2, 0, 2, 2, 66, 67, 89, 90,
        ])

    def test_empty(self) -> None:
        """Test that no notes encode to no bytes."""
        assert encode_secure_notes({}) == b""

    def test_empty_note_is_header_only(self) -> None:
        """Test that an empty label and note still emit the 4-byte header."""
        result = encode_secure_notes({5: SecureNote(label="", note="")})
        assert result == bytes([0, 0, 0, 5])

    def test_absent_note_is_skipped(self) -> None:
        """Test that None entries produce no record at all."""
        result = encode_secure_notes({1: None, 2: SecureNote(label="A", note="B")})
        assert result == bytes([1, 0, 1, 2, 65, 66])

    def test_mapping_input(self) -> None:
        """Test that plain mappings are accepted."""
        result = encode_secure_notes({3: {"label": "foo", "note": "bar"}})
        assert result == encode_secure_notes({3: SecureNote(label="foo", note="bar")})

    def test_long_label_masked(self) -> None:
        """Test that a 300-byte label keeps 300 & 0xFF = 44 bytes."""
        with pytest.warns(TruncationWarning, match="label length 300"):
            result = encode_secure_notes({0: SecureNote(label="L" * 300, note="")})
        assert result[:4] == bytes([44, 0, 0, 0])
        assert len(result) == 4 + 44

    def test_strict_rejects_long_label(self) -> None:
        """Test that strict mode rejects labels over 255 bytes."""
        with pytest.raises(ValueOutOfRangeError) as exc_info:
            encode_secure_notes(
                {0: SecureNote(label="L" * 256, note="")}, CodecSettings(strict=True)
            )
        assert exc_info.value.field == "label length"
        assert exc_info.value.limit == 255


class TestDecodeSecureNotes:
    """Tests for decode_secure_notes()."""

    def test_roundtrip_sample(self) -> None:
        """Test that sample notes survive encode and decode."""
        notes = sample_secure_notes()
        assert decode_secure_notes(encode_secure_notes(notes)) == notes

    def test_header_only_record(self) -> None:
        """Test that a header-only record decodes to an empty note."""
        assert decode_secure_notes(bytes([0, 0, 0, 5])) == {5: SecureNote()}

    def test_truncated_payload(self) -> None:
        """Test that label plus note overrunning the buffer raises."""
        with pytest.raises(FramingError, match="Secure note payload"):
            decode_secure_notes(bytes([3, 0, 3, 3, 102, 111, 111, 98]))

    def test_truncated_header(self) -> None:
        """Test that a partial header raises."""
        with pytest.raises(FramingError):
            decode_secure_notes(bytes([3, 0, 3]))


class TestLoginsMetadata:
    """Tests for the logins metadata codec."""

    def test_single_entry(self) -> None:
        """Test header [len_hi, len_lo, index] then the text."""
        result = encode_logins_metadata({5: "hello"})
        assert result == bytes([0, 5, 5, 104, 101, 108, 108, 111])

    def test_multiple_entries(self) -> None:
        """Test that entries are concatenated in index order."""
        result = encode_logins_metadata({1: "A", 2: "BC"})
        assert result == bytes([0, 1, 1, 65, 0, 2, 2, 66, 67])

    def test_empty(self) -> None:
        """Test that no metadata encodes to no bytes."""
        assert encode_logins_metadata({}) == b""

    def test_empty_value_is_header_only(self) -> None:
        """Test that an empty string writes only the 3-byte header."""
        assert encode_logins_metadata({7: ""}) == bytes([0, 0, 7])

    def test_roundtrip_sample(self) -> None:
        """Test that sample metadata survives encode and decode."""
        metadata = sample_logins_metadata()
        assert decode_logins_metadata(encode_logins_metadata(metadata)) == metadata

    def test_truncated_payload(self) -> None:
        """Test that a declared length past the buffer end raises."""
        with pytest.raises(FramingError):
            decode_logins_metadata(bytes([0, 5, 5, 104]))
