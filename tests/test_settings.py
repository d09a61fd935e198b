"""Tests for CodecSettings, model coercion and the exception hierarchy."""

import dataclasses

import pytest

from vaultwire import (
    CodecSettings,
    ColumnMeta,
    Credential,
    EncodeError,
    FormatError,
    FramingError,
    LoginEntry,
    LoginPairing,
    SecureNote,
    TruncationWarning,
    ValueOutOfRangeError,
    VaultName,
    VaultwireError,
    decode_secure_notes,
    decode_spreadsheet,
)


class TestCodecSettings:
    """Tests for CodecSettings presets and validation."""

    def test_defaults(self) -> None:
        """Test that the default preset masks and pairs nested."""
        settings = CodecSettings.default()
        assert settings.strict is False
        assert settings.login_pairing == LoginPairing.NESTED
        assert settings.text_errors == "replace"
        assert settings == CodecSettings()

    def test_hardened(self) -> None:
        """Test that hardened() is strict on encode and decode."""
        settings = CodecSettings.hardened()
        assert settings.strict is True
        assert settings.text_errors == "strict"

    def test_reference(self) -> None:
        """Test that reference() uses the legacy cross pairing."""
        settings = CodecSettings.reference()
        assert settings.strict is False
        assert settings.login_pairing == LoginPairing.CROSS

    def test_unknown_error_handler_rejected(self) -> None:
        """Test that text_errors must name a registered handler."""
        with pytest.raises(ValueError, match="text error handler"):
            CodecSettings(text_errors="no-such-handler")

    def test_invalid_pairing_rejected(self) -> None:
        """Test that login_pairing must be a LoginPairing."""
        with pytest.raises(ValueError, match="login pairing"):
            CodecSettings(login_pairing="nested")  # type: ignore[arg-type]

    def test_frozen(self) -> None:
        """Test that settings cannot be modified after creation."""
        settings = CodecSettings()
        with pytest.raises(dataclasses.FrozenInstanceError):
            settings.strict = True  # type: ignore[misc]

    def test_pairing_display_names(self) -> None:
        """Test that every pairing has a display name."""
        for pairing in LoginPairing:
            assert pairing.display_name


class TestTextErrors:
    """Tests for UTF-8 handling on decode."""

    def test_replace_by_default(self) -> None:
        """Test that invalid UTF-8 is replaced in default mode."""
        notes = decode_secure_notes(bytes([1, 0, 0, 0, 0xC3]))
        assert notes == {0: SecureNote(label="�", note="")}

    def test_strict_raises_format_error(self) -> None:
        """Test that hardened decoding rejects invalid UTF-8."""
        with pytest.raises(FormatError, match="Invalid UTF-8"):
            decode_spreadsheet(bytes([0, 1, 0, 0, 0xFF]), CodecSettings.hardened())

    def test_custom_handler(self) -> None:
        """Test that any registered handler may be used."""
        settings = CodecSettings(text_errors="ignore")
        assert decode_spreadsheet(bytes([0, 2, 0, 0, 0xFF, 65]), settings) == {0: {0: "A"}}


class TestExceptionHierarchy:
    """Tests for exception inheritance and attributes."""

    def test_framing_error_is_format_error(self) -> None:
        """Test that FramingError can be caught as FormatError."""
        assert issubclass(FramingError, FormatError)
        assert issubclass(FormatError, VaultwireError)

    def test_value_out_of_range_is_encode_error(self) -> None:
        """Test that ValueOutOfRangeError can be caught as EncodeError."""
        assert issubclass(ValueOutOfRangeError, EncodeError)
        assert issubclass(EncodeError, VaultwireError)

    def test_truncation_warning_is_user_warning(self) -> None:
        """Test that TruncationWarning is visible under default filters."""
        assert issubclass(TruncationWarning, UserWarning)

    def test_framing_error_message(self) -> None:
        """Test that region and offset are included in the message."""
        error = FramingError("bad record", offset=17, region="columns")
        assert str(error) == "columns: bad record (at offset 17)"
        assert error.offset == 17
        assert error.region == "columns"

    def test_value_out_of_range_message(self) -> None:
        """Test the field, value and limit in the message."""
        error = ValueOutOfRangeError("x", 256, 255)
        assert str(error) == "x 256 does not fit in field (0..255)"


class TestModelCoercion:
    """Tests for building records from plain mappings."""

    def test_column_from_mapping_with_nulls(self) -> None:
        """Test that null fields fall back to defaults."""
        assert ColumnMeta.coerce({"name": None, "hidden": None}) == ColumnMeta()

    def test_column_from_none(self) -> None:
        """Test that None becomes a visible unnamed column."""
        assert ColumnMeta.coerce(None) == ColumnMeta(name="", hidden=False)

    def test_instances_pass_through(self) -> None:
        """Test that dataclass instances are returned unchanged."""
        note = SecureNote(label="a", note="b")
        assert SecureNote.coerce(note) is note

    def test_login_entry_from_mapping(self) -> None:
        """Test that nested credentials are coerced and keys made int."""
        entry = LoginEntry.coerce({
            "name": "site",
            "entries": {"3": {"username": "u"}},
        })
        assert entry == LoginEntry(name="site", entries={3: Credential("u", "")})

    def test_vault_name_from_mapping(self) -> None:
        """Test that vault ids are converted to bytes."""
        vault = VaultName.coerce({"vault_id": bytearray(b"\x01"), "vault_name": "v"})
        assert vault == VaultName(vault_id=b"\x01", vault_name="v")
