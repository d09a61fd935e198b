"""Custom exception hierarchy for vaultwire.

All exceptions inherit from VaultwireError, so callers can catch every
codec failure with a single except clause.

Exception Hierarchy:
    VaultwireError (base)
    ├── FormatError
    │   └── FramingError
    └── EncodeError
        └── ValueOutOfRangeError

    TruncationWarning (UserWarning)

Security Note:
    Messages report offsets, field names and lengths only. Cell contents,
    note bodies and credentials never appear in exception text.
"""

from __future__ import annotations


class VaultwireError(Exception):
    """Base exception for all vaultwire errors."""


# --- Decode Errors ---


class FormatError(VaultwireError):
    """Buffer does not follow the vault wire format."""


class FramingError(FormatError):
    """A record or region does not fit in the supplied buffer.

    Raised when a header is truncated, a declared payload length runs past
    the end of the buffer, or an envelope's region sizes overrun it.

    Attributes:
        offset: Byte offset at which the problem was detected, if known
        region: Name of the envelope region being decoded, if any
    """

    def __init__(
        self,
        message: str,
        offset: int | None = None,
        region: str | None = None,
    ) -> None:
        self.offset = offset
        self.region = region
        if region is not None:
            message = f"{region}: {message}"
        if offset is not None:
            message = f"{message} (at offset {offset})"
        super().__init__(message)


# --- Encode Errors ---


class EncodeError(VaultwireError):
    """Container cannot be encoded."""


class ValueOutOfRangeError(EncodeError):
    """A value does not fit in its fixed-width field.

    Raised in strict mode instead of masking, and always for negative
    indices.

    Attributes:
        field: Name of the field being written (e.g. "x", "note length")
        value: The offending value
        limit: Largest value the field can hold
    """

    def __init__(self, field: str, value: int, limit: int) -> None:
        self.field = field
        self.value = value
        self.limit = limit
        super().__init__(f"{field} {value} does not fit in field (0..{limit})")


class TruncationWarning(UserWarning):
    """A value was masked to fit its field and data may have been lost."""
