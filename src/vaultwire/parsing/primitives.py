"""Fixed-width fields and text helpers shared by all section codecs.

All multi-byte integers are big-endian. Index fields are 1 byte, length
fields 1 or 2 bytes, envelope region sizes 5 bytes.
"""

from __future__ import annotations

import logging
import struct
import warnings
from collections.abc import Iterator, Mapping
from typing import Any, TypeVar

from vaultwire.exceptions import (
    FormatError,
    FramingError,
    TruncationWarning,
    ValueOutOfRangeError,
)
from vaultwire.settings import CodecSettings

logger = logging.getLogger(__name__)

V = TypeVar("V")

U8_MAX = 0xFF
U16_MAX = 0xFFFF
U40_MAX = (1 << 40) - 1

SIZE_FIELD_LENGTH = 5


def encode_text(text: str) -> bytes:
    """UTF-8 encode a text field."""
    return text.encode("utf-8")


def utf16_length(text: str) -> int:
    """Length of text in UTF-16 code units (JavaScript ``String.length``)."""
    return sum(2 if ord(ch) > 0xFFFF else 1 for ch in text)


def pack_u40(value: int) -> bytes:
    """Encode a 5-byte big-endian unsigned integer."""
    if value < 0 or value > U40_MAX:
        raise ValueOutOfRangeError("region size", value, U40_MAX)
    return struct.pack(">BI", value >> 32, value & 0xFFFFFFFF)


def unpack_u40(data: bytes) -> int:
    """Decode a 5-byte big-endian unsigned integer."""
    high, low = struct.unpack(">BI", data)
    return (high << 32) | low


def report_truncation(field: str, value: int, kept: int) -> None:
    """Log and warn that a value was masked to fit its field."""
    logger.warning("Truncated %s %d to %d", field, value, kept)
    warnings.warn(
        f"{field} {value} does not fit its field and was truncated to {kept}",
        TruncationWarning,
        stacklevel=4,
    )


def fit_index(value: Any, field: str, settings: CodecSettings) -> int:
    """Reduce an index or coordinate to a single byte.

    Args:
        value: Index value (anything int() accepts, e.g. JSON string keys)
        field: Field name used in warnings and errors
        settings: Codec settings

    Returns:
        Index in 0..255

    Raises:
        ValueOutOfRangeError: If the index is negative, or above 255 in
            strict mode
    """
    index = int(value)
    if index < 0:
        raise ValueOutOfRangeError(field, index, U8_MAX)
    if index > U8_MAX:
        if settings.strict:
            raise ValueOutOfRangeError(field, index, U8_MAX)
        report_truncation(field, index, index & U8_MAX)
        return index & U8_MAX
    return index


def fit_payload(
    payload: bytes, limit: int, field: str, settings: CodecSettings
) -> bytes:
    """Make a payload fit a length field of the given maximum.

    Oversized payloads are cut to ``len(payload) & limit`` bytes, which is
    the length the masked header would announce, so the record stays
    decodable.

    Raises:
        ValueOutOfRangeError: If the payload is too long in strict mode
    """
    length = len(payload)
    if length <= limit:
        return payload
    if settings.strict:
        raise ValueOutOfRangeError(field, length, limit)
    kept = length & limit
    report_truncation(field, length, kept)
    return payload[:kept]


def sorted_items(mapping: Mapping[Any, V]) -> Iterator[tuple[int, V]]:
    """Iterate a sparse mapping in ascending numeric key order."""
    for key, value in sorted(mapping.items(), key=lambda item: int(item[0])):
        yield int(key), value


class ByteReader:
    """Bounded sequential reader over a buffer.

    Every read checks the remaining length first; nothing is ever read
    past the end of the buffer.
    """

    def __init__(
        self,
        data: bytes | bytearray | memoryview,
        region: str | None = None,
        base: int = 0,
    ) -> None:
        """Initialize reader.

        Args:
            data: Buffer to read
            region: Envelope region name reported in errors
            base: Offset of data within the enclosing envelope, added to
                offsets reported in errors
        """
        self._data = bytes(data)
        self._offset = 0
        self._region = region
        self._base = base

    @property
    def offset(self) -> int:
        """Current read position."""
        return self._offset

    @property
    def remaining(self) -> int:
        """Number of unread bytes."""
        return len(self._data) - self._offset

    def at_end(self) -> bool:
        """True when the whole buffer has been consumed."""
        return self._offset >= len(self._data)

    def fail(self, message: str, offset: int | None = None) -> FramingError:
        """Build a FramingError for this reader's region."""
        return FramingError(
            message,
            offset=self._base + (self._offset if offset is None else offset),
            region=self._region,
        )

    def peek(self, n: int) -> bytes:
        """Return up to n bytes from the current position without consuming them."""
        return self._data[self._offset : self._offset + n]

    def read(self, n: int) -> bytes:
        """Read exactly n bytes."""
        if n > self.remaining:
            raise self.fail(f"Need {n} bytes but only {self.remaining} remain")
        result = self._data[self._offset : self._offset + n]
        self._offset += n
        return result

    def read_u40(self) -> int:
        """Read a 5-byte big-endian unsigned integer."""
        return unpack_u40(self.read(SIZE_FIELD_LENGTH))

    def read_text(self, n: int, errors: str = "replace") -> str:
        """Read n bytes and decode them as UTF-8.

        Raises:
            FramingError: If fewer than n bytes remain
            FormatError: If the bytes are not UTF-8 and errors is "strict"
        """
        start = self._offset
        try:
            return self.read(n).decode("utf-8", errors=errors)
        except UnicodeDecodeError as e:
            raise FormatError(f"Invalid UTF-8 text at offset {self._base + start}") from e

    def read_rest(self) -> bytes:
        """Consume and return everything left in the buffer."""
        result = self._data[self._offset :]
        self._offset = len(self._data)
        return result
