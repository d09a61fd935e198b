"""High-level container for a global sync payload."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .records import ColumnMeta, SecureNote

if TYPE_CHECKING:
    from vaultwire.settings import CodecSettings


@dataclass
class SyncBundle:
    """The five vault sections carried by a global sync envelope.

    Example usage:
        bundle = SyncBundle(spreadsheet={0: {0: "Name"}})
        data = bundle.to_bytes()

        restored = SyncBundle.from_bytes(data)
        assert restored.spreadsheet == {0: {0: "Name"}}

    Attributes:
        spreadsheet: Spreadsheet cells (x -> y -> text)
        columns: Column metadata by column index
        secure_notes: Secure notes by index
        logins_metadata: Login metadata text by index
        logins: Login cell grid (x -> y -> text)
    """

    spreadsheet: dict[int, dict[int, str]] = field(default_factory=dict)
    columns: dict[int, ColumnMeta] = field(default_factory=dict)
    secure_notes: dict[int, SecureNote] = field(default_factory=dict)
    logins_metadata: dict[int, str] = field(default_factory=dict)
    logins: dict[int, dict[int, str]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        """True when no section holds any entry."""
        return not (
            any(self.spreadsheet.values())
            or self.columns
            or self.secure_notes
            or self.logins_metadata
            or any(self.logins.values())
        )

    def to_bytes(self, settings: CodecSettings | None = None) -> bytes:
        """Encode the bundle as a global sync envelope.

        Args:
            settings: Codec settings (defaults if None)

        Returns:
            Envelope bytes
        """
        from vaultwire.parsing.envelope import encode_global_sync

        return encode_global_sync(
            self.spreadsheet,
            self.columns,
            self.secure_notes,
            self.logins_metadata,
            self.logins,
            settings=settings,
        )

    @classmethod
    def from_bytes(
        cls, data: bytes, settings: CodecSettings | None = None
    ) -> SyncBundle:
        """Decode a global sync envelope.

        Args:
            data: Envelope bytes
            settings: Codec settings (defaults if None)

        Returns:
            SyncBundle with all five sections

        Raises:
            FramingError: If the envelope or any region is malformed
        """
        from vaultwire.parsing.envelope import decode_global_sync

        return decode_global_sync(data, settings=settings)
