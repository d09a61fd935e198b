"""Typed containers for the vault sections.

Sections keyed by index are plain mappings from int to a record (or to
text). Record values may be given as the dataclasses below or as plain
mappings with the same field names, which is what JSON input produces;
``coerce`` normalises either form.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional, Union


@dataclass
class ColumnMeta:
    """Display metadata for one spreadsheet column.

    Attributes:
        name: Column heading
        hidden: Whether the column is hidden in the grid
    """

    name: str = ""
    hidden: bool = False

    @classmethod
    def coerce(cls, value: ColumnMeta | Mapping[str, Any] | None) -> ColumnMeta:
        """Build a ColumnMeta from a record, a mapping, or None.

        Missing or falsy fields fall back to an empty name and a visible
        column.
        """
        if isinstance(value, ColumnMeta):
            return value
        if value is None:
            return cls()
        return cls(name=value.get("name") or "", hidden=bool(value.get("hidden")))


@dataclass
class SecureNote:
    """A labelled free-text note.

    Attributes:
        label: Short title, at most 255 encoded bytes
        note: Note body, at most 65535 encoded bytes
    """

    label: str = ""
    note: str = ""

    @classmethod
    def coerce(cls, value: SecureNote | Mapping[str, Any]) -> SecureNote:
        """Build a SecureNote from a record or a mapping."""
        if isinstance(value, SecureNote):
            return value
        return cls(label=value.get("label") or "", note=value.get("note") or "")


@dataclass
class Credential:
    """One username/password pair of a login entry."""

    username: str = ""
    password: str = ""

    @classmethod
    def coerce(cls, value: Credential | Mapping[str, Any] | None) -> Credential:
        """Build a Credential from a record, a mapping, or None."""
        if isinstance(value, Credential):
            return value
        if value is None:
            return cls()
        return cls(
            username=value.get("username") or "",
            password=value.get("password") or "",
        )


@dataclass
class LoginEntry:
    """A login site with its credentials.

    The entry name is not carried on the wire; decoded entries have an
    empty name.

    Attributes:
        name: Display name of the site
        entries: Credentials keyed by their row index
    """

    name: str = ""
    entries: dict[int, Credential] = field(default_factory=dict)

    @classmethod
    def coerce(cls, value: LoginEntry | Mapping[str, Any] | None) -> LoginEntry:
        """Build a LoginEntry from a record, a mapping, or None.

        Credentials inside a mapping are coerced as well.
        """
        if isinstance(value, LoginEntry):
            return value
        if value is None:
            return cls()
        entries = value.get("entries") or {}
        return cls(
            name=value.get("name") or "",
            entries={int(k): Credential.coerce(v) for k, v in entries.items()},
        )


@dataclass
class VaultName:
    """Identifier and display name of a vault.

    Attributes:
        vault_id: Raw identifier bytes, at most 255 bytes
        vault_name: Display name
    """

    vault_id: bytes = b""
    vault_name: str = ""

    @classmethod
    def coerce(cls, value: VaultName | Mapping[str, Any]) -> VaultName:
        """Build a VaultName from a record or a mapping."""
        if isinstance(value, VaultName):
            return value
        return cls(
            vault_id=bytes(value.get("vault_id") or b""),
            vault_name=value.get("vault_name") or "",
        )


SpreadsheetMap = Mapping[int, Mapping[int, str]]
ColumnsMap = Mapping[int, Optional[Union[ColumnMeta, Mapping[str, Any]]]]
SecureNotesMap = Mapping[int, Optional[Union[SecureNote, Mapping[str, Any]]]]
LoginsMetadataMap = Mapping[int, str]
LoginsMap = Mapping[int, Optional[Union[LoginEntry, Mapping[str, Any]]]]
VaultNames = Sequence[Optional[Union[VaultName, Mapping[str, Any]]]]
