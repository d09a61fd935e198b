"""Test utilities for vaultwire.

Factories that build small but representative vault containers. They
cover the cases most likely to expose encoding mistakes:

| Case                    | Where                                  |
|-------------------------|----------------------------------------|
| Multi-byte UTF-8 text   | spreadsheet cells, note labels         |
| Astral characters       | column names (2 UTF-16 units each)     |
| Hidden column           | column 2                               |
| Header-only records     | empty cell, empty note, empty metadata |
| Sparse indices          | gaps in every section                  |

Each call returns fresh objects, so tests may mutate them freely.
"""

from __future__ import annotations

from vaultwire.models import (
    ColumnMeta,
    Credential,
    LoginEntry,
    SecureNote,
    SyncBundle,
    VaultName,
)


def sample_spreadsheet() -> dict[int, dict[int, str]]:
    """Spreadsheet grid with ASCII, multi-byte and empty cells."""
    return {
        0: {0: "Site", 1: "Notes"},
        1: {0: "example.org", 1: "café ☕"},
        4: {9: ""},
    }


def sample_columns() -> dict[int, ColumnMeta]:
    """Columns including a hidden one and a name with an emoji."""
    return {
        0: ColumnMeta(name="Site"),
        1: ColumnMeta(name="Notes 📝"),
        2: ColumnMeta(name="Internal", hidden=True),
    }


def sample_secure_notes() -> dict[int, SecureNote]:
    """Secure notes including an entirely empty one."""
    return {
        3: SecureNote(label="wifi", note="hunter2"),
        5: SecureNote(label="", note=""),
        7: SecureNote(label="Ключ", note="multi\nline"),
    }


def sample_logins_metadata() -> dict[int, str]:
    """Login metadata with an empty entry."""
    return {0: "work", 2: "", 3: "personal"}


def sample_logins() -> dict[int, LoginEntry]:
    """Login entries with credentials at sparse rows."""
    return {
        0: LoginEntry(
            name="mail",
            entries={
                0: Credential(username="alice", password="s3cret"),
                2: Credential(username="alice.backup", password=""),
            },
        ),
        3: LoginEntry(
            name="bank",
            entries={1: Credential(username="ålice", password="pä55")},
        ),
    }


def sample_vault_names() -> list[VaultName]:
    """Vault names with binary identifiers."""
    return [
        VaultName(vault_id=bytes.fromhex("00ff10"), vault_name="Personal"),
        VaultName(vault_id=b"", vault_name=""),
        VaultName(vault_id=bytes(range(32)), vault_name="Équipe"),
    ]


def sample_bundle() -> SyncBundle:
    """SyncBundle populated from the sample factories.

    The login cell grid reuses the spreadsheet shape with its own values.
    """
    return SyncBundle(
        spreadsheet=sample_spreadsheet(),
        columns=sample_columns(),
        secure_notes=sample_secure_notes(),
        logins_metadata=sample_logins_metadata(),
        logins={0: {0: "mail"}, 3: {0: "bank", 1: "https://bank.example"}},
    )
