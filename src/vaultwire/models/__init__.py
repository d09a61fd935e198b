"""Data models for vault sections.

This module provides typed Python classes for the records carried in each
section and the SyncBundle that groups the global sync sections.
"""

from .bundle import SyncBundle
from .records import (
    ColumnMeta,
    ColumnsMap,
    Credential,
    LoginEntry,
    LoginsMap,
    LoginsMetadataMap,
    SecureNote,
    SecureNotesMap,
    SpreadsheetMap,
    VaultName,
    VaultNames,
)

__all__ = [
    "ColumnMeta",
    "ColumnsMap",
    "Credential",
    "LoginEntry",
    "LoginsMap",
    "LoginsMetadataMap",
    "SecureNote",
    "SecureNotesMap",
    "SpreadsheetMap",
    "SyncBundle",
    "VaultName",
    "VaultNames",
]
