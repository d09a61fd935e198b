"""Vault wire format encoding and decoding.

This module handles the low-level binary format:
- Fixed-width big-endian fields and bounded reading
- The six section codecs
- The global sync envelope

All packing uses Python's struct module.
"""

from .envelope import (
    GlobalSyncReader,
    GlobalSyncWriter,
    SyncRegions,
    decode_global_sync,
    encode_global_sync,
    split_global_sync,
)
from .primitives import ByteReader, encode_text, utf16_length
from .sections import (
    decode_columns,
    decode_logins,
    decode_logins_metadata,
    decode_secure_notes,
    decode_spreadsheet,
    decode_vault_names,
    encode_columns,
    encode_logins,
    encode_logins_metadata,
    encode_secure_notes,
    encode_spreadsheet,
    encode_vault_names,
)

__all__ = [
    # Primitives
    "ByteReader",
    "encode_text",
    "utf16_length",
    # Sections
    "decode_columns",
    "decode_logins",
    "decode_logins_metadata",
    "decode_secure_notes",
    "decode_spreadsheet",
    "decode_vault_names",
    "encode_columns",
    "encode_logins",
    "encode_logins_metadata",
    "encode_secure_notes",
    "encode_spreadsheet",
    "encode_vault_names",
    # Envelope
    "GlobalSyncReader",
    "GlobalSyncWriter",
    "SyncRegions",
    "decode_global_sync",
    "encode_global_sync",
    "split_global_sync",
]
