"""vaultwire - Compact binary encoding for vault sync data.

This library encodes the user-data collections of a vault (spreadsheet
cells, column metadata, secure notes, login metadata, login credentials
and vault names) into deterministic byte sequences, and frames several of
them into a single global sync envelope:
- Sparse containers in, bytes out, with no shared state between calls
- Ascending key order, so equal input gives byte-identical output
- Bounded decoding that never reads past the supplied buffer

Example:
    from vaultwire import SecureNote, SyncBundle, encode_spreadsheet

    encode_spreadsheet({1: {2: "abc"}})  # b"\\x00\\x03\\x01\\x02abc"

    bundle = SyncBundle(secure_notes={3: SecureNote("wifi", "hunter2")})
    data = bundle.to_bytes()
    assert SyncBundle.from_bytes(data) == bundle
"""

__version__ = "0.1.0"

from .exceptions import (
    EncodeError,
    FormatError,
    FramingError,
    TruncationWarning,
    ValueOutOfRangeError,
    VaultwireError,
)
from .models import (
    ColumnMeta,
    Credential,
    LoginEntry,
    SecureNote,
    SyncBundle,
    VaultName,
)
from .parsing import (
    SyncRegions,
    decode_columns,
    decode_global_sync,
    decode_logins,
    decode_logins_metadata,
    decode_secure_notes,
    decode_spreadsheet,
    decode_vault_names,
    encode_columns,
    encode_global_sync,
    encode_logins,
    encode_logins_metadata,
    encode_secure_notes,
    encode_spreadsheet,
    encode_vault_names,
    split_global_sync,
)
from .settings import CodecSettings, LoginPairing

__all__ = [
    # Models
    "ColumnMeta",
    "Credential",
    "LoginEntry",
    "SecureNote",
    "SyncBundle",
    "SyncRegions",
    "VaultName",
    # Settings
    "CodecSettings",
    "LoginPairing",
    # Section codecs
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
    "decode_global_sync",
    "encode_global_sync",
    "split_global_sync",
    # Exceptions
    "VaultwireError",
    "FormatError",
    "FramingError",
    "EncodeError",
    "ValueOutOfRangeError",
    "TruncationWarning",
]
