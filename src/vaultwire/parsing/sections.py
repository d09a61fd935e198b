"""Section encoders and decoders.

Each section is a flat run of records with no separators and no trailing
marker; record boundaries follow from the length fields in each header.

Record layouts (big-endian, lengths in bytes unless noted):

    Spreadsheet       [len:2][x:1][y:1][text]
    Columns           [units:2][flag:1][index:1][name]
    Secure notes      [label_len:1][note_len:2][index:1][label][note]
    Logins metadata   [len:2][index:1][text]
    Login entries     [x:1][y:1][user_len:2][pass_len:2][username][password]
    Vault names       [id_len:1][name_len:2][vault_id][name]

The column-name length counts UTF-16 code units rather than bytes, and its
flag byte is 0x00 for a hidden column and 0x01 for a visible one. Both
follow the deployed web client and must not change within this format.

Encoders iterate keys in ascending numeric order, so output is stable for
equal input.
"""

from __future__ import annotations

import logging
import struct

from vaultwire.exceptions import ValueOutOfRangeError
from vaultwire.models import (
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
from vaultwire.settings import CodecSettings, LoginPairing

from .primitives import (
    U8_MAX,
    U16_MAX,
    ByteReader,
    encode_text,
    fit_index,
    fit_payload,
    report_truncation,
    sorted_items,
    utf16_length,
)

logger = logging.getLogger(__name__)

SPREADSHEET_HEADER = struct.Struct(">HBB")
COLUMN_HEADER = struct.Struct(">HBB")
SECURE_NOTE_HEADER = struct.Struct(">BHB")
LOGINS_METADATA_HEADER = struct.Struct(">HB")
LOGIN_HEADER = struct.Struct(">BBHH")
VAULT_NAME_HEADER = struct.Struct(">BH")

COLUMN_HIDDEN = 0x00
COLUMN_VISIBLE = 0x01


def _read_header(reader: ByteReader, header: struct.Struct, what: str) -> tuple[int, ...]:
    """Unpack one record header, failing on a truncated header."""
    if reader.remaining < header.size:
        raise reader.fail(
            f"Truncated {what} header: {reader.remaining} of {header.size} bytes"
        )
    return header.unpack(reader.read(header.size))


def _check_payload(reader: ByteReader, length: int, start: int, what: str) -> None:
    """Fail when a declared payload length overruns the buffer."""
    if length > reader.remaining:
        raise reader.fail(
            f"{what} payload of {length} bytes overruns buffer "
            f"({reader.remaining} bytes remain)",
            offset=start,
        )


# --- Spreadsheet grid ---


def encode_spreadsheet(
    grid: SpreadsheetMap, settings: CodecSettings | None = None
) -> bytes:
    """Encode a sparse x -> y -> text grid.

    Args:
        grid: Cells keyed by column then row
        settings: Codec settings (defaults if None)

    Returns:
        Section bytes, empty for an empty grid

    Raises:
        ValueOutOfRangeError: If a coordinate or cell length does not fit
            (negative coordinates always, overflow in strict mode)
    """
    settings = settings or CodecSettings.default()
    parts: list[bytes] = []
    cells = 0

    for x, row in sorted_items(grid):
        ix = fit_index(x, "x", settings)
        for y, text in sorted_items(row or {}):
            iy = fit_index(y, "y", settings)
            payload = fit_payload(encode_text(text or ""), U16_MAX, "cell length", settings)
            parts.append(SPREADSHEET_HEADER.pack(len(payload), ix, iy))
            parts.append(payload)
            cells += 1

    data = b"".join(parts)
    logger.debug("Encoded %d spreadsheet cells (%d bytes)", cells, len(data))
    return data


def read_spreadsheet(
    reader: ByteReader, settings: CodecSettings
) -> dict[int, dict[int, str]]:
    """Decode spreadsheet records until the reader is exhausted."""
    grid: dict[int, dict[int, str]] = {}
    while not reader.at_end():
        start = reader.offset
        length, x, y = _read_header(reader, SPREADSHEET_HEADER, "cell")
        _check_payload(reader, length, start, "Cell")
        grid.setdefault(x, {})[y] = reader.read_text(length, settings.text_errors)
    return grid


def decode_spreadsheet(
    data: bytes, settings: CodecSettings | None = None
) -> dict[int, dict[int, str]]:
    """Decode a spreadsheet section.

    A repeated (x, y) pair keeps the last record.

    Raises:
        FramingError: If a header or payload is truncated
    """
    return read_spreadsheet(ByteReader(data), settings or CodecSettings.default())


# --- Column metadata ---


def _fit_column_name(name: str, settings: CodecSettings) -> str:
    """Cut a column name to at most 0xFFFF UTF-16 code units."""
    units = utf16_length(name)
    if units <= U16_MAX:
        return name
    if settings.strict:
        raise ValueOutOfRangeError("column name length", units, U16_MAX)

    budget = units & U16_MAX
    kept = []
    used = 0
    for ch in name:
        width = 2 if ord(ch) > 0xFFFF else 1
        if used + width > budget:
            break
        kept.append(ch)
        used += width
    report_truncation("column name length", units, used)
    return "".join(kept)


def encode_columns(columns: ColumnsMap, settings: CodecSettings | None = None) -> bytes:
    """Encode column metadata.

    Missing names encode as empty, missing hidden flags as visible.

    Args:
        columns: Column metadata keyed by column index
        settings: Codec settings (defaults if None)

    Returns:
        Section bytes
    """
    settings = settings or CodecSettings.default()
    parts: list[bytes] = []

    for index, value in sorted_items(columns):
        column = ColumnMeta.coerce(value)
        ix = fit_index(index, "column index", settings)
        name = _fit_column_name(column.name, settings)
        flag = COLUMN_HIDDEN if column.hidden else COLUMN_VISIBLE
        parts.append(COLUMN_HEADER.pack(utf16_length(name), flag, ix))
        parts.append(encode_text(name))

    data = b"".join(parts)
    logger.debug("Encoded %d columns (%d bytes)", len(parts) // 2, len(data))
    return data


def _utf8_span(reader: ByteReader, units: int) -> int:
    """Byte length of the UTF-8 text holding ``units`` UTF-16 code units.

    Lead bytes are walked without consuming them. Four-byte sequences
    count as two units.
    """
    window = reader.peek(units * 4)
    size = 0
    counted = 0
    while counted < units:
        if size >= len(window):
            raise reader.fail(
                f"Column name of {units} UTF-16 units overruns buffer",
                offset=reader.offset + size,
            )
        lead = window[size]
        if lead < 0x80:
            width, weight = 1, 1
        elif lead >> 5 == 0b110:
            width, weight = 2, 1
        elif lead >> 4 == 0b1110:
            width, weight = 3, 1
        elif lead >> 3 == 0b11110:
            width, weight = 4, 2
        else:
            raise reader.fail(
                f"Invalid UTF-8 lead byte 0x{lead:02x} in column name",
                offset=reader.offset + size,
            )
        size += width
        counted += weight
    if counted != units:
        raise reader.fail("Column name length splits a surrogate pair")
    return size


def read_columns(reader: ByteReader, settings: CodecSettings) -> dict[int, ColumnMeta]:
    """Decode column records until the reader is exhausted."""
    columns: dict[int, ColumnMeta] = {}
    while not reader.at_end():
        start = reader.offset
        units, flag, index = _read_header(reader, COLUMN_HEADER, "column")
        size = _utf8_span(reader, units)
        _check_payload(reader, size, start, "Column name")
        name = reader.read_text(size, settings.text_errors)
        columns[index] = ColumnMeta(name=name, hidden=flag == COLUMN_HIDDEN)
    return columns


def decode_columns(
    data: bytes, settings: CodecSettings | None = None
) -> dict[int, ColumnMeta]:
    """Decode a column metadata section.

    Any flag byte other than 0x00 reads as visible.

    Raises:
        FramingError: If a header or name is truncated or the name bytes
            are not UTF-8 sequences
    """
    return read_columns(ByteReader(data), settings or CodecSettings.default())


# --- Secure notes ---


def encode_secure_notes(
    notes: SecureNotesMap, settings: CodecSettings | None = None
) -> bytes:
    """Encode secure notes.

    An index mapped to None is skipped; a note with empty label and body
    still produces a header-only record.

    Args:
        notes: Notes keyed by index
        settings: Codec settings (defaults if None)

    Returns:
        Section bytes

    Raises:
        ValueOutOfRangeError: If an index, label (over 255 bytes) or note
            (over 65535 bytes) does not fit, in strict mode
    """
    settings = settings or CodecSettings.default()
    parts: list[bytes] = []
    count = 0

    for index, value in sorted_items(notes):
        if value is None:
            continue
        note = SecureNote.coerce(value)
        ix = fit_index(index, "note index", settings)
        label = fit_payload(encode_text(note.label), U8_MAX, "label length", settings)
        body = fit_payload(encode_text(note.note), U16_MAX, "note length", settings)
        parts.append(SECURE_NOTE_HEADER.pack(len(label), len(body), ix))
        parts.append(label)
        parts.append(body)
        count += 1

    data = b"".join(parts)
    logger.debug("Encoded %d secure notes (%d bytes)", count, len(data))
    return data


def read_secure_notes(reader: ByteReader, settings: CodecSettings) -> dict[int, SecureNote]:
    """Decode secure note records until the reader is exhausted."""
    notes: dict[int, SecureNote] = {}
    while not reader.at_end():
        start = reader.offset
        label_len, note_len, index = _read_header(reader, SECURE_NOTE_HEADER, "secure note")
        _check_payload(reader, label_len + note_len, start, "Secure note")
        label = reader.read_text(label_len, settings.text_errors)
        body = reader.read_text(note_len, settings.text_errors)
        notes[index] = SecureNote(label=label, note=body)
    return notes


def decode_secure_notes(
    data: bytes, settings: CodecSettings | None = None
) -> dict[int, SecureNote]:
    """Decode a secure notes section."""
    return read_secure_notes(ByteReader(data), settings or CodecSettings.default())


# --- Logins metadata ---


def encode_logins_metadata(
    metadata: LoginsMetadataMap, settings: CodecSettings | None = None
) -> bytes:
    """Encode per-index login metadata text."""
    settings = settings or CodecSettings.default()
    parts: list[bytes] = []

    for index, text in sorted_items(metadata):
        ix = fit_index(index, "metadata index", settings)
        payload = fit_payload(encode_text(text or ""), U16_MAX, "metadata length", settings)
        parts.append(LOGINS_METADATA_HEADER.pack(len(payload), ix))
        parts.append(payload)

    data = b"".join(parts)
    logger.debug("Encoded %d login metadata entries (%d bytes)", len(parts) // 2, len(data))
    return data


def read_logins_metadata(reader: ByteReader, settings: CodecSettings) -> dict[int, str]:
    """Decode login metadata records until the reader is exhausted."""
    metadata: dict[int, str] = {}
    while not reader.at_end():
        start = reader.offset
        length, index = _read_header(reader, LOGINS_METADATA_HEADER, "login metadata")
        _check_payload(reader, length, start, "Login metadata")
        metadata[index] = reader.read_text(length, settings.text_errors)
    return metadata


def decode_logins_metadata(
    data: bytes, settings: CodecSettings | None = None
) -> dict[int, str]:
    """Decode a logins metadata section."""
    return read_logins_metadata(ByteReader(data), settings or CodecSettings.default())


# --- Login entries ---


def _login_pairs(
    logins: LoginsMap, pairing: LoginPairing
) -> list[tuple[int, int, Credential]]:
    """Expand login entries into (x, y, credential) triples in wire order."""
    pairs: list[tuple[int, int, Credential]] = []
    if pairing == LoginPairing.NESTED:
        for x, value in sorted_items(logins):
            if value is None:
                continue
            entry = LoginEntry.coerce(value)
            for y, credential in sorted_items(entry.entries):
                pairs.append((x, y, Credential.coerce(credential)))
        return pairs

    # Every top-level key is paired with every top-level key, whether or
    # not the entry holds a credential at that row.
    keys = list(sorted_items(logins))
    for x, value in keys:
        entries = LoginEntry.coerce(value).entries
        for y, _ in keys:
            pairs.append((x, y, Credential.coerce(entries.get(y))))
    return pairs


def encode_logins(logins: LoginsMap, settings: CodecSettings | None = None) -> bytes:
    """Encode login credentials.

    With the default NESTED pairing one record is written per credential
    in each entry's ``entries`` mapping. Entry names are not encoded.

    Args:
        logins: Login entries keyed by index
        settings: Codec settings (defaults if None)

    Returns:
        Section bytes
    """
    settings = settings or CodecSettings.default()
    parts: list[bytes] = []
    pairs = _login_pairs(logins, settings.login_pairing)

    for x, y, credential in pairs:
        ix = fit_index(x, "x", settings)
        iy = fit_index(y, "y", settings)
        username = fit_payload(encode_text(credential.username), U16_MAX, "username length", settings)
        password = fit_payload(encode_text(credential.password), U16_MAX, "password length", settings)
        parts.append(LOGIN_HEADER.pack(ix, iy, len(username), len(password)))
        parts.append(username)
        parts.append(password)

    data = b"".join(parts)
    logger.debug(
        "Encoded %d login credentials (%s pairing, %d bytes)",
        len(pairs),
        settings.login_pairing.value,
        len(data),
    )
    return data


def read_logins(reader: ByteReader, settings: CodecSettings) -> dict[int, LoginEntry]:
    """Decode login credential records until the reader is exhausted."""
    logins: dict[int, LoginEntry] = {}
    while not reader.at_end():
        start = reader.offset
        x, y, user_len, pass_len = _read_header(reader, LOGIN_HEADER, "login")
        _check_payload(reader, user_len + pass_len, start, "Login")
        username = reader.read_text(user_len, settings.text_errors)
        password = reader.read_text(pass_len, settings.text_errors)
        entry = logins.setdefault(x, LoginEntry())
        entry.entries[y] = Credential(username=username, password=password)
    return logins


def decode_logins(
    data: bytes, settings: CodecSettings | None = None
) -> dict[int, LoginEntry]:
    """Decode a login entries section.

    Decoded entries have empty names since names are not on the wire.
    """
    return read_logins(ByteReader(data), settings or CodecSettings.default())


# --- Vault names ---


def encode_vault_names(names: VaultNames, settings: CodecSettings | None = None) -> bytes:
    """Encode an ordered list of vault names.

    Falsy items (None, empty mappings) are skipped. A vault id longer
    than 255 bytes loses data; it raises in strict mode and warns
    otherwise.

    Args:
        names: Vault names in display order
        settings: Codec settings (defaults if None)

    Returns:
        Section bytes
    """
    settings = settings or CodecSettings.default()
    parts: list[bytes] = []
    count = 0

    for item in names:
        if not item:
            continue
        vault = VaultName.coerce(item)
        vault_id = fit_payload(bytes(vault.vault_id), U8_MAX, "vault id length", settings)
        name = fit_payload(encode_text(vault.vault_name), U16_MAX, "vault name length", settings)
        parts.append(VAULT_NAME_HEADER.pack(len(vault_id), len(name)))
        parts.append(vault_id)
        parts.append(name)
        count += 1

    data = b"".join(parts)
    logger.debug("Encoded %d vault names (%d bytes)", count, len(data))
    return data


def read_vault_names(reader: ByteReader, settings: CodecSettings) -> list[VaultName]:
    """Decode vault name records until the reader is exhausted."""
    names: list[VaultName] = []
    while not reader.at_end():
        start = reader.offset
        id_len, name_len = _read_header(reader, VAULT_NAME_HEADER, "vault name")
        _check_payload(reader, id_len + name_len, start, "Vault name")
        vault_id = reader.read(id_len)
        name = reader.read_text(name_len, settings.text_errors)
        names.append(VaultName(vault_id=vault_id, vault_name=name))
    return names


def decode_vault_names(
    data: bytes, settings: CodecSettings | None = None
) -> list[VaultName]:
    """Decode a vault names section, preserving order."""
    return read_vault_names(ByteReader(data), settings or CodecSettings.default())
