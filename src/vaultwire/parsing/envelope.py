"""Global sync envelope.

The envelope carries five sections in a fixed order. Region sizes are
5-byte big-endian fields, so a single region may hold up to 2^40 - 1
bytes:

    [size: spreadsheet][size: columns][size: secure notes]
    [spreadsheet][columns][secure notes]
    [size: logins metadata][logins metadata]
    [login cells]

The login cell grid is the last region and has no size field; it runs to
the end of the buffer. Any new region must keep an unsized region last or
be given its own size field.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from vaultwire.models import (
    ColumnsMap,
    LoginsMetadataMap,
    SecureNotesMap,
    SpreadsheetMap,
    SyncBundle,
)
from vaultwire.settings import CodecSettings

from .primitives import SIZE_FIELD_LENGTH, ByteReader, pack_u40
from .sections import (
    encode_columns,
    encode_logins_metadata,
    encode_secure_notes,
    encode_spreadsheet,
    read_columns,
    read_logins_metadata,
    read_secure_notes,
    read_spreadsheet,
)

logger = logging.getLogger(__name__)

# Three leading size fields plus the logins metadata size field
ENVELOPE_OVERHEAD = 4 * SIZE_FIELD_LENGTH

REGION_SPREADSHEET = "spreadsheet"
REGION_COLUMNS = "columns"
REGION_SECURE_NOTES = "secure notes"
REGION_LOGINS_METADATA = "logins metadata"
REGION_LOGINS = "logins"


@dataclass(slots=True)
class SyncRegions:
    """Raw section bytes of a global sync envelope.

    Offsets are the positions of each region within the envelope and are
    used to report absolute offsets in decode errors.
    """

    spreadsheet: bytes
    columns: bytes
    secure_notes: bytes
    logins_metadata: bytes
    logins: bytes
    offsets: tuple[int, int, int, int, int] = (0, 0, 0, 0, 0)


class GlobalSyncReader:
    """Reader for global sync envelopes."""

    def __init__(self, data: bytes, settings: CodecSettings | None = None) -> None:
        """Initialize reader with envelope data.

        Args:
            data: Complete envelope bytes
            settings: Codec settings (defaults if None)
        """
        self._reader = ByteReader(data, region="envelope")
        self._settings = settings or CodecSettings.default()

    def split(self) -> SyncRegions:
        """Cut the envelope into its five regions without decoding them.

        Raises:
            FramingError: If a size field is truncated or a declared size
                runs past the end of the buffer
        """
        reader = self._reader
        leading_names = (REGION_SPREADSHEET, REGION_COLUMNS, REGION_SECURE_NOTES)
        sizes = [self._read_size(name) for name in leading_names]

        offsets: list[int] = []
        leading: list[bytes] = []
        for name, size in zip(leading_names, sizes):
            offsets.append(reader.offset)
            leading.append(self._read_region(name, size))

        metadata_size = self._read_size(REGION_LOGINS_METADATA)
        offsets.append(reader.offset)
        metadata = self._read_region(REGION_LOGINS_METADATA, metadata_size)

        offsets.append(reader.offset)
        logins = reader.read_rest()

        return SyncRegions(
            spreadsheet=leading[0],
            columns=leading[1],
            secure_notes=leading[2],
            logins_metadata=metadata,
            logins=logins,
            offsets=(offsets[0], offsets[1], offsets[2], offsets[3], offsets[4]),
        )

    def decode(self) -> SyncBundle:
        """Decode every region of the envelope.

        Returns:
            SyncBundle with all five sections

        Raises:
            FramingError: If the envelope or any region is malformed; the
                error names the region and the absolute offset
        """
        regions = self.split()
        settings = self._settings
        spreadsheet_at, columns_at, notes_at, metadata_at, logins_at = regions.offsets

        bundle = SyncBundle(
            spreadsheet=read_spreadsheet(
                ByteReader(regions.spreadsheet, REGION_SPREADSHEET, spreadsheet_at),
                settings,
            ),
            columns=read_columns(
                ByteReader(regions.columns, REGION_COLUMNS, columns_at), settings
            ),
            secure_notes=read_secure_notes(
                ByteReader(regions.secure_notes, REGION_SECURE_NOTES, notes_at),
                settings,
            ),
            logins_metadata=read_logins_metadata(
                ByteReader(regions.logins_metadata, REGION_LOGINS_METADATA, metadata_at),
                settings,
            ),
            logins=read_spreadsheet(
                ByteReader(regions.logins, REGION_LOGINS, logins_at), settings
            ),
        )
        logger.debug(
            "Decoded global sync envelope (%d bytes)",
            logins_at + len(regions.logins),
        )
        return bundle

    def _read_size(self, region: str) -> int:
        """Read the 5-byte size field of a region."""
        reader = self._reader
        if reader.remaining < SIZE_FIELD_LENGTH:
            raise reader.fail(
                f"Truncated size field for {region} region: "
                f"{reader.remaining} of {SIZE_FIELD_LENGTH} bytes"
            )
        return reader.read_u40()

    def _read_region(self, region: str, size: int) -> bytes:
        """Read a sized region, failing when it overruns the buffer."""
        reader = self._reader
        if size > reader.remaining:
            raise reader.fail(
                f"{region} region of {size} bytes overruns buffer "
                f"({reader.remaining} bytes remain)"
            )
        return reader.read(size)


class GlobalSyncWriter:
    """Writer for global sync envelopes."""

    def __init__(self, settings: CodecSettings | None = None) -> None:
        self._settings = settings or CodecSettings.default()

    def encode(
        self,
        spreadsheet: SpreadsheetMap,
        columns: ColumnsMap,
        secure_notes: SecureNotesMap,
        logins_metadata: LoginsMetadataMap,
        logins: SpreadsheetMap,
    ) -> bytes:
        """Encode the five sections and frame them into one envelope.

        Args:
            spreadsheet: Spreadsheet cells
            columns: Column metadata
            secure_notes: Secure notes
            logins_metadata: Login metadata text
            logins: Login cell grid (encoded with the spreadsheet codec)

        Returns:
            Envelope bytes of length 20 plus the sum of the section lengths

        Raises:
            ValueOutOfRangeError: If a section value does not fit its field
                in strict mode, or a region exceeds 2^40 - 1 bytes
        """
        settings = self._settings
        spreadsheet_bytes = encode_spreadsheet(spreadsheet, settings)
        columns_bytes = encode_columns(columns, settings)
        secure_notes_bytes = encode_secure_notes(secure_notes, settings)
        logins_metadata_bytes = encode_logins_metadata(logins_metadata, settings)
        logins_bytes = encode_spreadsheet(logins, settings)

        data = b"".join([
            pack_u40(len(spreadsheet_bytes)),
            pack_u40(len(columns_bytes)),
            pack_u40(len(secure_notes_bytes)),
            spreadsheet_bytes,
            columns_bytes,
            secure_notes_bytes,
            pack_u40(len(logins_metadata_bytes)),
            logins_metadata_bytes,
            logins_bytes,
        ])

        logger.debug(
            "Encoded global sync envelope (%d bytes: %d/%d/%d/%d/%d)",
            len(data),
            len(spreadsheet_bytes),
            len(columns_bytes),
            len(secure_notes_bytes),
            len(logins_metadata_bytes),
            len(logins_bytes),
        )
        return data


def encode_global_sync(
    spreadsheet: SpreadsheetMap,
    columns: ColumnsMap,
    secure_notes: SecureNotesMap,
    logins_metadata: LoginsMetadataMap,
    logins: SpreadsheetMap,
    settings: CodecSettings | None = None,
) -> bytes:
    """Convenience function to encode a global sync envelope.

    Args:
        spreadsheet: Spreadsheet cells
        columns: Column metadata
        secure_notes: Secure notes
        logins_metadata: Login metadata text
        logins: Login cell grid
        settings: Codec settings (defaults if None)

    Returns:
        Envelope bytes
    """
    writer = GlobalSyncWriter(settings)
    return writer.encode(spreadsheet, columns, secure_notes, logins_metadata, logins)


def decode_global_sync(
    data: bytes, settings: CodecSettings | None = None
) -> SyncBundle:
    """Convenience function to decode a global sync envelope.

    Args:
        data: Envelope bytes
        settings: Codec settings (defaults if None)

    Returns:
        SyncBundle with all five sections
    """
    return GlobalSyncReader(data, settings).decode()


def split_global_sync(data: bytes) -> SyncRegions:
    """Convenience function to split an envelope into raw region bytes."""
    return GlobalSyncReader(data).split()
