"""
Record codec.

Encodes ReviewRecord into the fixed-capacity segment layout and back:

    is_initialized: bool | title: string | rating: u8 | description: string | location: string

The encoding is zero-padded to the segment capacity. Decoding stops at a
false is_initialized flag and returns the default record, so a zeroed or
never-created segment decodes instead of failing. Bytes after the last
field are ignored.
"""

import logging

import config.settings as settings
from src.codec.wire import WireReader, WireWriter
from src.models.errors import RecordTooLarge
from src.models.review import ReviewRecord

logger = logging.getLogger(__name__)


def encoded_size(record: ReviewRecord) -> int:
    """Length of the canonical encoding, without padding."""
    return len(_encode_fields(record))


def encode(record: ReviewRecord, capacity: int = settings.ACCOUNT_LEN) -> bytes:
    """
    Serialize a record into a buffer of exactly `capacity` bytes.

    Raises:
        RecordTooLarge: If the canonical encoding does not fit
    """
    payload = _encode_fields(record)
    if len(payload) > capacity:
        raise RecordTooLarge(
            f"Encoded review is {len(payload)} bytes, segment holds {capacity}"
        )
    return payload + bytes(capacity - len(payload))


def decode(data: bytes) -> ReviewRecord:
    """
    Deserialize a record from a segment buffer.

    Raises:
        CodecError: If the buffer is structurally corrupt
    """
    reader = WireReader(data)
    if not reader.read_bool():
        # Fields of an uninitialized segment are never trusted
        return ReviewRecord()

    record = ReviewRecord(
        is_initialized=True,
        title=reader.read_string(),
        rating=reader.read_u8(),
        description=reader.read_string(),
        location=reader.read_string(),
    )
    logger.debug(f"Decoded review '{record.title}' ({reader.remaining} trailing bytes)")
    return record


def write_into(record: ReviewRecord, buffer: bytearray) -> None:
    """Encode a record over the whole of a mutable segment buffer."""
    buffer[:] = encode(record, capacity=len(buffer))


def _encode_fields(record: ReviewRecord) -> bytes:
    return (
        WireWriter()
        .write_bool(record.is_initialized)
        .write_string(record.title)
        .write_u8(record.rating)
        .write_string(record.description)
        .write_string(record.location)
        .getvalue()
    )


# Design Rationale and Trade-offs:
#
# 1. Why stop decoding at a false is_initialized flag?
#    - Fields behind a false flag are meaningless
#    - Zeroed and leftover bytes both decode to the default record
#    - Trade-off: Stale bytes in an uninitialized segment are not inspected
#
# 2. Why pad every encoding to the segment capacity?
#    - The segment size never changes after allocation
#    - Shorter updates overwrite the tail of longer earlier ones with zeros
#    - Trade-off: Every write touches the full segment
#
# 3. Why u32 length prefixes for strings?
#    - Fixed-width prefix, no varint parsing
#    - Trade-off: 4 bytes per string even for short values
