"""
KSUID - K-Sortable Unique Identifier.

Time-sortable, globally unique IDs without coordination.
Format: 4 bytes timestamp + 16 bytes random = 27 char base62 string.
"""

import struct
from datetime import datetime, timezone

from codec.alphabet import CHARS62, decode, encode
from core.errors import DecodeError, InvalidArgument
from utils.entropy import token_bytes
from utils.timestamp import as_utc

# KSUID epoch: 2014-05-13
KSUID_EPOCH = 1400000000
KSUID_LENGTH = 27
PAYLOAD_BYTES = 16


def generate_ksuid(time=None):
    """Generate a 27-character sortable unique ID."""
    seconds = int(as_utc(time).timestamp()) if time else int(datetime.now(timezone.utc).timestamp())
    try:
        ts_bytes = struct.pack(">I", seconds - KSUID_EPOCH)
    except struct.error as exc:
        raise InvalidArgument("KSUID time must fall between 2014-05-13 and 2150-06-19",
                              field="time", value=str(time), cause=exc) from exc
    n = int.from_bytes(ts_bytes + token_bytes(PAYLOAD_BYTES), byteorder="big")
    return encode(n, 62).rjust(KSUID_LENGTH, CHARS62[0])


def parse_ksuid(text):
    """Split a KSUID into its creation time and random payload."""
    if len(text) != KSUID_LENGTH:
        raise DecodeError(f"a KSUID has {KSUID_LENGTH} characters", text=text)
    try:
        raw = decode(text, 62).to_bytes(4 + PAYLOAD_BYTES, byteorder="big")
    except OverflowError as exc:
        raise DecodeError("value too large for a KSUID", text=text, cause=exc) from exc
    (offset,) = struct.unpack(">I", raw[:4])
    return datetime.fromtimestamp(KSUID_EPOCH + offset, tz=timezone.utc), raw[4:]
