"""
Binary encoding for category lists.

Layout: a little-endian uint16 count followed by ``count``
little-endian uint16 category codes.
"""

import struct
from collections.abc import Sequence

from what2play.errors import CodecError

UINT16_MAX = 0xFFFF
_HEADER = struct.Struct("<H")


def encode_categories(categories: Sequence[int]) -> bytes:
    """
    Encode category codes for storage.

    Raises:
        CodecError: If the count or any code doesn't fit in an unsigned 16-bit integer
    """
    if len(categories) > UINT16_MAX:
        raise CodecError(f"too many categories to encode: {len(categories)}")
    for category in categories:
        if not 0 <= category <= UINT16_MAX:
            raise CodecError(f"category code out of range: {category}")

    return struct.pack(f"<H{len(categories)}H", len(categories), *categories)


def decode_categories(encoded: bytes) -> list[int]:
    """
    Decode stored category codes.

    A header with nothing after it decodes to an empty list.

    Raises:
        CodecError: If the buffer is truncated or its length disagrees with the count
    """
    if len(encoded) < _HEADER.size:
        raise CodecError(f"encoded categories too short: {len(encoded)} bytes")

    (count,) = _HEADER.unpack_from(encoded)
    payload = encoded[_HEADER.size :]

    if not payload:
        return []
    if len(payload) != count * 2:
        raise CodecError(
            f"encoded categories declare {count} codes but carry {len(payload)} bytes"
        )

    return list(struct.unpack(f"<{count}H", payload))
