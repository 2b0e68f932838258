"""
macOS .icns container built from PNG payloads.

Layout (big-endian):
  'icns' + total file size (4)
  per chunk: type code (4) + chunk size incl. this 8 byte header (4) + PNG
"""

import logging
import struct
from typing import NamedTuple

from .errors import DecodeError, EncodeError, UnmappedSize
from .formats import ICNS_TYPES

logger = logging.getLogger(__name__)

MAGIC = b"icns"
HEADER = struct.Struct(">4sI")


class IcnsChunk(NamedTuple):
    type_code: bytes
    data: bytes


def expand_chunks(layers, strict=True) -> list:
    """Map each layer to its chunk(s); a retina type shares the layer's PNG."""
    chunks = []
    for layer in layers:
        types = ICNS_TYPES.get(layer.size)
        if not types:
            if strict:
                raise UnmappedSize(layer.size)
            logger.warning("Skipping %dx%d layer: no ICNS type code", layer.size, layer.size)
            continue
        for type_code in types:
            chunks.append(IcnsChunk(type_code, layer.data))
    return chunks


def encode_icns(layers, strict=True) -> bytes:
    """
    Pack IconLayers into an .icns blob.

    Sizes missing from ICNS_TYPES raise UnmappedSize, or are dropped with a
    warning when strict is False.
    """
    chunks = expand_chunks(layers, strict=strict)

    total = HEADER.size + sum(HEADER.size + len(c.data) for c in chunks)

    parts = []
    try:
        parts.append(HEADER.pack(MAGIC, total))
        for c in chunks:
            parts.append(HEADER.pack(c.type_code, HEADER.size + len(c.data)))
            parts.append(c.data)
    except struct.error as e:
        raise EncodeError(f"ICNS field overflow: {e}") from e

    blob = b"".join(parts)
    if len(blob) != total:
        raise EncodeError(f"ICNS size mismatch: header says {total}, wrote {len(blob)}")

    logger.info("Encoded ICNS: %d chunks, %d bytes", len(chunks), len(blob))
    return blob


def read_icns_chunks(blob: bytes) -> list:
    """Walk an .icns blob back into IcnsChunk tuples."""
    if len(blob) < HEADER.size:
        raise DecodeError("ICNS blob shorter than its header")

    magic, total = HEADER.unpack_from(blob, 0)
    if magic != MAGIC:
        raise DecodeError(f"Bad ICNS magic: {magic!r}")
    if total != len(blob):
        raise DecodeError(f"ICNS size field {total} != blob length {len(blob)}")

    chunks = []
    pos = HEADER.size
    while pos < total:
        if pos + HEADER.size > total:
            raise DecodeError(f"Truncated ICNS chunk header at offset {pos}")
        type_code, length = HEADER.unpack_from(blob, pos)
        if length < HEADER.size or pos + length > total:
            raise DecodeError(f"ICNS chunk {type_code!r} at offset {pos} has bad length {length}")
        chunks.append(IcnsChunk(type_code, blob[pos + HEADER.size:pos + length]))
        pos += length
    return chunks
