"""
Windows .ico container with PNG-compressed entries.

Layout (little-endian):
  ICONDIR        reserved=0 (2), type=1 (2), count (2)
  ICONDIRENTRY   width, height, colors=0, reserved=0, planes=1, bpp=32,
                 size (4), offset (4)   -- 16 bytes, one per image
  payloads       PNG data back to back, in directory order
"""

import logging
import struct
from typing import NamedTuple

from .errors import DecodeError, EncodeError

logger = logging.getLogger(__name__)

HEADER = struct.Struct("<HHH")
ENTRY = struct.Struct("<BBBBHHII")


class IcoEntry(NamedTuple):
    width: int
    height: int
    colors: int
    planes: int
    bpp: int
    size: int
    offset: int


def encode_ico(layers) -> bytes:
    """Pack IconLayers into an .ico blob, one PNG entry per layer."""
    if not layers:
        raise EncodeError("Cannot build an ICO with no images")

    try:
        header = HEADER.pack(0, 1, len(layers))

        # Header is 6 bytes, each entry is 16 bytes
        data_offset = HEADER.size + ENTRY.size * len(layers)

        entries = []
        for layer in layers:
            w = layer.size if layer.size < 256 else 0  # 0 means 256 in ICO format
            h = w
            entries.append(ENTRY.pack(w, h, 0, 0, 1, 32, len(layer.data), data_offset))
            data_offset += len(layer.data)
    except struct.error as e:
        raise EncodeError(f"ICO field overflow: {e}") from e

    blob = b"".join([header, *entries, *(layer.data for layer in layers)])
    logger.info("Encoded ICO: %d images, %d bytes", len(layers), len(blob))
    return blob


def read_ico_directory(blob: bytes) -> list:
    """Parse the header and directory of an .ico blob into IcoEntry tuples."""
    if len(blob) < HEADER.size:
        raise DecodeError("ICO blob shorter than its header")

    reserved, kind, count = HEADER.unpack_from(blob, 0)
    if reserved != 0 or kind != 1:
        raise DecodeError(f"Not an ICO header (reserved={reserved}, type={kind})")

    end = HEADER.size + ENTRY.size * count
    if len(blob) < end:
        raise DecodeError(f"ICO directory truncated: {count} entries need {end} bytes")

    entries = []
    for i in range(count):
        w, h, colors, _, planes, bpp, size, offset = ENTRY.unpack_from(blob, HEADER.size + ENTRY.size * i)
        if offset + size > len(blob):
            raise DecodeError(f"ICO entry {i} runs past end of file")
        entries.append(IcoEntry(w or 256, h or 256, colors, planes, bpp, size, offset))
    return entries
