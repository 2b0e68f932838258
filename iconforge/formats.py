"""
Container formats and their fixed size / type code tables.
"""

from enum import Enum
from types import MappingProxyType

class ContainerFormat(Enum):
    ICO = ("ico", "image/x-icon")
    ICNS = ("icns", "image/icns")

    def __init__(self, ext, mime_type):
        self.ext = ext
        self.mime_type = mime_type

    @property
    def extension(self) -> str:
        return f".{self.ext}"

    @property
    def filename(self) -> str:
        return f"icon.{self.ext}"

    @property
    def sizes(self) -> tuple:
        return SIZE_TABLE[self]

    @classmethod
    def parse(cls, value):
        """Accept 'ico', 'ICNS', '.ico' etc. Raises ValueError otherwise."""
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower().lstrip(".")
        for fmt in cls:
            if fmt.ext == name:
                return fmt
        raise ValueError(f"Unknown icon format: {value!r} (expected ico or icns)")

# Windows sizes cover the standard set plus the high-DPI shell variants
SIZE_TABLE = MappingProxyType({
    ContainerFormat.ICO: (256, 96, 80, 72, 64, 60, 48, 40, 36, 32, 30, 24, 20, 16),
    ContainerFormat.ICNS: (1024, 512, 256, 128, 64, 32, 16),
})

# Retina chunk types reuse the pixels of the nominal size they double
ICNS_TYPES = MappingProxyType({
    1024: (b"ic10",),
    512: (b"ic09", b"ic14"),  # 512x512, 256x256@2x
    256: (b"ic08", b"ic13"),  # 256x256, 128x128@2x
    128: (b"ic07",),
    64: (b"icp6", b"ic12"),   # 64x64, 32x32@2x
    32: (b"icp5", b"ic11"),   # 32x32, 16x16@2x
    16: (b"icp4",),
})

def check_icns_types(sizes, types):
    """Every ICNS size must map to at least one type code."""
    missing = [size for size in sizes if not types.get(size)]
    if missing:
        raise RuntimeError(f"ICNS sizes without a type code: {missing}")

check_icns_types(SIZE_TABLE[ContainerFormat.ICNS], ICNS_TYPES)
