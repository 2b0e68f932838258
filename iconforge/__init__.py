"""Convert a raster image into multi-size .ico and .icns icon containers."""

from .errors import (
    Cancelled,
    DecodeError,
    EncodeError,
    IconError,
    ResizeError,
    UnmappedSize,
    UnsupportedInput,
)
from .formats import ICNS_TYPES, SIZE_TABLE, ContainerFormat
from .icns import encode_icns, read_icns_chunks
from .ico import encode_ico, read_ico_directory
from .layers import IconLayer, build_layers
from .pipeline import Converter, IconBundle, convert
from .resample import decode_image, resize

__version__ = "1.0.0"
