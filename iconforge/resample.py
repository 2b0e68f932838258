"""
Decode a source image and resample it into square PNG layers.

Non-square sources are stretched to fill the square; aspect ratio is not kept.
"""

# =============================================================================
# Configuration
# =============================================================================
PNG_COMPRESS_LEVEL = 9    # zlib level for layer PNGs (0-9)
# =============================================================================

import io
import logging

from PIL import Image, ImageOps, UnidentifiedImageError

from .errors import DecodeError, EncodeError, ResizeError, UnsupportedInput

logger = logging.getLogger(__name__)

RESAMPLE_FILTER = Image.Resampling.LANCZOS

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
JPEG_MAGIC = b"\xff\xd8\xff"

# Pillow modes holding 16-bit (or wider) single-channel samples
WIDE_MODES = ("I;16", "I;16B", "I;16L", "I;16N", "I")


def sniff_format(data: bytes):
    """Return 'PNG', 'JPEG' or 'WEBP' from the magic bytes, or None."""
    if data.startswith(PNG_MAGIC):
        return "PNG"
    if data.startswith(JPEG_MAGIC):
        return "JPEG"
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "WEBP"
    return None


def to_rgba(img: Image.Image) -> Image.Image:
    """Convert any decoded mode to RGBA, scaling 16-bit samples to 8-bit."""
    if img.mode in WIDE_MODES:
        # convert() would clip 16-bit greys to white instead of scaling them
        img = img.convert("I").point(lambda v: v * (1 / 257) + 0.5).convert("L")
    return img.convert("RGBA")


def decode_image(data: bytes) -> Image.Image:
    """Decode PNG/JPEG/WEBP bytes into a fully loaded, upright RGBA image."""
    kind = sniff_format(data)
    if kind is None:
        raise UnsupportedInput("Source is not a PNG, JPEG or WEBP image")

    try:
        src = Image.open(io.BytesIO(data), formats=[kind])
    except UnidentifiedImageError as e:
        raise UnsupportedInput(f"Could not identify {kind} image: {e}") from e
    except (OSError, EOFError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Failed to open {kind} image: {e}") from e

    try:
        with src:
            # Both steps force the pixel load, so truncated data fails here
            upright = ImageOps.exif_transpose(src)
            img = to_rgba(upright)
    except (OSError, EOFError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Failed to decode {kind} image: {e}") from e

    logger.debug("Decoded %s source %dx%d", kind, img.width, img.height)
    return img


def resize(img: Image.Image, size: int) -> bytes:
    """Resample img to size x size and return it PNG encoded."""
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise ResizeError(f"Edge length must be a positive integer, got {size!r}")

    if img.mode != "RGBA":
        img = to_rgba(img)

    try:
        resized = img.resize((size, size), RESAMPLE_FILTER)
    except (OSError, ValueError, MemoryError) as e:
        raise ResizeError(f"Failed to resize to {size}x{size}: {e}") from e

    buf = io.BytesIO()
    try:
        resized.save(buf, format="PNG", compress_level=PNG_COMPRESS_LEVEL)
    except (OSError, ValueError) as e:
        raise EncodeError(f"Failed to encode {size}x{size} PNG: {e}") from e
    finally:
        resized.close()

    data = buf.getvalue()
    logger.debug("Resized %dx%d: %d bytes", size, size, len(data))
    return data
