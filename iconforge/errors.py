"""
Exception types raised while converting an image into an icon container.

Everything derives from IconError so callers can catch one type.
"""


class IconError(Exception):
    """Base class for all conversion failures."""


class UnsupportedInput(IconError):
    """Source bytes are not a PNG, JPEG or WEBP image."""


class DecodeError(IconError):
    """Source bytes looked acceptable but could not be read as pixels."""


class ResizeError(IconError):
    """Resampling to a target edge length failed."""


class EncodeError(IconError):
    """Writing a layer PNG or a container blob failed."""


class UnmappedSize(EncodeError):
    """A layer size has no ICNS type code."""

    def __init__(self, size):
        super().__init__(f"No ICNS type code for {size}x{size} layer")
        self.size = size


class Cancelled(IconError):
    """The build was cancelled before it finished."""
