import io

import pytest
from PIL import Image

from iconforge import IconLayer


def png_bytes(img, fmt="PNG"):
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def red_square():
    """512x512 opaque red square."""
    return Image.new("RGBA", (512, 512), (255, 0, 0, 255))


@pytest.fixture
def red_square_png(red_square):
    return png_bytes(red_square)


@pytest.fixture
def wide_image():
    """300x100, left half blue, right half fully transparent."""
    img = Image.new("RGBA", (300, 100), (0, 0, 0, 0))
    img.paste((0, 0, 255, 255), (0, 0, 150, 100))
    return img


@pytest.fixture
def fake_layers():
    """Layers with small, distinct payloads so offsets are easy to check."""
    def make(sizes):
        return [IconLayer(size, bytes([size % 251]) * (size // 8 + 3)) for size in sizes]
    return make
