import io
import threading

import pytest
from PIL import Image

from iconforge import Cancelled, ContainerFormat, IconLayer, ResizeError, build_layers
from iconforge import layers as layers_mod


@pytest.mark.parametrize("fmt", list(ContainerFormat))
def test_one_layer_per_size(red_square, fmt):
    layers = build_layers(red_square, fmt)
    assert [layer.size for layer in layers] == list(fmt.sizes)
    for layer in layers:
        img = Image.open(io.BytesIO(layer.data))
        assert img.format == "PNG"
        assert img.size == (layer.size, layer.size)


def test_icns_scenario_sizes(red_square):
    layers = build_layers(red_square, "icns")
    assert [layer.size for layer in layers] == [1024, 512, 256, 128, 64, 32, 16]


def test_parallel_matches_sequential(red_square):
    sequential = build_layers(red_square, ContainerFormat.ICO)
    parallel = build_layers(red_square, ContainerFormat.ICO, workers=4)
    assert parallel == sequential


def test_source_not_modified(wide_image):
    before = wide_image.tobytes()
    build_layers(wide_image, ContainerFormat.ICNS, workers=3)
    assert wide_image.size == (300, 100)
    assert wide_image.tobytes() == before


def test_layer_filename():
    assert IconLayer(32, b"").filename == "icon_32x32.png"


def failing_resize(bad_size):
    real = layers_mod.resize

    def resize(img, size):
        if size == bad_size:
            raise ResizeError(f"boom at {size}")
        return real(img, size)
    return resize


@pytest.mark.parametrize("workers", [None, 4])
def test_failed_resize_aborts_build(red_square, monkeypatch, workers):
    monkeypatch.setattr(layers_mod, "resize", failing_resize(48))
    with pytest.raises(ResizeError, match="boom at 48"):
        build_layers(red_square, ContainerFormat.ICO, workers=workers)


@pytest.mark.parametrize("workers", [None, 4])
def test_cancel_before_start(red_square, workers):
    event = threading.Event()
    event.set()
    with pytest.raises(Cancelled):
        build_layers(red_square, ContainerFormat.ICNS, workers=workers, cancel_event=event)


def test_cancel_mid_build(red_square, monkeypatch):
    event = threading.Event()
    real = layers_mod.resize
    seen = []

    def resize(img, size):
        seen.append(size)
        if size == 256:
            event.set()
        return real(img, size)

    monkeypatch.setattr(layers_mod, "resize", resize)
    with pytest.raises(Cancelled):
        build_layers(red_square, ContainerFormat.ICNS, cancel_event=event)
    assert seen == [1024, 512, 256]
