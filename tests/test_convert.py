import threading
import time

import pytest

from iconforge import (
    Cancelled,
    ContainerFormat,
    Converter,
    UnsupportedInput,
    convert,
    read_icns_chunks,
    read_ico_directory,
)
from iconforge import layers as layers_mod

from .conftest import png_bytes


def test_convert_ico(red_square_png):
    bundle = convert(red_square_png, "ico")
    assert bundle.format is ContainerFormat.ICO
    assert bundle.filename == "icon.ico"
    assert bundle.extension == ".ico"
    assert bundle.mime_type == "image/x-icon"
    assert bundle.data[:6] == b"\x00\x00\x01\x00\x0e\x00"
    entries = read_ico_directory(bundle.data)
    assert [e.size for e in entries] == [len(layer.data) for layer in bundle.layers]


def test_convert_icns(red_square_png):
    bundle = convert(red_square_png, ContainerFormat.ICNS, workers=3)
    assert bundle.filename == "icon.icns"
    assert len(bundle.layers) == 7
    assert len(read_icns_chunks(bundle.data)) == 11


def test_convert_rejects_unsupported():
    with pytest.raises(UnsupportedInput):
        convert(b"%PDF-1.4", "ico")


def test_converter_runs_and_forgets(red_square_png):
    conv = Converter()
    bundle = conv.convert("req-1", red_square_png, "icns")
    assert len(bundle.layers) == 7
    assert conv.running() == []
    assert conv.cancel("req-1") is False


def blocking_resize(started, release):
    """Resize stand-in that parks the first call until release is set."""
    real = layers_mod.resize

    def resize(img, size):
        if not started.is_set():
            started.set()
            release.wait(5)
        return real(img, size)
    return resize


def run_in_thread(fn, *args):
    result = {}

    def target():
        try:
            result["value"] = fn(*args)
        except Exception as e:
            result["error"] = e

    t = threading.Thread(target=target, daemon=True)
    t.start()
    return t, result


def test_cancel_stale_request(red_square_png, monkeypatch):
    started, release = threading.Event(), threading.Event()
    monkeypatch.setattr(layers_mod, "resize", blocking_resize(started, release))

    conv = Converter()
    t, result = run_in_thread(conv.convert, "old", red_square_png, "ico")
    assert started.wait(5)
    assert conv.running() == ["old"]

    assert conv.cancel("old") is True
    release.set()
    t.join(5)
    assert isinstance(result.get("error"), Cancelled)
    assert conv.running() == []

    # A fresh request is unaffected by the cancelled one
    bundle = conv.convert("new", red_square_png, "icns")
    assert [layer.size for layer in bundle.layers] == list(ContainerFormat.ICNS.sizes)


def test_supersede_cancels_previous(red_square_png, monkeypatch):
    started, release = threading.Event(), threading.Event()
    monkeypatch.setattr(layers_mod, "resize", blocking_resize(started, release))

    conv = Converter(supersede=True)
    t, result = run_in_thread(conv.convert, 1, red_square_png, "ico")
    assert started.wait(5)

    # Starting request 2 cancels request 1; release it once 2 is registered
    t2, result2 = run_in_thread(conv.convert, 2, red_square_png, "icns")
    deadline = time.monotonic() + 5
    while 2 not in conv.running() and time.monotonic() < deadline:
        time.sleep(0.01)
    release.set()
    t.join(5)
    t2.join(30)

    assert isinstance(result.get("error"), Cancelled)
    assert len(result2["value"].layers) == 7


def test_duplicate_request_id(red_square_png, monkeypatch):
    started, release = threading.Event(), threading.Event()
    monkeypatch.setattr(layers_mod, "resize", blocking_resize(started, release))

    conv = Converter()
    t, _ = run_in_thread(conv.convert, "same", red_square_png, "ico")
    assert started.wait(5)
    try:
        with pytest.raises(ValueError):
            conv.convert("same", red_square_png, "ico")
    finally:
        release.set()
        t.join(30)


def test_bundle_reports_source_size(wide_image):
    bundle = convert(png_bytes(wide_image), "ico")
    assert bundle.source_size == (300, 100)
