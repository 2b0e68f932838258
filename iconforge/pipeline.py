"""
One-call conversion from image bytes to an icon container, plus a
Converter that tracks in-flight requests so stale ones can be cancelled.
"""

import logging
import threading
from typing import NamedTuple

from .formats import ContainerFormat
from .icns import encode_icns
from .ico import encode_ico
from .layers import build_layers
from .resample import decode_image

logger = logging.getLogger(__name__)

ENCODERS = {
    ContainerFormat.ICO: encode_ico,
    ContainerFormat.ICNS: encode_icns,
}


class IconBundle(NamedTuple):
    format: ContainerFormat
    data: bytes
    layers: list
    source_size: tuple

    @property
    def extension(self) -> str:
        return self.format.extension

    @property
    def filename(self) -> str:
        return self.format.filename

    @property
    def mime_type(self) -> str:
        return self.format.mime_type


def convert(data: bytes, fmt, workers=None, cancel_event=None) -> IconBundle:
    """Decode data, resize it for fmt and encode the container."""
    fmt = ContainerFormat.parse(fmt)
    with decode_image(data) as img:
        layers = build_layers(img, fmt, workers=workers, cancel_event=cancel_event)
        source_size = img.size
    return IconBundle(fmt, ENCODERS[fmt](layers), layers, source_size)


class Converter:
    """
    Runs conversions keyed by a caller-chosen request id.

    Each request gets its own cancel event, so cancelling one never touches
    another request's layers. With supersede=True, starting a request
    cancels every other one still running (e.g. the user switched format
    before the previous build finished).
    """

    def __init__(self, workers=None, supersede=False):
        self.workers = workers
        self.supersede = supersede
        self._lock = threading.Lock()
        self._inflight = {}

    def convert(self, request_id, data: bytes, fmt) -> IconBundle:
        event = threading.Event()
        with self._lock:
            if request_id in self._inflight:
                raise ValueError(f"Request {request_id!r} is already running")
            if self.supersede:
                for other_id, other in self._inflight.items():
                    logger.debug("Request %r superseded by %r", other_id, request_id)
                    other.set()
            self._inflight[request_id] = event

        try:
            return convert(data, fmt, workers=self.workers, cancel_event=event)
        finally:
            with self._lock:
                self._inflight.pop(request_id, None)

    def cancel(self, request_id) -> bool:
        """Cancel a running request. Returns False if it is not running."""
        with self._lock:
            event = self._inflight.get(request_id)
        if event is None:
            return False
        event.set()
        logger.debug("Request %r cancelled", request_id)
        return True

    def cancel_all(self):
        with self._lock:
            events = list(self._inflight.values())
        for event in events:
            event.set()

    def running(self) -> list:
        with self._lock:
            return list(self._inflight)
