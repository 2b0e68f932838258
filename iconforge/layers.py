"""
Build the ordered set of resized layers for a container format.
"""

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import NamedTuple

from .errors import Cancelled
from .formats import ContainerFormat
from .resample import resize

logger = logging.getLogger(__name__)


class IconLayer(NamedTuple):
    size: int
    data: bytes

    @property
    def filename(self) -> str:
        return f"icon_{self.size}x{self.size}.png"


def _check_cancelled(cancel_event):
    if cancel_event is not None and cancel_event.is_set():
        raise Cancelled("Layer build cancelled")


def _resize_one(img, size, cancel_event):
    _check_cancelled(cancel_event)
    return IconLayer(size, resize(img, size))


def build_layers(img, fmt, workers=None, cancel_event=None) -> list:
    """
    Resize img to every size the format needs, in table order.

    Args:
        img: Decoded RGBA source image. Read only; never modified.
        fmt: ContainerFormat (or a name ContainerFormat.parse accepts).
        workers: Thread count for parallel resizing. None or 1 = sequential.
        cancel_event: Optional threading.Event; once set the build raises
            Cancelled.

    Returns:
        List of IconLayer, one per required size. Any failure raises and no
        partial list is returned.
    """
    fmt = ContainerFormat.parse(fmt)
    sizes = fmt.sizes

    # Resizes from several threads must not race on Pillow's lazy load
    img.load()

    if not workers or workers <= 1:
        layers = [_resize_one(img, size, cancel_event) for size in sizes]
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(_resize_one, img, size, cancel_event) for size in sizes]
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)
            for f in pending:
                f.cancel()
            for f in futures:
                if f in done and f.exception() is not None:
                    raise f.exception()
            # Collect in submission order so the result follows the size table
            layers = [f.result() for f in futures]

    _check_cancelled(cancel_event)
    logger.debug("Built %d %s layers", len(layers), fmt.name)
    return layers
