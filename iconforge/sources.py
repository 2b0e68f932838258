"""
Read source image bytes from a local file or an http(s) URL.
"""

# =============================================================================
# Configuration
# =============================================================================
DEFAULT_TIMEOUT = 15      # seconds for URL fetches
# =============================================================================

from pathlib import Path
from urllib.parse import urlparse

import requests

from .errors import DecodeError


def is_url(location) -> bool:
    return urlparse(str(location)).scheme in ("http", "https")


def read_source(location, timeout=DEFAULT_TIMEOUT) -> bytes:
    """Return the raw bytes at location (path or URL)."""
    if is_url(location):
        try:
            r = requests.get(str(location), timeout=timeout)
            r.raise_for_status()
        except requests.RequestException as e:
            raise DecodeError(f"Failed to fetch {location}: {e}") from e
        return r.content

    path = Path(location).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    return path.read_bytes()
