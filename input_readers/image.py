"""
IMAGE READER
------------
Download invoice files and convert image bytes to data URLs for Vision API usage.
"""

from __future__ import annotations

import base64
import mimetypes
from urllib.parse import urlparse

import httpx

from config import DOWNLOAD_TIMEOUT_SECONDS


def guess_mime_type(url: str, content_type: str | None = None) -> str:
    """
    Resolve the MIME type of a downloaded file.

    Args:
        url: Source URL (its path extension is the fallback hint)
        content_type: Content-Type header from the response, if any

    Returns:
        MIME type string, "image/png" when nothing better is known
    """
    if content_type:
        mime_type = content_type.split(";", 1)[0].strip().lower()
        if mime_type and mime_type != "application/octet-stream":
            return mime_type

    mime_type, _ = mimetypes.guess_type(urlparse(url).path)
    return mime_type or "image/png"


def download_file(url: str, timeout: float = DOWNLOAD_TIMEOUT_SECONDS) -> tuple[str, bytes]:
    """
    Fetch a file over HTTP.

    Returns:
        Tuple of (mime_type, content)

    Raises:
        httpx.HTTPError: on network failure or a non-2xx status
    """
    response = httpx.get(url, timeout=timeout, follow_redirects=True)
    response.raise_for_status()
    return guess_mime_type(url, response.headers.get("content-type")), response.content


def bytes_to_data_url(data: bytes, mime_type: str = "image/png") -> str:
    """Return data:<mime>;base64,<payload> for API calls."""
    encoded = base64.b64encode(data).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"
