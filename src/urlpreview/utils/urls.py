"""URL normalization and markup escaping helpers."""

from __future__ import annotations

import html
import re
from urllib.parse import urlsplit, urlunsplit

from urlpreview.errors import InvalidTargetURL

_HTTP_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_ANY_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


def normalize_target_url(raw: str) -> str:
    """Turn free-form user input into an absolute http(s) URL.

    A value without a scheme is treated as a bare host and gets ``https://``.
    Raises InvalidTargetURL for empty input, other schemes, or a missing host.
    """

    text = (raw or "").strip()
    if not text:
        raise InvalidTargetURL("URL is empty")

    if not _HTTP_SCHEME_RE.match(text):
        if _ANY_SCHEME_RE.match(text):
            raise InvalidTargetURL(f"Unsupported URL scheme: {text.split(':', 1)[0]}")
        text = f"https://{text}"

    parts = urlsplit(text)
    if not parts.netloc:
        raise InvalidTargetURL(f"URL has no host: {raw.strip()}")
    return urlunsplit((parts.scheme.lower(), parts.netloc, parts.path, parts.query, parts.fragment))


def url_origin(url: str) -> str:
    """Return ``scheme://host[:port]`` for an absolute URL."""

    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}"


def escape_html(value: str) -> str:
    """Escape text for element and double-quoted attribute contexts."""

    return html.escape(value, quote=True)
