"""Rewrite acquired markup so it displays correctly outside its origin.

The rewritten page is wrapped in a shell carrying its own content policy,
separate from whatever policy the target site sent. That shell policy allows
inline and ``eval`` scripts plus remote styles, scripts, images and fonts over
https, ``data:`` and ``blob:``; everything else is denied. It is permissive on
purpose: heavily scripted third-party pages need it to render, so the viewer
gets display fidelity rather than strict isolation.

Head detection is a regex over the raw markup rather than a parse. It only
needs to find the first ``<head>`` opening tag, and :func:`inject_base` is the
single place to change if a tree-based insertion is ever needed.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from urlpreview.utils.urls import escape_html

if TYPE_CHECKING:
    from urlpreview.models.preview import RenderedDocument

SHELL_CONTENT_POLICY = (
    "default-src 'none'; "
    "img-src https: data: blob:; "
    "font-src https: data:; "
    "style-src 'unsafe-inline' https:; "
    "script-src 'unsafe-inline' 'unsafe-eval' https:;"
)

# Matches <head>, <HEAD lang="en"> but not <header>.
_HEAD_OPEN_RE = re.compile(r"<head(?=[\s>/])[^>]*>", re.IGNORECASE)


def base_tag(href: str) -> str:
    return f'<base href="{escape_html(href)}">'


def inject_base(html: str, href: str) -> str:
    """Insert a base element right after the first head tag, or prepend it."""

    tag = base_tag(href)
    match = _HEAD_OPEN_RE.search(html)
    if match is None:
        return tag + html
    return html[: match.end()] + tag + html[match.end() :]


def wrap_document(markup: str) -> str:
    """Place ``markup`` inside a minimal document carrying the shell policy."""

    return f"""<!doctype html>
<html>
  <head>
    <meta charset="utf-8" />
    <meta http-equiv="Content-Security-Policy" content="{SHELL_CONTENT_POLICY}">
  </head>
  <body>{markup}</body>
</html>"""


def rewrite(document: RenderedDocument) -> str:
    """Produce the final self-contained document for the viewer."""

    return wrap_document(inject_base(document.html, document.source_url))
