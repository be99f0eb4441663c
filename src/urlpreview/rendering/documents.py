"""Standalone documents handed to the viewer: frame, placeholder and error pages."""

from __future__ import annotations

from urlpreview.utils.urls import escape_html, url_origin

_PAGE_STYLE = "font-family: sans-serif; padding: 16px;"


def frame_document(src: str) -> str:
    """Full-viewport iframe pointing at ``src``."""

    origin = escape_html(url_origin(src))
    policy = (
        f"default-src 'none'; frame-src {origin} http: https: data:; "
        "style-src 'unsafe-inline' http: https:; script-src 'unsafe-inline' http: https:;"
    )
    return f"""<!doctype html>
<html>
  <head>
    <meta charset="utf-8" />
    <meta http-equiv="Content-Security-Policy" content="{policy}">
    <style>html,body,iframe{{height:100%;margin:0;padding:0;border:0}} iframe{{width:100%;}}</style>
  </head>
  <body>
    <iframe src="{escape_html(src)}" frameborder="0"></iframe>
  </body>
</html>"""


def placeholder_document(url: str) -> str:
    """Transient page shown while the target is being checked."""

    return (
        f'<html><body style="{_PAGE_STYLE}">Checking: {escape_html(url)}<br/>'
        "Checking whether the page can be embedded...</body></html>"
    )


def error_document(message: str, *, title: str = "Failed to load preview") -> str:
    return (
        f'<html><body style="{_PAGE_STYLE}"><h3>{escape_html(title)}</h3>'
        f"<pre>{escape_html(message)}</pre></body></html>"
    )
