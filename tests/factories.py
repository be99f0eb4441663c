"""Shared test factory helpers for creating model instances."""

from __future__ import annotations

from urlpreview.models.preview import ProbeResult, RenderedDocument


def make_probe_result(status_code: int = 200, **headers: str) -> ProbeResult:
    """Create a ProbeResult; header kwargs use underscores for dashes (X_Frame_Options)."""
    return ProbeResult(
        status_code=status_code,
        headers={name.replace("_", "-"): value for name, value in headers.items()},
    )


def make_document(html: str = "<html><head></head><body>x</body></html>", **overrides) -> RenderedDocument:
    """Create a RenderedDocument with sensible defaults. Override any field via kwargs."""
    defaults = {"html": html, "source_url": "https://e.com/p", "via": "fetch"}
    defaults.update(overrides)
    return RenderedDocument(**defaults)
