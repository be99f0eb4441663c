"""Pydantic models."""

from .preview import (
    LOOPBACK_HOST,
    EmbedDecision,
    PreviewResult,
    PreviewState,
    ProbeResult,
    RelayBinding,
    RenderedDocument,
)

__all__ = [
    "LOOPBACK_HOST",
    "EmbedDecision",
    "PreviewResult",
    "PreviewState",
    "ProbeResult",
    "RelayBinding",
    "RenderedDocument",
]
