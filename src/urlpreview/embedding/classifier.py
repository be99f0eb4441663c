"""Frame embeddability decision over response headers.

This is a conservative heuristic, not a complete CSP evaluator. It blocks on
any ``X-Frame-Options`` restriction, on ``frame-ancestors 'none'`` and on a
bare ``frame-ancestors 'self'``. Anything it cannot read confidently is left to
the other rules; probe failures always classify as not embeddable.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from loguru import logger

from urlpreview.clients.http import probe
from urlpreview.errors import ProbeFailure
from urlpreview.models.preview import EmbedDecision, ProbeResult

if TYPE_CHECKING:
    import httpx

_XFO_BLOCKING = ("deny", "sameorigin", "same-site")
_FRAME_ANCESTORS_RE = re.compile(r"frame-ancestors\s+([^;]+)")


def frame_ancestors(csp: str) -> str | None:
    """Return the raw ``frame-ancestors`` value list of a CSP header, lowercased."""

    match = _FRAME_ANCESTORS_RE.search(csp.lower())
    return match.group(1) if match else None


def classify(result: ProbeResult) -> EmbedDecision:
    """Decide whether the probed page may be framed. First matching rule wins."""

    xfo = result.header("x-frame-options")
    if xfo is not None:
        value = xfo.lower()
        if any(token in value for token in _XFO_BLOCKING):
            return EmbedDecision.NOT_EMBEDDABLE

    csp = result.header("content-security-policy")
    if csp is not None:
        # Repeated CSP headers arrive joined with commas; each is its own policy.
        for policy in csp.split(","):
            ancestors = frame_ancestors(policy)
            if ancestors is None:
                continue
            if "'none'" in ancestors:
                return EmbedDecision.NOT_EMBEDDABLE
            if ancestors.strip() == "'self'":
                return EmbedDecision.NOT_EMBEDDABLE

    return EmbedDecision.EMBEDDABLE


def classify_outcome(outcome: ProbeResult | BaseException) -> EmbedDecision:
    """Classify a probe outcome, treating any failure as not embeddable."""

    if isinstance(outcome, BaseException):
        return EmbedDecision.NOT_EMBEDDABLE
    return classify(outcome)


async def check_embeddable(client: httpx.AsyncClient, url: str, *, timeout: float = 10.0) -> EmbedDecision:
    """Probe ``url`` and classify it. Probe failures never propagate."""

    try:
        result = await probe(client, url, timeout=timeout)
    except ProbeFailure as exc:
        logger.warning("Could not determine embeddability of {}: {}", url, exc.reason)
        return classify_outcome(exc)

    decision = classify(result)
    logger.debug("{} classified as {} ({} {})", url, decision, result.method, result.status_code)
    return decision
