"""HTTP client, header probe and static document fetcher."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from loguru import logger

from urlpreview import __version__
from urlpreview.errors import FetchFailed, ProbeFailure
from urlpreview.models.preview import ProbeResult, RenderedDocument

if TYPE_CHECKING:
    from urlpreview.settings import Settings

# Servers that reject HEAD with these statuses get a single GET retry.
_HEAD_UNSUPPORTED = frozenset({405, 501})


async def create_http_client(
    settings: Settings, transport: httpx.AsyncBaseTransport | None = None
) -> httpx.AsyncClient:
    """Create shared async client with predictable defaults."""

    return httpx.AsyncClient(
        transport=transport,
        http2=True,
        timeout=httpx.Timeout(
            connect=5.0,
            read=settings.fetch_timeout,
            write=10.0,
            pool=10.0,
        ),
        limits=httpx.Limits(
            max_connections=20,
            max_keepalive_connections=10,
            keepalive_expiry=30.0,
        ),
        headers={
            "User-Agent": f"urlpreview/{__version__} (Mozilla/5.0 compatible)",
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
        },
        follow_redirects=True,
    )


async def probe(client: httpx.AsyncClient, url: str, *, timeout: float = 10.0) -> ProbeResult:
    """Return status and headers for ``url`` without downloading the body.

    Raises ProbeFailure on any transport error, timeout or unresolvable host.
    """

    try:
        response = await client.head(url, timeout=timeout)
        if response.status_code not in _HEAD_UNSUPPORTED:
            return ProbeResult(
                status_code=response.status_code,
                headers=dict(response.headers),
                method="HEAD",
                url=str(response.url),
            )

        logger.debug("HEAD {} returned {}, retrying with GET", url, response.status_code)
        async with client.stream("GET", url, timeout=timeout) as streamed:
            return ProbeResult(
                status_code=streamed.status_code,
                headers=dict(streamed.headers),
                method="GET",
                url=str(streamed.url),
            )
    except httpx.HTTPError as exc:
        raise ProbeFailure(url, str(exc) or type(exc).__name__) from exc


async def fetch_document(client: httpx.AsyncClient, url: str, *, timeout: float = 15.0) -> RenderedDocument:
    """Fetch raw markup for ``url``; any non-2xx status raises FetchFailed."""

    try:
        response = await client.get(url, timeout=timeout)
    except httpx.HTTPError as exc:
        raise FetchFailed(None, str(exc) or type(exc).__name__) from exc

    if not response.is_success:
        raise FetchFailed(response.status_code, response.reason_phrase)

    logger.debug("Fetched {} ({} chars)", url, len(response.text))
    return RenderedDocument(html=response.text, source_url=url, via="fetch")
