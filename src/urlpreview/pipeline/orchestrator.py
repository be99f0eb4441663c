"""Preview orchestration: probe, classify, then frame or acquire and rewrite."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING

from loguru import logger

from urlpreview.clients.browser import BrowserSession
from urlpreview.clients.http import create_http_client, fetch_document
from urlpreview.embedding.classifier import check_embeddable
from urlpreview.embedding.heuristics import needs_script_rendering
from urlpreview.errors import FetchFailed, RenderFailed
from urlpreview.models.preview import EmbedDecision, PreviewResult, PreviewState, RenderedDocument
from urlpreview.relay.server import RelayService
from urlpreview.rendering.documents import error_document, frame_document, placeholder_document
from urlpreview.rendering.rewriter import rewrite
from urlpreview.utils.urls import normalize_target_url

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    import httpx

    from urlpreview.settings import Settings

    DisplayFn = Callable[[str], Awaitable[None] | None]


class PreviewOrchestrator:
    """Runs preview invocations and owns the shared browser, relay and HTTP client.

    Invocations are independent; the browser and relay are created on first
    need and live until :meth:`aclose`.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        client: httpx.AsyncClient | None = None,
        browser: BrowserSession | None = None,
        relay: RelayService | None = None,
    ) -> None:
        self.settings = settings
        self._client = client
        self._owns_client = client is None
        self.browser = browser or BrowserSession(
            headless=settings.browser_headless,
            timeout=settings.render_timeout,
        )
        self._relay = relay

    @property
    def relay(self) -> RelayService:
        if self._relay is None:
            self._relay = RelayService(self.browser, port=self.settings.relay_port)
        return self._relay

    async def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = await create_http_client(self.settings)
        return self._client

    async def open_preview(self, raw_url: str, display: DisplayFn | None = None) -> PreviewResult:
        """Produce the one document the viewer should show for ``raw_url``.

        Raises InvalidTargetURL when the input is empty or not http(s).
        """

        states = [PreviewState.IDLE]
        url = normalize_target_url(raw_url)
        client = await self._http()

        states.append(PreviewState.PROBING)
        await _emit(display, placeholder_document(url))
        decision = await check_embeddable(client, url, timeout=self.settings.probe_timeout)

        error: str | None = None
        if decision is EmbedDecision.EMBEDDABLE:
            states.append(PreviewState.DIRECT_EMBED)
            mode = "frame"
            html = frame_document(await self._frame_source(url))
        else:
            states.append(PreviewState.ACQUIRING)
            try:
                document = await self._acquire(client, url)
            except FetchFailed as exc:
                logger.warning("Fetch failed for {}: {}", url, exc)
                mode, error = "error", str(exc)
                html = error_document(error)
            else:
                states.append(PreviewState.REWRITING)
                mode = "rewritten"
                html = rewrite(document)

        states.append(PreviewState.DISPLAYED)
        await _emit(display, html)
        return PreviewResult(url=url, decision=decision, mode=mode, html=html, states=states, error=error)

    async def _frame_source(self, url: str) -> str:
        if self.settings.embed_target == "relay":
            await self.relay.start()
            return self.relay.url_for(url)
        return url

    async def _acquire(self, client: httpx.AsyncClient, url: str) -> RenderedDocument:
        document = await fetch_document(client, url, timeout=self.settings.fetch_timeout)
        if not self.settings.render_fallback:
            return document
        if not needs_script_rendering(document.html, min_text_chars=self.settings.min_static_text_chars):
            return document

        logger.info("Static markup for {} looks script-dependent, rendering in browser", url)
        try:
            return await self.browser.render(url)
        except RenderFailed as exc:
            logger.warning("Falling back to static markup for {}: {}", url, exc)
            return document

    async def aclose(self) -> None:
        """Tear down relay, browser and the owned HTTP client."""

        if self._relay is not None:
            await self._relay.stop()
        await self.browser.close()
        if self._owns_client and self._client is not None:
            client, self._client = self._client, None
            try:
                await client.aclose()
            except Exception as exc:
                logger.warning("HTTP client close failed: {}", exc)

    async def __aenter__(self) -> PreviewOrchestrator:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


async def _emit(display: DisplayFn | None, html: str) -> None:
    if display is None:
        return
    outcome = display(html)
    if inspect.isawaitable(outcome):
        await outcome
