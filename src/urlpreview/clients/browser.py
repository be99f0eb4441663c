"""Headless rendering via a shared Camoufox browser."""

from __future__ import annotations

import asyncio
from contextlib import AsyncExitStack
from typing import TYPE_CHECKING, Any

from loguru import logger

from urlpreview.errors import RenderFailed
from urlpreview.models.preview import RenderedDocument

if TYPE_CHECKING:
    from collections.abc import Callable
    from contextlib import AbstractAsyncContextManager

    Launcher = Callable[[], AbstractAsyncContextManager[Any]]


def camoufox_launcher(*, headless: bool = True) -> Launcher:
    """Build a launcher that starts a Camoufox browser."""

    def _launch() -> AbstractAsyncContextManager[Any]:
        try:
            from camoufox.async_api import AsyncCamoufox
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RenderFailed("camoufox is not installed. Install extras: urlpreview[browser].") from exc
        return AsyncCamoufox(headless=headless)

    return _launch


class BrowserSession:
    """Lazily launched browser shared by every render request.

    The browser process starts on the first :meth:`render` call and stays up
    until :meth:`close`. Each request gets its own browser context and page,
    both closed when the request finishes.
    """

    def __init__(
        self,
        *,
        headless: bool = True,
        timeout: float = 30.0,
        launcher: Launcher | None = None,
    ) -> None:
        self.headless = headless
        self.timeout = timeout
        self._launcher = launcher or camoufox_launcher(headless=headless)
        self._lock = asyncio.Lock()
        self._stack: AsyncExitStack | None = None
        self._browser: Any = None
        self._pages: set[Any] = set()

    @property
    def launched(self) -> bool:
        return self._browser is not None

    async def _ensure_browser(self) -> Any:
        if self._browser is not None:
            return self._browser

        async with self._lock:
            # Another caller may have finished launching while we waited.
            if self._browser is not None:
                return self._browser

            stack = AsyncExitStack()
            try:
                browser = await stack.enter_async_context(self._launcher())
            except RenderFailed:
                await stack.aclose()
                raise
            except Exception as exc:
                await stack.aclose()
                logger.error("Browser launch failed: {}", exc)
                raise RenderFailed(f"Browser launch failed: {exc}") from exc

            logger.info("Headless browser launched (headless={})", self.headless)
            self._stack = stack
            self._browser = browser
            return browser

    async def render(self, url: str) -> RenderedDocument:
        """Load ``url``, let scripts run until the network goes idle, return the DOM."""

        browser = await self._ensure_browser()
        context = None
        page = None
        try:
            context = await browser.new_context(bypass_csp=True)
            page = await context.new_page()
            self._pages.add(page)
            await page.goto(url, wait_until="networkidle", timeout=self.timeout * 1000)
            html = await page.content()
        except Exception as exc:
            logger.warning("Render failed for {}: {}", url, exc)
            raise RenderFailed(f"Render failed for {url}: {exc}") from exc
        finally:
            if page is not None:
                self._pages.discard(page)
                await _close_quietly(page, "page")
            if context is not None:
                await _close_quietly(context, "browser context")

        return RenderedDocument(html=html, source_url=url, via="browser")

    async def close_pages(self) -> None:
        """Close every in-flight page so pending renders fail now; the browser stays up."""

        pages = list(self._pages)
        self._pages.clear()
        for page in pages:
            await _close_quietly(page, "page")

    async def close(self) -> None:
        """Close in-flight pages and the browser process. Safe to call repeatedly."""

        async with self._lock:
            await self.close_pages()

            stack, self._stack, self._browser = self._stack, None, None
            if stack is None:
                return
            try:
                await stack.aclose()
            except Exception as exc:
                logger.warning("Browser shutdown failed: {}", exc)
            else:
                logger.info("Headless browser closed")

    async def __aenter__(self) -> BrowserSession:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


async def _close_quietly(handle: Any, label: str) -> None:
    try:
        await handle.close()
    except Exception as exc:
        logger.debug("Closing {} failed: {}", label, exc)
