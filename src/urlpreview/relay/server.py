"""Loopback HTTP relay that serves headless-rendered pages to the viewer."""

from __future__ import annotations

import asyncio
import contextlib
import socket
from typing import TYPE_CHECKING

import uvicorn
from fastapi import FastAPI, Query
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from loguru import logger

from urlpreview.errors import InvalidTargetURL, RelayError, RenderFailed
from urlpreview.models.preview import LOOPBACK_HOST, RelayBinding
from urlpreview.utils.urls import normalize_target_url

if TYPE_CHECKING:
    from collections.abc import Iterator

    from urlpreview.clients.browser import BrowserSession

_STARTUP_POLL_SECONDS = 0.01
_STARTUP_TIMEOUT_SECONDS = 10.0
_SHUTDOWN_GRACE_SECONDS = 2.0


def _target_from_query(url: str | None) -> str:
    if url is None or not url.strip():
        raise RelayError(400, "missing url parameter")
    try:
        return normalize_target_url(url)
    except InvalidTargetURL as exc:
        raise RelayError(400, str(exc)) from exc


def create_relay_app(browser: BrowserSession) -> FastAPI:
    """Build the relay application around a shared browser session."""

    app = FastAPI(title="urlpreview relay", docs_url=None, redoc_url=None, openapi_url=None)

    @app.get("/proxy")
    async def proxy(url: str | None = Query(default=None)) -> Response:
        try:
            target = _target_from_query(url)
            document = await browser.render(target)
        except RelayError as exc:
            return PlainTextResponse(exc.message, status_code=exc.status_code)
        except RenderFailed as exc:
            return PlainTextResponse(str(exc) or "render failed", status_code=500)
        return HTMLResponse(document.html, status_code=200)

    return app


class _LoopbackServer(uvicorn.Server):
    """uvicorn server that leaves process signal handling to the host."""

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield

    def install_signal_handlers(self) -> None:
        pass


class RelayService:
    """Owns the relay listener: started at most once, stopped at most once."""

    def __init__(self, browser: BrowserSession, *, port: int = 0) -> None:
        self.browser = browser
        self.port = port
        self.app = create_relay_app(browser)
        self._lock = asyncio.Lock()
        self._binding: RelayBinding | None = None
        self._server: _LoopbackServer | None = None
        self._socket: socket.socket | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def binding(self) -> RelayBinding | None:
        return self._binding

    async def start(self) -> RelayBinding:
        """Bind the loopback listener and start serving; returns the existing binding if running."""

        async with self._lock:
            if self._binding is not None:
                return self._binding

            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            try:
                sock.bind((LOOPBACK_HOST, self.port))
            except OSError:
                sock.close()
                raise
            port = sock.getsockname()[1]

            config = uvicorn.Config(
                self.app,
                log_level="warning",
                access_log=False,
                lifespan="off",
                timeout_graceful_shutdown=_SHUTDOWN_GRACE_SECONDS,
            )
            server = _LoopbackServer(config)
            task = asyncio.create_task(server.serve(sockets=[sock]))

            waited = 0.0
            while not server.started:
                if task.done():
                    sock.close()
                    task.result()
                    raise RuntimeError("Relay server exited during startup")
                if waited >= _STARTUP_TIMEOUT_SECONDS:
                    server.should_exit = True
                    sock.close()
                    raise RuntimeError("Relay server did not start in time")
                await asyncio.sleep(_STARTUP_POLL_SECONDS)
                waited += _STARTUP_POLL_SECONDS

            self._server, self._socket, self._task = server, sock, task
            self._binding = RelayBinding(host=LOOPBACK_HOST, port=port)
            logger.info("Relay listening on {}", self._binding.base_url)
            return self._binding

    def url_for(self, target: str) -> str:
        if self._binding is None:
            raise RuntimeError("Relay is not running")
        return self._binding.proxy_url(target)

    async def stop(self) -> None:
        """Shut the listener down, cutting in-flight renders short. Failures are logged, never raised."""

        async with self._lock:
            server, task, sock = self._server, self._task, self._socket
            self._server = self._task = self._socket = None
            self._binding = None
            if server is None:
                return

            server.should_exit = True
            # Pending /proxy renders hold uvicorn's graceful shutdown open until their pages go away.
            await self.browser.close_pages()
            try:
                if task is not None:
                    await task
            except Exception as exc:
                logger.warning("Relay shutdown failed: {}", exc)
            finally:
                if sock is not None:
                    with contextlib.suppress(OSError):
                        sock.close()
            logger.info("Relay stopped")

    async def __aenter__(self) -> RelayService:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
