"""urlpreview CLI."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from urlpreview.clients.browser import BrowserSession
from urlpreview.clients.http import create_http_client, probe
from urlpreview.embedding.classifier import classify
from urlpreview.errors import InvalidTargetURL, ProbeFailure, RenderFailed
from urlpreview.models.preview import EmbedDecision, PreviewResult, ProbeResult
from urlpreview.pipeline.orchestrator import PreviewOrchestrator
from urlpreview.relay.server import RelayService
from urlpreview.settings import Settings
from urlpreview.utils.urls import normalize_target_url

app = typer.Typer(help="Preview remote pages inside a sandboxed viewer")
console = Console(stderr=True)

_REPORTED_HEADERS = ("x-frame-options", "content-security-policy")


def _settings_from_args(
    embed_target: str | None = None,
    log_level: str | None = None,
    render_fallback: bool | None = None,
) -> Settings:
    settings = Settings()
    if embed_target is not None:
        if embed_target not in {"origin", "relay"}:
            raise typer.BadParameter("embed target must be one of: origin, relay")
        settings.embed_target = embed_target  # type: ignore[assignment]
    if log_level is not None:
        settings.log_level = log_level
    if render_fallback is not None:
        settings.render_fallback = render_fallback
    return settings


def _configure_logging(settings: Settings) -> None:
    level = settings.log_level.upper()
    try:
        logger.level(level)
    except ValueError as exc:
        raise typer.BadParameter(f"unknown log level: {settings.log_level}") from exc
    logger.remove()
    logger.add(sys.stderr, level=level)


def _target(url: str) -> str:
    try:
        return normalize_target_url(url)
    except InvalidTargetURL as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command("open")
def open_preview(
    url: str = typer.Argument(..., help="Page to preview; a bare host gets https://"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the document here instead of stdout"),
    embed_target: str | None = typer.Option(None, "--embed-target", help="Frame source: 'origin' or 'relay'"),
    render_fallback: bool | None = typer.Option(None, "--render-fallback/--no-render-fallback"),
    log_level: str | None = typer.Option(None, "--log-level"),
) -> None:
    """Build the viewer document for URL."""

    settings = _settings_from_args(embed_target=embed_target, log_level=log_level, render_fallback=render_fallback)
    _configure_logging(settings)
    target = _target(url)

    async def _run() -> PreviewResult:
        async with PreviewOrchestrator(settings) as orchestrator:
            return await orchestrator.open_preview(target)

    result = asyncio.run(_run())

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result.html, encoding="utf-8")
    else:
        typer.echo(result.html)

    console.print(f"preview: mode={result.mode} decision={result.decision} states={'>'.join(result.states)}")
    if result.error:
        console.print(f"error: {result.error}")


@app.command("classify")
def classify_cmd(
    url: str = typer.Argument(...),
    log_level: str | None = typer.Option(None, "--log-level"),
) -> None:
    """Probe URL and report whether it may be framed."""

    settings = _settings_from_args(log_level=log_level)
    _configure_logging(settings)
    target = _target(url)

    async def _run() -> ProbeResult | None:
        async with await create_http_client(settings) as client:
            try:
                return await probe(client, target, timeout=settings.probe_timeout)
            except ProbeFailure as exc:
                console.print(f"probe failed: {exc.reason}")
                return None

    result = asyncio.run(_run())
    decision = classify(result) if result is not None else EmbedDecision.NOT_EMBEDDABLE

    table = Table(title=f"Embeddability ({target})")
    table.add_column("Metric")
    table.add_column("Value")
    if result is not None:
        table.add_row("status", f"{result.status_code} ({result.method})")
        for name in _REPORTED_HEADERS:
            table.add_row(name, result.header(name) or "-")
    table.add_row("decision", str(decision))
    console.print(table)
    typer.echo(str(decision))


@app.command("render")
def render(
    url: str = typer.Argument(...),
    log_level: str | None = typer.Option(None, "--log-level"),
) -> None:
    """Render URL in the headless browser and print the resulting HTML."""

    settings = _settings_from_args(log_level=log_level)
    _configure_logging(settings)
    target = _target(url)

    async def _run() -> str:
        async with BrowserSession(headless=settings.browser_headless, timeout=settings.render_timeout) as browser:
            document = await browser.render(target)
        return document.html

    try:
        html = asyncio.run(_run())
    except RenderFailed as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(html)


@app.command("serve")
def serve(
    port: int | None = typer.Option(None, "--port", min=0, max=65535, help="0 picks a free port"),
    log_level: str | None = typer.Option(None, "--log-level"),
) -> None:
    """Run the loopback relay until interrupted."""

    settings = _settings_from_args(log_level=log_level)
    if port is not None:
        settings.relay_port = port
    _configure_logging(settings)

    async def _run() -> None:
        browser = BrowserSession(headless=settings.browser_headless, timeout=settings.render_timeout)
        relay = RelayService(browser, port=settings.relay_port)
        try:
            binding = await relay.start()
            console.print(f"relay listening: {binding.base_url}/proxy?url=<percent-encoded url>")
            await asyncio.Event().wait()
        finally:
            await relay.stop()
            await browser.close()

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        console.print("relay stopped")


if __name__ == "__main__":
    app()
