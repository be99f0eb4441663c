"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from tests.fakes import FakeBrowser, FakeLauncher
from urlpreview.clients.browser import BrowserSession
from urlpreview.settings import Settings

STATIC_ARTICLE = (
    "<html><head><title>Article</title></head><body><main><h1>Static article</h1>"
    + "<p>"
    + "This paragraph is plain server-rendered text. " * 10
    + "</p></main></body></html>"
)

SPA_SHELL = (
    '<html><head><title>App</title></head>'
    '<body><div id="root"></div><script src="/app.js"></script></body></html>'
)


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def fake_browser() -> FakeBrowser:
    return FakeBrowser()


@pytest.fixture
def launcher(fake_browser: FakeBrowser) -> FakeLauncher:
    return FakeLauncher(fake_browser)


@pytest.fixture
def browser_session(launcher: FakeLauncher) -> BrowserSession:
    return BrowserSession(timeout=30.0, launcher=launcher)


@pytest.fixture
def static_article() -> str:
    return STATIC_ARTICLE


@pytest.fixture
def spa_shell() -> str:
    return SPA_SHELL
