"""Tests for URL normalization and escaping helpers."""

import pytest

from urlpreview.errors import InvalidTargetURL
from urlpreview.utils.urls import escape_html, normalize_target_url, url_origin


def test_normalize_bare_host_gets_https() -> None:
    assert normalize_target_url("example.com") == "https://example.com"


def test_normalize_trims_whitespace() -> None:
    assert normalize_target_url("  https://example.com/page  ") == "https://example.com/page"


def test_normalize_keeps_http() -> None:
    assert normalize_target_url("http://example.com/a?b=1") == "http://example.com/a?b=1"


def test_normalize_lowercases_scheme() -> None:
    assert normalize_target_url("HTTPS://Example.com/Path") == "https://Example.com/Path"


def test_normalize_host_with_port() -> None:
    assert normalize_target_url("localhost:8080/docs") == "https://localhost:8080/docs"


@pytest.mark.parametrize("raw", ["", "   ", "\n\t"])
def test_normalize_rejects_empty(raw: str) -> None:
    with pytest.raises(InvalidTargetURL):
        normalize_target_url(raw)


def test_normalize_rejects_other_schemes() -> None:
    with pytest.raises(InvalidTargetURL, match="ftp"):
        normalize_target_url("ftp://files.example.com")


def test_normalize_rejects_missing_host() -> None:
    with pytest.raises(InvalidTargetURL):
        normalize_target_url("https://")


def test_invalid_target_url_is_value_error() -> None:
    with pytest.raises(ValueError):
        normalize_target_url("")


def test_url_origin() -> None:
    assert url_origin("https://example.com:8443/a/b?c=d") == "https://example.com:8443"


def test_escape_html_covers_markup_characters() -> None:
    assert escape_html('a&b<c>"d') == "a&amp;b&lt;c&gt;&quot;d"
