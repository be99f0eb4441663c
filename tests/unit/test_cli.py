"""Tests for CLI module."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
import typer
from typer.testing import CliRunner

from urlpreview.cli import _settings_from_args, app
from urlpreview.errors import ProbeFailure, RenderFailed
from urlpreview.models.preview import EmbedDecision, PreviewResult, PreviewState, ProbeResult

runner = CliRunner()


def _frame_result(url: str = "https://example.com") -> PreviewResult:
    return PreviewResult(
        url=url,
        decision=EmbedDecision.EMBEDDABLE,
        mode="frame",
        html=f'<iframe src="{url}"></iframe>',
        states=[PreviewState.IDLE, PreviewState.PROBING, PreviewState.DIRECT_EMBED, PreviewState.DISPLAYED],
    )


def test_settings_from_args_defaults() -> None:
    s = _settings_from_args()
    assert s.embed_target == "origin"
    assert s.render_fallback is True


def test_settings_from_args_overrides() -> None:
    s = _settings_from_args(embed_target="relay", log_level="DEBUG", render_fallback=False)
    assert s.embed_target == "relay"
    assert s.log_level == "DEBUG"
    assert s.render_fallback is False


def test_settings_from_args_rejects_unknown_embed_target() -> None:
    with pytest.raises(typer.BadParameter):
        _settings_from_args(embed_target="elsewhere")


def test_open_writes_document_to_stdout() -> None:
    with patch(
        "urlpreview.cli.PreviewOrchestrator.open_preview", new=AsyncMock(return_value=_frame_result())
    ) as mock_open:
        result = runner.invoke(app, ["open", "example.com"])

    assert result.exit_code == 0
    assert '<iframe src="https://example.com"></iframe>' in result.stdout
    mock_open.assert_awaited_once_with("https://example.com")


def test_open_writes_document_to_file(tmp_path: Path) -> None:
    output = tmp_path / "out" / "preview.html"
    with patch("urlpreview.cli.PreviewOrchestrator.open_preview", new=AsyncMock(return_value=_frame_result())):
        result = runner.invoke(app, ["open", "https://example.com", "--output", str(output)])

    assert result.exit_code == 0
    assert output.read_text(encoding="utf-8") == '<iframe src="https://example.com"></iframe>'


def test_open_rejects_empty_url() -> None:
    result = runner.invoke(app, ["open", "  "])
    assert result.exit_code != 0


def test_open_rejects_unknown_embed_target() -> None:
    result = runner.invoke(app, ["open", "example.com", "--embed-target", "nowhere"])
    assert result.exit_code != 0


def test_classify_reports_decision() -> None:
    probe_result = ProbeResult(status_code=200, headers={"X-Frame-Options": "DENY"})
    with patch("urlpreview.cli.probe", new=AsyncMock(return_value=probe_result)):
        result = runner.invoke(app, ["classify", "example.com"])

    assert result.exit_code == 0
    assert "not_embeddable" in result.stdout


def test_classify_probe_failure_fails_closed() -> None:
    with patch("urlpreview.cli.probe", new=AsyncMock(side_effect=ProbeFailure("https://example.com", "timed out"))):
        result = runner.invoke(app, ["classify", "example.com"])

    assert result.exit_code == 0
    assert "not_embeddable" in result.stdout


def test_render_prints_html() -> None:
    from urlpreview.models.preview import RenderedDocument

    document = RenderedDocument(html="<p>rendered</p>", source_url="https://example.com", via="browser")
    with patch("urlpreview.cli.BrowserSession.render", new=AsyncMock(return_value=document)):
        result = runner.invoke(app, ["render", "example.com"])

    assert result.exit_code == 0
    assert "<p>rendered</p>" in result.stdout


def test_render_failure_is_bad_parameter() -> None:
    with patch("urlpreview.cli.BrowserSession.render", new=AsyncMock(side_effect=RenderFailed("launch failed"))):
        result = runner.invoke(app, ["render", "example.com"])

    assert result.exit_code == 2


def test_open_rejects_unknown_log_level() -> None:
    mock_open = AsyncMock(return_value=_frame_result())
    with patch("urlpreview.cli.PreviewOrchestrator.open_preview", new=mock_open):
        result = runner.invoke(app, ["open", "example.com", "--log-level", "verbose"])

    assert result.exit_code == 2
    mock_open.assert_not_awaited()


def test_classify_accepts_lowercase_log_level() -> None:
    probe_result = ProbeResult(status_code=200)
    with patch("urlpreview.cli.probe", new=AsyncMock(return_value=probe_result)):
        result = runner.invoke(app, ["classify", "example.com", "--log-level", "debug"])

    assert result.exit_code == 0
    assert "embeddable" in result.stdout
    assert "not_embeddable" not in result.stdout
