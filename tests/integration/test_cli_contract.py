from typer.testing import CliRunner

from urlpreview.cli import app

runner = CliRunner()


def test_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for command in ("open", "classify", "render", "serve"):
        assert command in result.stdout
