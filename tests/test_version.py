from typer.testing import CliRunner

import ditasmith
from ditasmith.ui.cli import app


def test_get_version_matches_public_api() -> None:
    assert ditasmith.get_version() == ditasmith.__version__
    assert isinstance(ditasmith.__version__, str)


def test_cli_version_command() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0, result.stdout
    assert result.stdout.strip() == ditasmith.get_version()
