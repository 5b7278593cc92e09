import json
from pathlib import Path

import pytest
from click.testing import CliRunner
from pytest_mock import MockerFixture

from org_config import cli
from org_config.fs import LocalFileSystem
from org_config.loader import OrgConfig

from .fixtures import Fixtures

fxt = Fixtures("")


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_validate(runner: CliRunner) -> None:
    result = runner.invoke(
        cli.root, ["--log-level", "WARNING", "validate", fxt.path("tree")]
    )
    assert result.exit_code == 0
    assert result.output.splitlines() == [
        "warning: file archived/notes.txt doesn't have a .yaml extension",
        "4 repositories, 1 rulesets, 3 teams, 1 external users",
    ]


def test_validate_errors(runner: CliRunner) -> None:
    result = runner.invoke(
        cli.root, ["--log-level", "WARNING", "validate", fxt.path("duplicate")]
    )
    assert result.exit_code == 1
    assert (
        "error: Repository warehouse defined in 2 places "
        "(check teams/data/warehouse.yaml and archived/warehouse.yaml)"
    ) in result.output


def test_validate_json(runner: CliRunner) -> None:
    result = runner.invoke(
        cli.root,
        ["--log-level", "WARNING", "validate", fxt.path("tree"), "-o", "json"],
    )
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["teams"] == ["data", "platform", "sre"]
    assert data["rulesets"] == ["default"]
    assert data["repositories"]["alerts"] == {
        "owner": "platform",
        "archived": False,
        "path": "teams/platform/sre/alerts.yaml",
    }
    assert data["repositories"]["legacy-portal"]["owner"] is None
    assert data["errors"] == []
    assert data["warnings"][0]["path"] == "archived/notes.txt"


def test_validate_missing_directory(runner: CliRunner, tmp_path: Path) -> None:
    result = runner.invoke(
        cli.root, ["--log-level", "WARNING", "validate", str(tmp_path / "nope")]
    )
    assert result.exit_code == 2


def test_validate_empty_directory(runner: CliRunner, tmp_path: Path) -> None:
    result = runner.invoke(cli.root, ["--log-level", "WARNING", "validate", str(tmp_path)])
    assert result.exit_code == 0
    assert "0 repositories, 0 rulesets, 0 teams, 0 external users" in result.output


def test_validate_uses_configured_layout(runner: CliRunner, mocker: MockerFixture) -> None:
    load = mocker.patch.object(cli, "load_org_config", return_value=OrgConfig())
    result = runner.invoke(
        cli.root, ["--log-level", "WARNING", "validate", fxt.path("tree")]
    )
    assert result.exit_code == 0
    fs, settings = load.call_args.args
    assert isinstance(fs, LocalFileSystem)
    assert fs.root == Path(fxt.path("tree"))
    assert settings is cli.settings
