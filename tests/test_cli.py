"""Tests for the fileinfo CLI (resolve, config show/init)."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from fileinfo.assembler import FileInfo
from fileinfo.cli import app
from fileinfo.errors import BaseCommitLookupFailed, MissingPageData

runner = CliRunner()

DIFF_INFO = FileInfo(
    repository="gitlab.com/acme/widgets",
    file_path="src/app.py",
    head_revision="cafef00d",
    head_commit_id="cafef00d",
    base_revision="deadbeef",
    base_commit_id="deadbeef",
    head_has_file_contents=True,
    base_has_file_contents=True,
)


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """Run every command in an empty directory with no user config."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


@pytest.fixture()
def mock_assembler():
    """Patch create_assembler at the CLI import site and return the mock instance."""
    instance = MagicMock(name="FileInfoAssembler_instance")
    instance.resolve_file_info = AsyncMock(return_value=None)
    instance.resolve_diff_file_info = AsyncMock(return_value=DIFF_INFO)
    instance.resolve_commit_file_info = AsyncMock(return_value=DIFF_INFO)
    with patch("fileinfo.cli.create_assembler", return_value=instance):
        yield instance


# ── resolve ─────────────────────────────────────────────────────────


def test_resolve_diff_json(mock_assembler):
    result = runner.invoke(
        app,
        [
            "resolve",
            "https://gitlab.com/acme/widgets/-/merge_requests/42/diffs?diff_id=7",
            "--view-file-href",
            "/acme/widgets/-/blob/cafef00d/src/app.py",
            "--file-title",
            "src/app.py",
            "--json",
        ],
    )
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["base_commit_id"] == "deadbeef"
    assert data["head_commit_id"] == "cafef00d"

    page = mock_assembler.resolve_diff_file_info.await_args.args[0]
    assert page.code_view.view_file_href == "/acme/widgets/-/blob/cafef00d/src/app.py"
    assert page.code_view.file_title == "src/app.py"


def test_resolve_commit_table(mock_assembler):
    result = runner.invoke(app, ["resolve", "https://gitlab.com/acme/widgets/-/commit/1111111"])
    assert result.exit_code == 0, result.output
    assert "deadbeef" in result.output
    mock_assembler.resolve_commit_file_info.assert_awaited_once()
    page = mock_assembler.resolve_commit_file_info.await_args.args[0]
    assert page.code_view is None


def test_resolve_file_without_file(mock_assembler):
    result = runner.invoke(app, ["resolve", "https://gitlab.com/acme/widgets/-/blob/main"])
    assert result.exit_code == 0
    assert "No file" in result.output
    mock_assembler.resolve_file_info.assert_awaited_once()


def test_resolve_unknown_page(mock_assembler):
    result = runner.invoke(app, ["resolve", "https://gitlab.com/acme/widgets/-/tree/main"])
    assert result.exit_code == 1
    assert "not a GitLab" in result.output


def test_resolve_reports_workflow_errors(mock_assembler):
    mock_assembler.resolve_diff_file_info = AsyncMock(
        side_effect=MissingPageData(["head_commit_id"], stage="build")
    )
    result = runner.invoke(
        app, ["resolve", "https://gitlab.com/acme/widgets/-/merge_requests/42/diffs"]
    )
    assert result.exit_code == 1
    assert "head_commit_id" in result.output


def test_resolve_reports_lookup_failure(mock_assembler):
    mock_assembler.resolve_commit_file_info = AsyncMock(
        side_effect=BaseCommitLookupFailed("GitLab API returned 401", reason="unauthorized")
    )
    result = runner.invoke(app, ["resolve", "https://gitlab.com/acme/widgets/-/commit/1111111"])
    assert result.exit_code == 1
    assert "401" in result.output


def test_invalid_config_file(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("log_level: loud\n")
    result = runner.invoke(app, ["--config", str(bad), "config", "show"])
    assert result.exit_code == 1
    assert "Invalid config" in result.output


# ── config ──────────────────────────────────────────────────────────


def test_config_init_creates_file(tmp_path: Path):
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 0
    assert (tmp_path / "fileinfo.yaml").is_file()


def test_config_init_refuses_overwrite(tmp_path: Path):
    (tmp_path / "fileinfo.yaml").write_text("log_level: debug\n")
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 1
    assert "already exists" in result.output
    assert (tmp_path / "fileinfo.yaml").read_text() == "log_level: debug\n"


def test_config_init_force(tmp_path: Path):
    (tmp_path / "fileinfo.yaml").write_text("log_level: debug\n")
    result = runner.invoke(app, ["config", "init", "--force"])
    assert result.exit_code == 0
    assert "retry:" in (tmp_path / "fileinfo.yaml").read_text()


def test_config_show(tmp_path: Path):
    (tmp_path / "fileinfo.yaml").write_text("retry:\n  max_attempts: 4\n")
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    assert "max_attempts: 4" in result.output


def test_config_init_with_service_urls(tmp_path: Path):
    result = runner.invoke(
        app,
        [
            "config",
            "init",
            "--resolver-url",
            "https://sg.internal/",
            "--gitlab-url",
            "https://gitlab.example.com",
        ],
    )
    assert result.exit_code == 0, result.output
    text = (tmp_path / "fileinfo.yaml").read_text()
    assert 'url: "https://sg.internal"' in text
    assert 'url: "https://gitlab.example.com"' in text


def test_config_init_rejects_bad_url(tmp_path: Path):
    result = runner.invoke(app, ["config", "init", "--gitlab-url", "gitlab.example.com"])
    assert result.exit_code == 1
    assert "gitlab.url" in result.output
    assert not (tmp_path / "fileinfo.yaml").exists()


def test_unset_service_url_in_config(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("FILEINFO_TEST_SG_URL", raising=False)
    (tmp_path / "fileinfo.yaml").write_text('resolver:\n  url: "${FILEINFO_TEST_SG_URL}"\n')
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 1
    assert "resolver.url is not set" in result.output
