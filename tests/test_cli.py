"""Tests for the command line interface."""

import pytest
from click.testing import CliRunner

from deploy_sentry.cli.main import cli
from deploy_sentry.constants import REVISION_META_PLACEHOLDER

CONFIG = """\
sentry:
  publicUrl: ~/assets
  sentryUrl: https://sentry.example.com
  sentryOrganizationSlug: acme
  sentryProjectSlug: web
  sentryApiKey: secret
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def project(tmp_path):
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "index.html").write_text(f"<head>{REVISION_META_PLACEHOLDER}</head>")
    config = tmp_path / ".deploy-sentry.yaml"
    config.write_text(CONFIG)
    return tmp_path


def test_snippet(runner):
    result = runner.invoke(cli, ["snippet"])

    assert result.exit_code == 0
    assert result.output.strip() == REVISION_META_PLACEHOLDER


def test_tag(runner, project, clean_env):
    result = runner.invoke(cli, [
        "tag",
        "-c", str(project / ".deploy-sentry.yaml"),
        "--dist-dir", str(project / "dist"),
        "--revision", "abcdef",
    ])

    assert result.exit_code == 0, result.output
    assert 'content="abcdef"' in (project / "dist" / "index.html").read_text()


def test_missing_config_fails(runner, tmp_path, clean_env):
    result = runner.invoke(cli, [
        "upload",
        "-c", str(tmp_path / "absent.yaml"),
        "--revision", "abcdef",
    ])

    assert result.exit_code == 1
    assert "Configuration Error" in result.output


def test_upload_without_revision_fails(runner, project, clean_env):
    result = runner.invoke(cli, [
        "upload",
        "-c", str(project / ".deploy-sentry.yaml"),
        "--dist-dir", str(project / "dist"),
    ])

    assert result.exit_code == 1
    assert "Upload Error" in result.output


def test_version(runner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "1.0.0" in result.output
