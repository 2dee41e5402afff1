"""
Tests for CLI commands — install, use, list, cache, and global options.
"""

import json
import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from pyvm.core.use_cases.client import Client
from pyvm.main import cli
from tests.helpers import NUGET, fake_msi_extract, make_nupkg


@pytest.fixture
def client(settings, registry, downloader) -> Client:
    downloader.set_content(f"{NUGET}/python/3.12.0/python.3.12.0.nupkg", make_nupkg())
    return Client(settings=settings, adapters=registry)


@pytest.fixture
def invoke(client, monkeypatch):
    """Run the CLI against the test client instead of one built from pyvm.yml."""
    monkeypatch.setattr("pyvm.main.build_client", lambda config_path=None: client)
    runner = CliRunner()

    def _invoke(*args: str, **kwargs):
        return runner.invoke(cli, list(args), **kwargs)

    return _invoke


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "install and switch between Python versions" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_bad_config(self, tmp_path: Path):
        config = tmp_path / "pyvm.yml"
        config.write_text("arch: sparc\n")
        result = CliRunner().invoke(cli, ["--config", str(config), "installed"])
        assert result.exit_code == 1
        assert "Invalid pyvm configuration" in result.output


class TestInstallCommand:
    def test_install_latest(self, invoke, settings):
        result = invoke("install", "latest")
        assert result.exit_code == 0, result.output
        assert "Checking available versions... Done!" in result.output
        assert 'Downloading "python.3.12.0.nupkg"... Done!' in result.output
        assert "Making symlink... Done!" in result.output
        assert "Python 3.12.0 installed successfully!" in result.output
        assert settings.alias.is_symlink()

    def test_install_quiet(self, invoke):
        result = invoke("-q", "install", "3.12.0")
        assert result.exit_code == 0
        assert "Done!" not in result.output
        assert "installed successfully" in result.output

    def test_install_no_activate(self, invoke, settings):
        result = invoke("install", "3.12.0", "--no-activate")
        assert result.exit_code == 0
        assert "Making symlink" not in result.output
        assert not settings.alias.is_symlink()

    def test_install_legacy(self, invoke, runner):
        runner.set_handler("msiexec", fake_msi_extract)
        result = invoke("install", "2.7.18")
        assert result.exit_code == 0, result.output
        assert "Python 2.7.18 installed successfully!" in result.output

    def test_unknown_version(self, invoke):
        result = invoke("install", "9.9.9")
        assert result.exit_code == 1
        assert '"9.9.9" is not a valid python version.' in result.output

    def test_failure_marks_stage(self, invoke, runner):
        runner.set_failure("get-pip.py", "SSL error")
        result = invoke("install", "3.12.0")
        assert result.exit_code == 1
        assert "Unpacking and installing pip... Failed" in result.output
        assert "[bootstrap]" in result.output


class TestUseCommand:
    def test_use_installed(self, invoke, settings):
        invoke("install", "3.12.0", "--no-activate")
        result = invoke("use", "3.12.0")
        assert result.exit_code == 0
        assert "Now using Python 3.12.0" in result.output
        assert Path(os.readlink(settings.alias)).name == "3.12.0"

    def test_use_missing(self, invoke):
        result = invoke("use", "3.11.4")
        assert result.exit_code == 1
        assert 'Python "3.11.4" is not installed' in result.output


class TestUninstallCommand:
    def test_uninstall(self, invoke, settings):
        invoke("install", "3.12.0")
        result = invoke("uninstall", "3.12.0", "--yes")
        assert result.exit_code == 0
        assert not (settings.versions_dir / "3.12.0").exists()
        assert not settings.alias.is_symlink()

    def test_uninstall_declined(self, invoke, settings):
        invoke("install", "3.12.0")
        result = invoke("uninstall", "3.12.0", input="n\n")
        assert result.exit_code == 1
        assert (settings.versions_dir / "3.12.0").is_dir()


class TestListCommands:
    def test_list_stable(self, invoke):
        result = invoke("list")
        assert result.exit_code == 0
        assert "3.12.0 (latest)" in result.output
        assert "3.13.0-rc1" not in result.output

    def test_list_unstable(self, invoke):
        result = invoke("list", "--unstable")
        assert "3.13.0-rc1" in result.output
        assert "3.12.0" not in result.output

    def test_list_json(self, invoke):
        result = invoke("list", "--all", "--json")
        data = json.loads(result.output)
        assert data["latest"] == "3.12.0"
        assert data["versions"][0] == "3.13.0-rc1"

    def test_list_limit(self, invoke):
        result = invoke("list", "-n", "2")
        assert "more (use --limit 0)" in result.output

    def test_list_marks_installed(self, invoke):
        invoke("install", "3.12.0")
        assert "3.12.0 (latest) ✓ installed" in invoke("list").output

    def test_list_offline(self, invoke, downloader):
        downloader.set_failure(f"{NUGET}/python/index.json", "offline")
        result = invoke("list")
        assert result.exit_code == 1
        assert "offline" in result.output

    def test_installed_empty(self, invoke):
        result = invoke("installed")
        assert result.exit_code == 0
        assert "No Python versions installed" in result.output

    def test_installed_json(self, invoke):
        invoke("install", "3.12.0")
        data = json.loads(invoke("installed", "--json").output)
        assert data[0]["version"] == "3.12.0"
        assert data[0]["active"] is True

    def test_current(self, invoke):
        assert invoke("current").exit_code == 1
        invoke("install", "3.12.0")
        result = invoke("current")
        assert result.exit_code == 0
        assert result.output.startswith("3.12.0")

    def test_info_json(self, invoke, settings):
        data = json.loads(invoke("info", "--json").output)
        assert data["alias"] == str(settings.alias)
        assert data["catalog"]["cached"] is False
        assert set(data["adapters"]) == {"download", "archive", "process"}


class TestCacheCommands:
    def test_refresh_then_show(self, invoke, settings):
        result = invoke("cache", "refresh")
        assert result.exit_code == 0
        assert "7 versions" in result.output
        assert settings.cache_file.is_file()

        result = invoke("cache", "show")
        assert "fresh" in result.output

    def test_clear(self, invoke, settings):
        invoke("cache", "refresh")
        result = invoke("cache", "clear")
        assert "Catalog cache cleared" in result.output
        assert not settings.cache_file.exists()

        assert "Nothing to clear" in invoke("cache", "clear").output

    def test_show_empty(self, invoke):
        assert "No cached catalog" in invoke("cache", "show").output
