"""
Tests for the install pipeline — stage order, reinstall, failures, activation.
"""

import os
from pathlib import Path

import pytest

from pyvm.core.errors import BootstrapError, DownloadError, InstallationIncomplete, UnknownVersion
from pyvm.core.models.session import InstallSession, InstallStage
from pyvm.core.services.install.legacy import LegacyInstallStrategy
from pyvm.core.services.install.modern import ModernInstallStrategy
from pyvm.core.services.install.pipeline import InstallPipeline
from tests.helpers import NOW, NUGET, fake_msi_extract, make_nupkg

NUPKG_URL = f"{NUGET}/python/3.12.0/python.3.12.0.nupkg"


@pytest.fixture
def events():
    return []


@pytest.fixture
def pipeline(settings, registry, cache, downloader, events):
    downloader.set_content(NUPKG_URL, make_nupkg())

    def on_progress(session, status):
        events.append((session.stage, status))

    return InstallPipeline(settings, registry, cache, on_progress=on_progress)


class TestStrategySelection:
    def test_major_two_is_legacy(self, pipeline, catalog):
        assert isinstance(pipeline.select_strategy(catalog.get("2.7.18")), LegacyInstallStrategy)

    def test_three_is_modern(self, pipeline, catalog):
        assert isinstance(pipeline.select_strategy(catalog.get("3.12.0")), ModernInstallStrategy)


class TestInstallPipeline:
    def test_install_latest(self, pipeline, settings):
        installed = pipeline.install("latest", now=NOW)

        final = settings.versions_dir / "3.12.0"
        assert installed == final.resolve()
        assert (final / "python312._pth").is_file()
        # the downloaded package is removed
        assert not (settings.app_root / "python.3.12.0.nupkg").exists()
        assert not (settings.versions_dir / "3.12.0temp").exists()
        # and the alias now points at the new tree
        assert Path(os.readlink(settings.alias)) == installed

    def test_stage_order(self, pipeline, events):
        pipeline.install("3.12.0", now=NOW)
        started = [stage for stage, status in events if status == "started"]
        assert started == [
            InstallStage.REFRESH_CATALOG,
            InstallStage.RESOLVE,
            InstallStage.PREPARE,
            InstallStage.DOWNLOAD,
            InstallStage.TRANSFORM,
            InstallStage.CLEANUP,
            InstallStage.ACTIVATE,
        ]
        assert all(status in ("started", "done") for _, status in events)

    def test_no_activate(self, pipeline, settings, events):
        pipeline.install("3.12.0", activate=False, now=NOW)
        assert not settings.alias.is_symlink()
        assert InstallStage.ACTIVATE not in {stage for stage, _ in events}

    def test_reinstall_starts_clean(self, pipeline, settings):
        pipeline.install("3.12.0", activate=False, now=NOW)
        stray = settings.versions_dir / "3.12.0" / "stray.txt"
        stray.write_text("left behind")
        (settings.versions_dir / "3.12.0temp").mkdir()

        pipeline.install("3.12.0", activate=False, now=NOW)

        assert not stray.exists()
        assert (settings.versions_dir / "3.12.0" / "python.exe").is_file()

    def test_legacy_install(self, pipeline, settings, runner):
        runner.set_handler("msiexec", fake_msi_extract)
        installed = pipeline.install("2.7.18", now=NOW)

        assert installed.name == "2.7.18"
        assert not (settings.app_root / "python-2.7.18.amd64.msi").exists()
        assert not (settings.versions_dir / "2.7.18temp").exists()
        assert runner.call_log[0].program == "msiexec"

    def test_unknown_version(self, pipeline, events, downloader):
        with pytest.raises(UnknownVersion):
            pipeline.install("9.9.9", now=NOW)
        assert events[-1] == (InstallStage.RESOLVE, "failed")
        assert NUPKG_URL not in downloader.urls

    def test_download_failure(self, pipeline, settings, downloader, events):
        downloader.set_failure(NUPKG_URL, "connection reset")
        with pytest.raises(DownloadError, match="connection reset"):
            pipeline.install("3.12.0", now=NOW)
        assert events[-1] == (InstallStage.DOWNLOAD, "failed")
        assert not (settings.versions_dir / "3.12.0").exists()

    def test_transform_failure_leaves_tree(self, pipeline, settings, runner):
        runner.set_failure("get-pip.py", "SSL error")
        with pytest.raises(BootstrapError, match="SSL error"):
            pipeline.install("3.12.0", now=NOW)
        # no rollback; the next install clears it
        assert (settings.versions_dir / "3.12.0").is_dir()
        assert not settings.alias.is_symlink()

    def test_empty_result_is_incomplete(self, pipeline, monkeypatch, events):
        monkeypatch.setattr(ModernInstallStrategy, "install", lambda self, session: None)
        with pytest.raises(InstallationIncomplete, match="3.12.0"):
            pipeline.install("3.12.0", now=NOW)
        assert events[-1] == (InstallStage.TRANSFORM, "failed")

    def test_uses_cached_catalog(self, pipeline, downloader):
        downloader.set_content(f"{NUGET}/python/3.11.4/python.3.11.4.nupkg", make_nupkg())
        pipeline.install("3.12.0", activate=False, now=NOW)
        index_calls = [u for u in downloader.urls if u.endswith("index.json")]
        pipeline.install("3.11.4", activate=False, now=NOW)
        assert [u for u in downloader.urls if u.endswith("index.json")] == index_calls

    def test_plan_paths(self, pipeline, settings, catalog):
        modern = InstallSession(token="3.12.0", descriptor=catalog.get("3.12.0"))
        pipeline.plan_paths(modern)
        assert modern.final_path == modern.unpacked_path == settings.versions_dir / "3.12.0"
        assert modern.temp_path == settings.versions_dir / "3.12.0temp"
        assert modern.offline_path == settings.app_root / "python.3.12.0.nupkg"

        legacy = InstallSession(token="2.7.18", descriptor=catalog.get("2.7.18"))
        pipeline.plan_paths(legacy)
        assert legacy.temp_path is None
