"""
Tests for the install strategies and the tree layout helpers they share.
"""

import zipfile
from pathlib import Path

import pytest

from pyvm.core.errors import BootstrapError, DownloadError, ExtractionError, LayoutError
from pyvm.core.models.session import InstallSession
from pyvm.core.services.install.layout import flatten_dir, prune_except, pth_content, write_pth
from pyvm.core.services.install.legacy import LegacyInstallStrategy
from pyvm.core.services.install.modern import ModernInstallStrategy
from tests.helpers import fake_msi_extract, make_nupkg

EXPECTED_PTH = (
    "python312.zip\n"
    ".\n"
    "\n"
    "# Uncomment to run site.main() automatically\n"
    "#import site\n"
    "\n"
    "Lib\\site-packages"
)


# ── Layout ───────────────────────────────────────────────────────────


class TestLayout:
    def test_pth_content(self):
        assert pth_content("python312") == EXPECTED_PTH

    def test_write_pth_is_byte_exact(self, tmp_path: Path):
        path = write_pth(tmp_path, "python312")
        assert path.name == "python312._pth"
        assert path.read_bytes() == EXPECTED_PTH.encode("utf-8")

    def test_write_pth_missing_dir(self, tmp_path: Path):
        with pytest.raises(LayoutError):
            write_pth(tmp_path / "nope", "python312")

    def test_flatten_dir(self, tmp_path: Path):
        (tmp_path / "DLLs" / "sub").mkdir(parents=True)
        (tmp_path / "DLLs" / "a.pyd").write_text("new")
        (tmp_path / "DLLs" / "sub" / "b.dll").write_text("b")
        (tmp_path / "a.pyd").write_text("old")

        assert flatten_dir(tmp_path, "DLLs") == 2
        assert not (tmp_path / "DLLs").exists()
        assert (tmp_path / "a.pyd").read_text() == "new"
        assert (tmp_path / "sub" / "b.dll").is_file()

    def test_flatten_missing_dir(self, tmp_path: Path):
        with pytest.raises(LayoutError, match="DLLs"):
            flatten_dir(tmp_path, "DLLs")

    def test_prune_except(self, tmp_path: Path):
        (tmp_path / "site-packages").mkdir()
        (tmp_path / "site-packages-extra").mkdir()
        (tmp_path / "os.py").write_text("")

        removed = prune_except(tmp_path, "site-packages")

        assert removed == ["os.py", "site-packages-extra"]
        assert [p.name for p in tmp_path.iterdir()] == ["site-packages"]


# ── Modern (3.x) ─────────────────────────────────────────────────────


def _modern_session(settings, catalog, version: str = "3.12.0", **nupkg) -> InstallSession:
    descriptor = catalog.get(version)
    final = settings.versions_dir / version
    offline = settings.app_root / descriptor.installer_filename
    offline.parent.mkdir(parents=True, exist_ok=True)
    offline.write_bytes(make_nupkg(**nupkg))
    return InstallSession(
        token=version,
        descriptor=descriptor,
        offline_path=offline,
        unpacked_path=final,
        temp_path=final.with_name(version + "temp"),
        final_path=final,
    )


class TestModernInstallStrategy:
    def test_layout(self, settings, registry, catalog):
        session = _modern_session(settings, catalog)
        installed = ModernInstallStrategy(settings, registry).install(session)

        final = settings.versions_dir / "3.12.0"
        assert installed == final.resolve()
        assert (final / "python.exe").is_file()
        assert not session.temp_path.exists()
        # DLLs sit next to the interpreter
        assert (final / "_ssl.pyd").is_file()
        assert (final / "sqlite3.dll").is_file()
        assert not (final / "DLLs").exists()
        # Lib keeps only site-packages; the rest is zipped
        assert [p.name for p in (final / "Lib").iterdir()] == ["site-packages"]
        with zipfile.ZipFile(final / "python312.zip") as zf:
            assert sorted(zf.namelist()) == ["json/__init__.py", "os.py"]
        assert (final / "python312._pth").read_bytes() == EXPECTED_PTH.encode("utf-8")
        # package metadata outside tools/ is not carried over
        assert not (final / "python.nuspec").exists()

    def test_downloads_get_pip_and_bootstraps(self, settings, registry, catalog, downloader, runner):
        session = _modern_session(settings, catalog)
        ModernInstallStrategy(settings, registry).install(session)

        final = settings.versions_dir / "3.12.0"
        script = final / "Tools" / "get-pip.py"
        assert downloader.call_log[-1] == ("https://bootstrap.pypa.io/get-pip.py", script)
        assert [c.argv for c in runner.call_log] == [
            [str(final / "python.exe"), str(script)],
            [str(final / "python.exe"), "-m", "pip", "install", "--upgrade", "pip"],
        ]

    def test_bundled_get_pip_not_downloaded(self, settings, registry, catalog, downloader):
        session = _modern_session(settings, catalog, extra={"tools/Tools/get-pip.py": "# pip"})
        ModernInstallStrategy(settings, registry).install(session)
        assert "https://bootstrap.pypa.io/get-pip.py" not in downloader.urls

    def test_easy_install_quirk(self, settings, registry, catalog, runner):
        session = _modern_session(settings, catalog, version="3.6.0")
        ModernInstallStrategy(settings, registry).install(session)
        assert runner.call_log[0].args == ["-m", "easy_install", "pip"]
        assert (settings.versions_dir / "3.6.0" / "python36._pth").is_file()

    def test_missing_tools_dir(self, settings, registry, catalog):
        session = _modern_session(settings, catalog, root="content")
        with pytest.raises(ExtractionError, match="tools"):
            ModernInstallStrategy(settings, registry).install(session)

    def test_corrupt_package(self, settings, registry, catalog):
        session = _modern_session(settings, catalog)
        session.offline_path.write_bytes(b"not a zip")
        with pytest.raises(ExtractionError):
            ModernInstallStrategy(settings, registry).install(session)

    def test_stdlib_compress_failure(self, settings, mock_archiver_registry, catalog):
        archiver = mock_archiver_registry.archiver
        archiver.set_tree("python.3.12.0.nupkg", {
            "tools/python.exe": "MZ",
            "tools/Lib/os.py": "# os",
            "tools/DLLs/_ssl.pyd": "pyd",
        })
        archiver.set_failure("compress", "disk full")
        session = _modern_session(settings, catalog)

        with pytest.raises(LayoutError, match="disk full"):
            ModernInstallStrategy(settings, mock_archiver_registry).install(session)
        # the loose stdlib is only pruned after a successful compress
        assert (settings.versions_dir / "3.12.0" / "Lib" / "os.py").is_file()

    def test_get_pip_download_failure(self, settings, registry, catalog, downloader):
        downloader.set_failure("https://bootstrap.pypa.io/get-pip.py", "503")
        session = _modern_session(settings, catalog)
        with pytest.raises(DownloadError, match="503"):
            ModernInstallStrategy(settings, registry).install(session)

    def test_bootstrap_failure(self, settings, registry, catalog, runner):
        runner.set_failure("get-pip.py", "SSL error")
        session = _modern_session(settings, catalog)
        with pytest.raises(BootstrapError, match="SSL error"):
            ModernInstallStrategy(settings, registry).install(session)
        # the upgrade step never ran
        assert runner.call_count == 1


# ── Legacy (2.x) ─────────────────────────────────────────────────────


def _legacy_session(settings, catalog, version: str = "2.7.18") -> InstallSession:
    descriptor = catalog.get(version)
    unpacked = settings.versions_dir / version
    offline = settings.app_root / descriptor.installer_filename
    offline.parent.mkdir(parents=True, exist_ok=True)
    offline.write_bytes(b"MSI")
    return InstallSession(
        token=version,
        descriptor=descriptor,
        offline_path=offline,
        unpacked_path=unpacked,
        final_path=unpacked,
    )


class TestLegacyInstallStrategy:
    def test_install(self, settings, registry, catalog, runner):
        runner.set_handler("msiexec", fake_msi_extract)
        session = _legacy_session(settings, catalog)

        installed = LegacyInstallStrategy(settings, registry).install(session)

        unpacked = (settings.versions_dir / "2.7.18").resolve()
        assert installed == unpacked
        assert (unpacked / "_socket.pyd").is_file()
        assert not (unpacked / "DLLs").exists()

        msi, ensurepip, upgrade = runner.call_log
        assert msi.argv == [
            "msiexec", "/n", "/a", str(session.offline_path.resolve()), "/qn", f"TARGETDIR={unpacked}",
        ]
        assert ensurepip.argv == [str(unpacked / "python.exe"), "-m", "ensurepip", "--default-pip"]
        assert upgrade.args == ["-m", "pip", "install", "--upgrade", "pip"]

    def test_msiexec_failure(self, settings, registry, catalog, runner):
        runner.set_failure("msiexec", "1619")
        session = _legacy_session(settings, catalog)
        with pytest.raises(ExtractionError, match="Couldn't unpack the requested data"):
            LegacyInstallStrategy(settings, registry).install(session)

    def test_ensurepip_failure(self, settings, registry, catalog, runner):
        runner.set_handler("msiexec", fake_msi_extract)
        runner.set_failure("ensurepip", "no module named ensurepip")
        session = _legacy_session(settings, catalog)
        with pytest.raises(BootstrapError, match="ensurepip"):
            LegacyInstallStrategy(settings, registry).install(session)
        # the tmp dir is named after this test; only the ensurepip command fails
        msi, failed = runner.call_log
        assert msi.program == "msiexec"
        assert failed.args[:2] == ["-m", "ensurepip"]
