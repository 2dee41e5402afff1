"""
Command builders — every external command pyvm runs, as CommandSpecs.

Pure functions: paths in, CommandSpecs out. Nothing here executes
anything, so the strategies can be tested against a mock runner.
"""

from __future__ import annotations

from pathlib import Path

from pyvm.core.models.command import CommandSpec

# get-pip.py is broken on these releases (pypa/pip#5292); easy_install still works
MALFUNCTIONING_VERSIONS = ("3.5.2", "3.5.2.1", "3.5.2.2", "3.6.0")


def msi_extract(msi: Path, target_dir: Path) -> CommandSpec:
    """Administrative install: unpack an MSI without registering it.

    msiexec only honours a quoted property value in the form
    ``TARGETDIR="C:\\dir with spaces"``, so the command line is spelled
    out rather than joined from ``args``.
    """
    return CommandSpec(
        program="msiexec",
        args=["/n", "/a", str(msi), "/qn", f"TARGETDIR={target_dir}"],
        command_line=f'msiexec /n /a "{msi}" /qn TARGETDIR="{target_dir}"',
    )


def ensurepip(python: Path) -> CommandSpec:
    return CommandSpec(program=str(python), args=["-m", "ensurepip", "--default-pip"])


def get_pip(python: Path, script: Path) -> CommandSpec:
    return CommandSpec(program=str(python), args=[str(script)])


def easy_install_pip(python: Path) -> CommandSpec:
    # only pip is requested; naming easy_install as a second requirement
    # would make it try to fetch a distribution of that name from PyPI
    return CommandSpec(program=str(python), args=["-m", "easy_install", "pip"])


def upgrade_pip(python: Path) -> CommandSpec:
    return CommandSpec(program=str(python), args=["-m", "pip", "install", "--upgrade", "pip"])


def legacy_bootstrap(python: Path) -> list[CommandSpec]:
    """pip for 2.x: ensurepip ships with the MSI."""
    return [ensurepip(python), upgrade_pip(python)]


def modern_bootstrap(version: str, python: Path, script: Path) -> list[CommandSpec]:
    """pip for 3.x: get-pip.py, or easy_install on the releases it breaks."""
    if version in MALFUNCTIONING_VERSIONS:
        first = easy_install_pip(python)
    else:
        first = get_pip(python, script)
    return [first, upgrade_pip(python)]

