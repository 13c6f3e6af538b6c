"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from wrfbuild.core.config.settings import InstallerSettings
from wrfbuild.core.models.context import InstallationContext


@pytest.fixture
def settings(tmp_path: Path) -> InstallerSettings:
    """Default settings with logs kept inside the test's tmp dir."""
    log_dir = tmp_path / "logs"
    log_dir.mkdir()
    return InstallerSettings(log_dir=log_dir)


@pytest.fixture
def install_root(tmp_path: Path) -> Path:
    root = tmp_path / "wrf-install"
    root.mkdir()
    return root


@pytest.fixture
def ctx(install_root: Path) -> InstallationContext:
    """Context with NetCDF already resolved and four build cores."""
    context = InstallationContext(install_root=install_root, core_count=4)
    context.resolved_paths["netcdf"] = "/usr"
    return context


@pytest.fixture(autouse=True)
def _info_logging(caplog):
    """Capture INFO records from every installer module."""
    caplog.set_level(logging.INFO)


@pytest.fixture
def restore_logging():
    """Put the root logger back after a test that calls setup_logging()."""
    root = logging.getLogger()
    saved_level = root.level
    saved_raise = logging.raiseExceptions
    yield
    # pytest manages its own capture handlers
    for handler in root.handlers[:]:
        if not type(handler).__module__.startswith("_pytest"):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(saved_level)
    logging.raiseExceptions = saved_raise
