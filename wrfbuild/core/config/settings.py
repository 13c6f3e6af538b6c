"""
Installer settings — versions, URLs, file names.

Defaults reproduce a stock WRF/WPS install. A ``wrfbuild.yml`` file
can override any field; it is located through ``WRFBUILD_CONFIG`` or
by walking up from the working directory.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)

# Default config filename
SETTINGS_FILE = "wrfbuild.yml"
SETTINGS_ENV_VAR = "WRFBUILD_CONFIG"


class ConfigError(Exception):
    """Raised when the settings file is unreadable or invalid."""


class InstallerSettings(BaseModel):
    """Everything the installer treats as a tunable constant."""

    model_config = ConfigDict(extra="forbid")

    app_name: str = "WRF"
    companion_name: str = "WPS"

    main_version: str = "4.4.1"
    companion_version: str = "4.4.1"
    main_url_template: str = "https://github.com/wrf-model/WRF/archive/v{version}.tar.gz"
    companion_url_template: str = "https://github.com/wrf-model/WPS/archive/v{version}.tar.gz"

    # Build target passed to ./compile for the main application
    compile_target: str = "em_real"

    descriptor_name: str = "wrf_env.sh"
    log_file: str = "wrf_install.log"
    error_log_file: str = "wrf_error.log"
    log_dir: Path | None = None     # None → current working directory

    default_install_dir: str = "~/WRF"
    log_tail_lines: int = 20

    @property
    def main_url(self) -> str:
        return self.main_url_template.format(version=self.main_version)

    @property
    def companion_url(self) -> str:
        return self.companion_url_template.format(version=self.companion_version)

    def log_path(self) -> Path:
        return (self.log_dir or Path.cwd()) / self.log_file

    def error_log_path(self) -> Path:
        return (self.log_dir or Path.cwd()) / self.error_log_file


def find_settings_file(start_dir: Path | None = None) -> Path | None:
    """Locate ``wrfbuild.yml``.

    ``WRFBUILD_CONFIG`` wins when set. Otherwise search from
    ``start_dir`` (default: cwd) upward to the filesystem root.
    """
    explicit = os.environ.get(SETTINGS_ENV_VAR)
    if explicit:
        return Path(explicit).expanduser()

    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / SETTINGS_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_settings(path: Path | None = None) -> InstallerSettings:
    """Load installer settings, falling back to defaults.

    Args:
        path: Explicit settings file. If None, searches as described
            in :func:`find_settings_file`.

    Returns:
        Validated InstallerSettings.

    Raises:
        ConfigError: If a settings file was named or found but is invalid.
    """
    if path is None:
        path = find_settings_file()

    if path is None:
        logger.debug("No %s found, using built-in defaults", SETTINGS_FILE)
        return InstallerSettings()

    if not path.is_file():
        raise ConfigError(f"Settings file not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = InstallerSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.debug("Loaded settings from %s", path)
    return settings
