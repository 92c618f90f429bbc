"""
Configuration loader — reads the optional installer settings file.

Defaults reproduce the stock installer exactly, so most runs never
touch a file.  When one is given (``--config`` or the
``MINTAS_INSTALLER_CONFIG`` env var) it is read as YAML, validated
against ``InstallerSettings`` and merged over the defaults.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MINTAS_INSTALLER_CONFIG"

DEFAULT_REPOSITORY = "NotBeastR/mintas-scr"
DEFAULT_API_BASE = "https://api.github.com"


class ConfigError(Exception):
    """Raised when installer configuration is invalid or missing."""


class InstallerSettings(BaseModel):
    """Everything the pipeline needs to know that is not detected at runtime."""

    repository: str = DEFAULT_REPOSITORY
    api_base: str = DEFAULT_API_BASE
    binary_name: str = "mintas"
    app_dir_name: str = "Mintas"
    unix_install_dir: str = "/usr/local/bin"
    windows_install_root: str | None = None  # None → %LOCALAPPDATA%
    timeout: float = Field(default=30.0, gt=0)
    user_agent: str = "mintas-installer/1.0"

    @property
    def api_url(self) -> str:
        """The "latest release" endpoint for the configured repository."""
        return f"{self.api_base.rstrip('/')}/repos/{self.repository}/releases/latest"

    def windows_app_dir(self, environ: dict[str, str] | None = None) -> Path | None:
        """Resolve the per-user application directory, or None if unknown."""
        root = self.windows_install_root
        if not root:
            env = os.environ if environ is None else environ
            root = env.get("LOCALAPPDATA", "")
        if not root:
            return None
        return Path(root) / self.app_dir_name

    def unix_binary_path(self) -> Path:
        return Path(self.unix_install_dir) / self.binary_name


def resolve_config_path(explicit: Path | None = None) -> Path | None:
    """CLI flag wins over the env var; neither means built-in defaults."""
    if explicit is not None:
        return explicit
    from_env = os.environ.get(CONFIG_ENV_VAR, "").strip()
    return Path(from_env) if from_env else None


def load_settings(path: Path | None = None) -> InstallerSettings:
    """Load and validate installer settings.

    Args:
        path: Explicit settings file.  If None, ``MINTAS_INSTALLER_CONFIG``
            is consulted, and failing that the defaults are returned.

    Returns:
        Validated InstallerSettings.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    path = resolve_config_path(path)
    if path is None:
        logger.debug("No settings file, using defaults")
        return InstallerSettings()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading installer settings from %s", path)

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

    # The YAML may wrap everything under an "installer" key or be flat
    settings_data = data.get("installer", data)
    if not isinstance(settings_data, dict):
        raise ConfigError(f"Expected 'installer' to be a mapping in {path}")

    try:
        settings = InstallerSettings.model_validate(settings_data)
    except ValidationError as e:
        raise ConfigError(f"Invalid installer configuration: {e}") from e

    logger.info("Loaded settings for repository '%s'", settings.repository)
    return settings
