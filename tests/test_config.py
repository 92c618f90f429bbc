"""
Tests for installer settings loading.
"""

import textwrap
from pathlib import Path

import pytest

from mintas_installer.core.config.loader import (
    CONFIG_ENV_VAR,
    ConfigError,
    InstallerSettings,
    load_settings,
)


class TestDefaults:
    def test_no_file_gives_defaults(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        settings = load_settings()
        assert settings == InstallerSettings()
        assert settings.repository == "NotBeastR/mintas-scr"
        assert settings.api_url == "https://api.github.com/repos/NotBeastR/mintas-scr/releases/latest"
        assert settings.unix_install_dir == "/usr/local/bin"
        assert settings.binary_name == "mintas"

    def test_api_url_tolerates_trailing_slash(self):
        settings = InstallerSettings(api_base="https://ghe.example.com/api/v3/", repository="o/r")
        assert settings.api_url == "https://ghe.example.com/api/v3/repos/o/r/releases/latest"

    def test_windows_app_dir(self, tmp_path):
        settings = InstallerSettings()
        assert settings.windows_app_dir({"LOCALAPPDATA": str(tmp_path)}) == tmp_path / "Mintas"
        assert settings.windows_app_dir({}) is None

    def test_windows_root_override(self, tmp_path):
        settings = InstallerSettings(windows_install_root=str(tmp_path))
        assert settings.windows_app_dir({}) == tmp_path / "Mintas"

    def test_unix_binary_path(self):
        assert InstallerSettings().unix_binary_path() == Path("/usr/local/bin/mintas")


class TestLoadFile:
    def _write(self, tmp_path: Path, content: str) -> Path:
        path = tmp_path / "installer.yml"
        path.write_text(textwrap.dedent(content))
        return path

    def test_flat(self, tmp_path):
        path = self._write(tmp_path, """\
            repository: acme/mintas-fork
            unix_install_dir: /opt/bin
            timeout: 5
        """)
        settings = load_settings(path)
        assert settings.repository == "acme/mintas-fork"
        assert settings.unix_install_dir == "/opt/bin"
        assert settings.timeout == 5
        assert settings.binary_name == "mintas"

    def test_nested_under_installer(self, tmp_path):
        path = self._write(tmp_path, """\
            installer:
              app_dir_name: MintasBeta
        """)
        assert load_settings(path).app_dir_name == "MintasBeta"

    def test_empty_file(self, tmp_path):
        path = self._write(tmp_path, "")
        assert load_settings(path) == InstallerSettings()

    def test_env_var(self, tmp_path, monkeypatch):
        path = self._write(tmp_path, "binary_name: mintas2\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert load_settings().binary_name == "mintas2"

    def test_explicit_beats_env(self, tmp_path, monkeypatch):
        env_path = self._write(tmp_path, "binary_name: from-env\n")
        explicit = tmp_path / "explicit.yml"
        explicit.write_text("binary_name: from-flag\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(env_path))
        assert load_settings(explicit).binary_name == "from-flag"


class TestLoadErrors:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("repository: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(path)

    def test_installer_key_not_a_mapping(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("installer: 3\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(path)

    def test_schema_violation(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("timeout: -1\n")
        with pytest.raises(ConfigError, match="Invalid installer configuration"):
            load_settings(path)
