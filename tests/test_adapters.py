"""
Tests for injected capabilities: elevation providers, environment
stores, their mocks, and the subprocess runner underneath.
"""

import sys

import pytest

from mintas_installer.adapters import elevation as elevation_mod
from mintas_installer.adapters import powershell as powershell_mod
from mintas_installer.adapters.elevation import SudoElevation
from mintas_installer.adapters.mock import InMemoryEnvironmentStore, MockElevation
from mintas_installer.adapters.powershell import PowerShellEnvironmentStore, _ps_quote
from mintas_installer.core.errors import ElevationDenied, PathRegistrationWarning
from mintas_installer.core.services.install.execution.subprocess_runner import run_command

# ── Subprocess runner ───────────────────────────────────────────────


class TestRunCommand:
    def test_success(self):
        result = run_command([sys.executable, "-c", "print('hello')"])
        assert result["ok"] is True
        assert result["stdout"].strip() == "hello"
        assert result["elapsed_ms"] >= 0

    def test_nonzero_exit(self):
        result = run_command([sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"])
        assert result["ok"] is False
        assert result["returncode"] == 3
        assert "boom" in result["stderr"]

    def test_missing_executable(self):
        result = run_command(["definitely-not-a-real-command-xyz"])
        assert result["ok"] is False
        assert "not found" in result["error"]

    def test_timeout(self):
        result = run_command([sys.executable, "-c", "import time; time.sleep(5)"], timeout=0.5)
        assert result["ok"] is False
        assert "timed out" in result["error"]

    def test_long_stdout_kept_whole(self):
        result = run_command([sys.executable, "-c", "print(';'.join(['C:\\\\dir'] * 1500))"])
        assert result["ok"] is True
        assert len(result["stdout"].strip().split(";")) == 1500


# ── Elevation ───────────────────────────────────────────────────────


class TestSudoElevation:
    def test_root_runs_directly(self, monkeypatch):
        monkeypatch.setattr(elevation_mod, "_is_root", lambda: True)
        calls = []
        monkeypatch.setattr(elevation_mod, "run_command", lambda cmd, **kw: calls.append(cmd) or {"ok": True})

        SudoElevation().run(["mv", "a", "b"])
        assert calls == [["mv", "a", "b"]]

    def test_prefixes_sudo(self, monkeypatch):
        monkeypatch.setattr(elevation_mod, "_is_root", lambda: False)
        monkeypatch.setattr(elevation_mod.shutil, "which", lambda name: "/usr/bin/sudo")
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append((cmd, kwargs))
            return {"ok": True, "stdout": ""}

        monkeypatch.setattr(elevation_mod, "run_command", fake_run)
        SudoElevation().run(["chmod", "+x", "/usr/local/bin/mintas"])
        assert calls == [(["sudo", "chmod", "+x", "/usr/local/bin/mintas"], {"interactive": True})]

    def test_no_sudo_binary(self, monkeypatch):
        monkeypatch.setattr(elevation_mod, "_is_root", lambda: False)
        monkeypatch.setattr(elevation_mod.shutil, "which", lambda name: None)
        provider = SudoElevation()
        assert provider.is_available() is False
        with pytest.raises(ElevationDenied):
            provider.run(["rm", "-f", "/usr/local/bin/mintas"])

    def test_wrong_password_is_denial(self, monkeypatch):
        monkeypatch.setattr(elevation_mod, "_is_root", lambda: False)
        monkeypatch.setattr(elevation_mod.shutil, "which", lambda name: "/usr/bin/sudo")
        monkeypatch.setattr(
            elevation_mod,
            "run_command",
            lambda cmd, **kw: {"ok": False, "error": "Command failed (exit 1)", "stderr": "sudo: 3 incorrect password attempts"},
        )
        with pytest.raises(ElevationDenied, match="declined"):
            SudoElevation().run(["mv", "a", "b"])

    def test_command_failure_is_returned(self, monkeypatch):
        monkeypatch.setattr(elevation_mod, "_is_root", lambda: False)
        monkeypatch.setattr(elevation_mod.shutil, "which", lambda name: "/usr/bin/sudo")
        monkeypatch.setattr(
            elevation_mod,
            "run_command",
            lambda cmd, **kw: {"ok": False, "error": "Command failed (exit 1)", "stderr": "mv: cannot stat 'a'"},
        )
        result = SudoElevation().run(["mv", "a", "b"])
        assert result["ok"] is False


class TestMockElevation:
    def test_records_and_executes(self, tmp_path):
        src = tmp_path / "a"
        src.write_text("x")
        mock = MockElevation()
        result = mock.run(["mv", str(src), str(tmp_path / "b")])
        assert result["ok"]
        assert (tmp_path / "b").exists()
        assert mock.call_count == 1

    def test_no_execute(self, tmp_path):
        mock = MockElevation(execute=False)
        assert mock.run(["rm", "-rf", str(tmp_path)])["ok"]
        assert tmp_path.exists()

    def test_deny(self):
        mock = MockElevation(deny=True)
        with pytest.raises(ElevationDenied):
            mock.run(["true"])
        assert mock.call_log == [["true"]]

    def test_reset(self):
        mock = MockElevation(execute=False)
        mock.run(["true"])
        mock.reset()
        assert mock.call_count == 0

    def test_repr(self):
        assert "mock" in repr(MockElevation())


# ── Environment stores ──────────────────────────────────────────────


class TestPowerShellEnvironmentStore:
    def test_get_user_path(self, monkeypatch):
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append(cmd)
            return {"ok": True, "stdout": "C:\\A;C:\\B\r\n"}

        monkeypatch.setattr(powershell_mod, "run_command", fake_run)
        assert PowerShellEnvironmentStore().get_user_path() == "C:\\A;C:\\B"
        assert calls[0][0] == "powershell.exe"
        assert "GetEnvironmentVariable('Path', 'User')" in calls[0][-1]

    def test_set_user_path_quotes_value(self, monkeypatch):
        calls = []
        monkeypatch.setattr(powershell_mod, "run_command", lambda cmd, **kw: calls.append(cmd) or {"ok": True})
        PowerShellEnvironmentStore().set_user_path("C:\\O'Brien\\bin")
        assert "'C:\\O''Brien\\bin'" in calls[0][-1]
        assert "'User'" in calls[0][-1]

    def test_failure_is_warning(self, monkeypatch):
        monkeypatch.setattr(
            powershell_mod,
            "run_command",
            lambda cmd, **kw: {"ok": False, "error": "Command not found: powershell.exe"},
        )
        with pytest.raises(PathRegistrationWarning, match="powershell.exe"):
            PowerShellEnvironmentStore().get_user_path()

    def test_quote(self):
        assert _ps_quote("a'b") == "'a''b'"


class TestInMemoryEnvironmentStore:
    def test_round_trip(self):
        store = InMemoryEnvironmentStore("C:\\A")
        store.set_user_path("C:\\A;C:\\B")
        assert store.get_user_path() == "C:\\A;C:\\B"
        assert store.writes == ["C:\\A;C:\\B"]

    def test_failures(self):
        with pytest.raises(PathRegistrationWarning):
            InMemoryEnvironmentStore(fail_reads=True).get_user_path()
        with pytest.raises(PathRegistrationWarning):
            InMemoryEnvironmentStore(fail_writes=True).set_user_path("x")
