"""
Execution — core subprocess runner.

The SINGLE PLACE where ``subprocess.run`` is called by the installer.
Elevation providers and the PowerShell environment store go through
here; nothing else spawns processes.
"""

from __future__ import annotations

import logging
import subprocess
import time
from typing import Any

logger = logging.getLogger(__name__)

# stderr only: stdout is data (the user PATH) and must arrive whole
_STDERR_TAIL = 2000


def run_command(
    cmd: list[str],
    *,
    timeout: float | None = None,
    interactive: bool = False,
) -> dict[str, Any]:
    """Run an external command and report the outcome as a dict.

    Never raises for non-zero exits, timeouts or a missing executable;
    the caller decides what a failure means.

    Args:
        cmd: Command list for ``subprocess.run()``.
        timeout: Seconds before ``TimeoutExpired``.  None waits forever,
            which is what an interactive credential prompt needs.
        interactive: Leave stdin attached to the terminal (sudo prompts).

    Returns:
        ``{"ok": True, "stdout": "...", "elapsed_ms": N}`` on success,
        ``{"ok": False, "error": "...", "returncode": N, ...}`` on failure.
    """
    logger.debug("Running: %s", cmd)
    start = time.monotonic()
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            stdin=None if interactive else subprocess.DEVNULL,
        )
    except subprocess.TimeoutExpired:
        return {"ok": False, "error": f"Command timed out ({timeout}s)", "returncode": None}
    except FileNotFoundError:
        return {"ok": False, "error": f"Command not found: {cmd[0]}", "returncode": None}
    except OSError as e:
        logger.debug("Subprocess error for %s: %s", cmd, e)
        return {"ok": False, "error": str(e), "returncode": None}

    elapsed_ms = int((time.monotonic() - start) * 1000)
    stdout = result.stdout or ""
    stderr = result.stderr[-_STDERR_TAIL:] if result.stderr else ""

    if result.returncode == 0:
        return {"ok": True, "stdout": stdout, "elapsed_ms": elapsed_ms}

    return {
        "ok": False,
        "error": f"Command failed (exit {result.returncode})",
        "returncode": result.returncode,
        "stderr": stderr,
        "stdout": stdout,
        "elapsed_ms": elapsed_ms,
    }
