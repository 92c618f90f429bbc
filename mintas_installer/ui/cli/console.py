"""
Console output — the colored status lines the user sees.

Green ``[INFO]`` for progress, yellow ``[WARN]`` for problems that do not
stop the run, red ``[ERROR]`` for the failure that did.  Everything goes
to stdout; diagnostic logging goes to stderr separately.
"""

from __future__ import annotations

import json

import click

from mintas_installer.core.models.run import RunReport

_STYLES = {
    "info": ("[INFO]", "green"),
    "warn": ("[WARN]", "yellow"),
    "error": ("[ERROR]", "red"),
}

USAGE = """\
Usage: {prog} [install|uninstall]
  install   - Install Mintas (default)
  uninstall - Uninstall Mintas"""


def echo_status(level: str, message: str) -> None:
    """Print one status line with a colored level tag."""
    tag, color = _STYLES.get(level, _STYLES["info"])
    click.secho(tag, fg=color, bold=level != "info", nl=False)
    click.echo(f" {message}")


def echo_usage(prog: str) -> None:
    click.echo(USAGE.format(prog=prog))


def echo_report_json(report: RunReport) -> None:
    click.echo(json.dumps(report.to_dict(), indent=2))


def echo_summary(report: RunReport, binary_name: str = "mintas") -> None:
    """Closing lines after a run, mirroring the stock installer's hints."""
    if not report.ok:
        return

    if report.operation == "uninstall":
        if report.changed:
            echo_status("info", "Mintas uninstalled")
        return

    location = report.location
    if location is not None and location.path_entry:
        echo_status(
            "info",
            f'Please restart your terminal or run: export PATH="$PATH:{location.path}"',
        )
    echo_status("info", f"Installation complete! Run '{binary_name} --help' to get started.")
