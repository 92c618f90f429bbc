"""
Mintas installer — CLI entrypoint.

Usage:
    mintas-installer              # install (default)
    mintas-installer install
    mintas-installer uninstall
    python -m mintas_installer.main --help
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from mintas_installer import __version__
from mintas_installer.core.observability.logging_config import resolve_level, setup_logging

PROG_NAME = "mintas-installer"
ACTIONS = ("install", "uninstall")


@click.command(
    context_settings={"ignore_unknown_options": True, "help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__, prog_name=PROG_NAME)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
@click.option("--quiet", "-q", is_flag=True, help="Only log errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to an installer settings YAML file.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Print the run report as JSON.")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def cli(
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    as_json: bool,
    args: tuple[str, ...],
) -> None:
    """Install or uninstall Mintas from its latest GitHub release.

    ACTION is 'install' (the default) or 'uninstall'.
    """
    from mintas_installer.ui.cli.console import echo_usage

    if len(args) > 1 or (args and args[0] not in ACTIONS):
        echo_usage(PROG_NAME)
        sys.exit(1)
    action = args[0] if args else "install"

    setup_logging(resolve_level(debug=debug, verbose=verbose, quiet=quiet))

    sys.exit(run_action(action, Path(config_path) if config_path else None, as_json=as_json))


def run_action(action: str, config_path: Path | None = None, *, as_json: bool = False, **overrides) -> int:
    """Run one workflow and print its outcome.  Returns the exit status.

    ``overrides`` are passed through to the ``Orchestrator`` constructor.
    """
    from mintas_installer.core.config.loader import ConfigError, load_settings
    from mintas_installer.core.services.install.orchestration.orchestrator import Orchestrator
    from mintas_installer.ui.cli.console import echo_report_json, echo_status, echo_summary

    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        echo_status("error", str(e))
        return 1

    orchestrator = Orchestrator(
        settings,
        on_status=None if as_json else echo_status,
        **overrides,
    )
    report = orchestrator.install() if action == "install" else orchestrator.uninstall()

    if as_json:
        echo_report_json(report)
    else:
        echo_summary(report, settings.binary_name)
    return 0 if report.ok else 1


def main() -> None:
    cli(prog_name=PROG_NAME)


if __name__ == "__main__":
    main()
