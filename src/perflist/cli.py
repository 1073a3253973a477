"""Command-line interface for perflist.

``perflist [PERF_DIR]`` runs every benchmark file under PERF_DIR (relative
to the project root), records the results under the project's version
in the ledger and prints a comparison with the closest earlier version.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from perflist import __version__
from perflist.config import CONFIG_FILENAME, build_config, load_config_file, validate_config
from perflist.discovery import find_project_root
from perflist.display import format_report
from perflist.errors import PerfListError
from perflist.logging import setup_logging
from perflist.runner import run_benchmarks


@click.command()
@click.version_option(version=__version__)
@click.argument("perf_dir", required=False, default=None)
@click.option(
    "--project-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory to start the project root search from (default: current directory).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help=f"YAML config file (default: {CONFIG_FILENAME} in the project root, if present).",
)
@click.option("--ledger", "ledger_file", type=str, default=None, help="Ledger file name.")
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output.")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors.")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Also write a DEBUG log to this file.",
)
def main(
    perf_dir: str | None,
    project_dir: Path | None,
    config_path: Path | None,
    ledger_file: str | None,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Run micro-benchmarks and compare them with the previous version.

    PERF_DIR is the benchmark directory relative to the project root
    (default: perf).  Benchmark files are named ``<name>.perf.py`` and use
    the ``benchmark`` and ``scenario`` functions provided to them.

    \b
    Examples:
        perflist
        perflist benchmarks --ledger timings.list
    """
    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    try:
        file_data: dict[str, Any] = {}
        if config_path is not None:
            file_data = load_config_file(config_path)

        start_dir = project_dir or Path.cwd()
        manifest_file = file_data.get("manifest_file", "pyproject.toml")
        root = find_project_root(start_dir, manifest_file)

        if config_path is None and (root / CONFIG_FILENAME).is_file():
            file_data = load_config_file(root / CONFIG_FILENAME)

        config = build_config(
            file_data,
            cli_overrides={
                "perf_dir": perf_dir,
                "ledger_file": ledger_file,
            },
        )
        errors = validate_config(config)
        if errors:
            details = "; ".join(f"{e.field}: {e.message}" for e in errors)
            raise click.UsageError(f"Invalid configuration: {details}")

        outcome = run_benchmarks(config, root)
    except PerfListError as exc:
        raise click.ClickException(str(exc)) from exc
    except KeyboardInterrupt:
        click.echo("\nBenchmark run interrupted.", err=True)
        raise SystemExit(130)  # noqa: B904

    if not outcome.found_benchmarks:
        click.secho(
            f"No performance tests found in directory: '{config.perf_dir}'",
            fg="red",
            bold=True,
        )
        return

    for line in format_report(outcome.ledger, outcome.version_key):
        click.echo(line)
