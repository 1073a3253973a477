"""Orchestration of one benchmark run.

A run moves through four stages: collecting (every benchmark file is
executed in a fresh :class:`RunContext`), persisting (the ledger entry
for the run's version key is replaced and the ledger rewritten),
reporting, and back to idle.  Nothing is written before collection has
finished, so a failing benchmark leaves the ledger untouched.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from perflist.collector import BenchmarkResult, RunContext
from perflist.config import PerfConfig
from perflist.discovery import iter_benchmark_files, load_benchmark_file
from perflist.ledger import Ledger, load_ledger, persist_ledger, record_run
from perflist.logging import get_logger
from perflist.version import (
    VersionKey,
    current_version_key,
    is_working_tree_dirty,
    read_project_version,
)

log = get_logger("runner")


@dataclass
class RunOutcome:
    """What a run produced."""

    project_dir: Path
    benchmark_dir: Path
    version_key: str = ""
    files: list[Path] = field(default_factory=list)
    results: BenchmarkResult = field(default_factory=dict)
    ledger: Ledger = field(default_factory=dict)
    ledger_path: Path | None = None

    @property
    def found_benchmarks(self) -> bool:
        return bool(self.files)


def run_benchmarks(
    config: PerfConfig,
    project_dir: Path,
    *,
    dirty_check: Callable[[Path], bool] = is_working_tree_dirty,
) -> RunOutcome:
    """Run every benchmark file under the configured directory.

    Args:
        config: Resolved configuration.
        project_dir: The project root.
        dirty_check: Decides whether the working tree has uncommitted
            changes.

    Returns:
        RunOutcome.  If no benchmark files were found, ``files`` is
        empty and the ledger was neither read nor written.
    """
    benchmark_dir = project_dir / config.perf_dir
    outcome = RunOutcome(project_dir=project_dir, benchmark_dir=benchmark_dir)

    outcome.files = list(iter_benchmark_files(benchmark_dir, config.file_suffix))
    if not outcome.files:
        log.debug("No performance tests found in directory: '%s'", config.perf_dir)
        return outcome

    # Read the history up front so a corrupt ledger aborts before timing.
    ledger_path = project_dir / config.ledger_file
    ledger = load_ledger(ledger_path)

    version = read_project_version(project_dir, config.manifest_file)
    # Reject versions the comparator cannot order before anything is timed.
    VersionKey.parse(version)
    outcome.version_key = current_version_key(version, dirty_check(project_dir))

    context = RunContext(default_count=config.default_count)
    for path in outcome.files:
        load_benchmark_file(path, context)
    outcome.results = context.results

    outcome.ledger = record_run(ledger, outcome.version_key, context.results)
    persist_ledger(ledger_path, outcome.ledger)
    outcome.ledger_path = ledger_path
    log.info(
        "Recorded %d benchmark(s) for v%s",
        len(outcome.results),
        outcome.version_key,
    )
    return outcome
