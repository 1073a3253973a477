"""Comparison of a run against the closest earlier recorded version.

For each benchmark of the current run, the reference point is the
greatest version key strictly below the current one that measured the
same benchmark.  The fastest scenario of the current run is compared
with the fastest scenario recorded at that version.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from perflist.collector import ScenarioResult
from perflist.errors import VersionKeyError
from perflist.ledger import Ledger
from perflist.logging import get_logger
from perflist.version import VersionKey

log = get_logger("compare")


class Verdict(enum.Enum):
    """Outcome of comparing two durations."""

    FASTER = "faster"
    SLOWER = "slower"
    EQUAL = "equal"


@dataclass(frozen=True)
class ScenarioTiming:
    """A scenario title with its average duration in milliseconds."""

    title: str
    duration: float


@dataclass(frozen=True)
class ComparisonPoint:
    """The fastest scenario of a benchmark at an earlier version."""

    version: str
    scenario: str
    duration: float


def fastest_scenario(scenarios: ScenarioResult) -> ScenarioTiming | None:
    """Return the scenario with the smallest duration.

    Ties go to the first scenario in iteration order.  Returns None for
    an empty mapping.
    """
    fastest: ScenarioTiming | None = None
    for title, duration in scenarios.items():
        if fastest is None or duration < fastest.duration:
            fastest = ScenarioTiming(title, duration)
    return fastest


def find_comparison_point(
    ledger: Ledger,
    version_key: str,
    benchmark_title: str,
) -> ComparisonPoint | None:
    """Find the closest earlier version that measured *benchmark_title*.

    Only versions strictly below *version_key* are candidates.  Scenario
    data is read from the candidate version itself.  Returns None when
    no earlier version measured the benchmark, or when the closest one
    recorded no scenarios for it.  Ledger keys that do not parse as
    version keys are skipped.
    """
    current = VersionKey.parse(version_key)

    best_key: str | None = None
    best_version: VersionKey | None = None
    for key, benchmarks in ledger.items():
        try:
            candidate = VersionKey.parse(key)
        except VersionKeyError:
            log.warning("Skipping unparseable ledger version %r", key)
            continue
        if not candidate < current or benchmark_title not in benchmarks:
            continue
        if best_version is None or best_version < candidate:
            best_key, best_version = key, candidate

    if best_key is None:
        return None

    fastest = fastest_scenario(ledger[best_key][benchmark_title])
    if fastest is None:
        return None
    return ComparisonPoint(best_key, fastest.title, fastest.duration)


def compare_to_reference(current: ScenarioTiming, reference: ComparisonPoint) -> Verdict:
    """Judge the current fastest scenario against the reference point."""
    if current.duration < reference.duration:
        return Verdict.FASTER
    if current.duration > reference.duration:
        return Verdict.SLOWER
    return Verdict.EQUAL
