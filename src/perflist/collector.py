"""Scenario timing and result collection for one run.

A :class:`RunContext` owns everything a run accumulates: the title of
the benchmark currently being declared and the growing
benchmark -> scenario -> duration mapping.  Benchmark files receive the
context's bound :meth:`RunContext.benchmark` and
:meth:`RunContext.scenario` as the globals ``benchmark`` and
``scenario``, so two runs in one process never share state.

Durations are wall-clock milliseconds averaged over the repetition
count.
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable
from typing import Any

from perflist.config import DEFAULT_COUNT
from perflist.errors import ConfigurationError
from perflist.logging import get_logger

log = get_logger("collector")

ScenarioResult = dict[str, float]
BenchmarkResult = dict[str, ScenarioResult]

_NS_PER_MS = 1_000_000


def _is_count(value: Any) -> bool:
    """True for finite real numbers.  Booleans are not counts."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


class RunContext:
    """Accumulates benchmark results for a single run.

    Args:
        default_count: Repetitions used when a scenario gives no count.
        clock: Nanosecond clock used to time each iteration.
    """

    def __init__(
        self,
        *,
        default_count: int = DEFAULT_COUNT,
        clock: Callable[[], int] = time.perf_counter_ns,
    ) -> None:
        self.default_count = default_count
        self.current_benchmark = ""
        self.results: BenchmarkResult = {}
        self._clock = clock

    # -- declaration API ----------------------------------------------------

    def benchmark(self, title: str, body: Callable[[], Any]) -> None:
        """Declare a benchmark suite and run its body.

        Scenarios declared while *body* runs are recorded under *title*.
        """
        outer = self.current_benchmark
        self.current_benchmark = title
        log.debug("Benchmark: %s", title)
        try:
            body()
        finally:
            self.current_benchmark = outer

    def scenario(
        self,
        title: str,
        count_or_body: int | float | Callable[[], Any] | None = None,
        body: Callable[[], Any] | None = None,
    ) -> float:
        """Declare a scenario, time it and record its average duration.

        ``scenario(title, count, body)`` runs *body* *count* times;
        ``scenario(title, body)`` runs it ``default_count`` times.

        Returns:
            The average duration in milliseconds.

        Raises:
            ConfigurationError: If no body can be resolved or the count
                is below one.
        """
        count = self.default_count
        if _is_count(count_or_body):
            count = count_or_body  # type: ignore[assignment]
        elif callable(count_or_body):
            body = count_or_body

        if body is None or not callable(body):
            raise ConfigurationError(
                f"Scenario {title!r}: benchmark contents not defined"
            )
        if count < 1:
            raise ConfigurationError(
                f"Scenario {title!r}: repetition count must be at least 1, got {count}"
            )
        count = int(count)

        average = self._time(body, count)
        scenarios = self.results.setdefault(self.current_benchmark, {})
        scenarios[title] = average
        log.debug(
            "  %s / %s: %.4f ms over %d iteration(s)",
            self.current_benchmark or "<no benchmark>",
            title,
            average,
            count,
        )
        return average

    # -- internals ----------------------------------------------------------

    def _time(self, body: Callable[[], Any], count: int) -> float:
        """Run *body* *count* times and return the mean elapsed milliseconds."""
        clock = self._clock
        total_ns = 0
        for _ in range(count):
            start = clock()
            body()
            total_ns += clock() - start
        return total_ns / _NS_PER_MS / count

    def injected_globals(self) -> dict[str, Any]:
        """Globals handed to benchmark files when they are executed."""
        return {"benchmark": self.benchmark, "scenario": self.scenario}
