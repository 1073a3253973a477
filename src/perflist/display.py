"""Console report for a run.

Lines are built with ``click.style`` and returned as strings so the CLI
decides where they go; ``click.echo`` drops the styling when the output
is not a terminal.
"""

from __future__ import annotations

import click

from perflist.collector import ScenarioResult
from perflist.compare import (
    ComparisonPoint,
    ScenarioTiming,
    Verdict,
    compare_to_reference,
    fastest_scenario,
    find_comparison_point,
)
from perflist.ledger import Ledger
from perflist.version import is_working_tree

_VERDICT_PHRASES = {
    Verdict.FASTER: "is faster than",
    Verdict.SLOWER: "is slower than",
    Verdict.EQUAL: "is same as",
}

_VERDICT_COLORS = {
    Verdict.FASTER: "green",
    Verdict.SLOWER: "red",
    Verdict.EQUAL: None,
}


def _format_ms(duration: float) -> str:
    return f"{duration:.4f}"


def format_version(version_key: str) -> str:
    """``v1.2.3``, with a working-tree note for dirty keys."""
    suffix = " (Working Tree)" if is_working_tree(version_key) else ""
    label = version_key if version_key[:1] in ("v", "V") else f"v{version_key}"
    return f"{label}{suffix}"


def format_scenarios(scenarios: ScenarioResult) -> list[str]:
    """One line per scenario; the fastest in green, the rest in red."""
    fastest = fastest_scenario(scenarios)
    lines: list[str] = []
    for title, duration in scenarios.items():
        color = "green" if fastest is not None and title == fastest.title else "red"
        lines.append(
            f"  * {click.style(title, bold=True)}: "
            f"{click.style(_format_ms(duration), fg=color, bold=True)} ms"
        )
    return lines


def format_comparison(current: ScenarioTiming, reference: ComparisonPoint) -> str:
    """The sentence comparing the current fastest scenario to the reference."""
    verdict = compare_to_reference(current, reference)
    current_ms = click.style(_format_ms(current.duration), fg=_VERDICT_COLORS[verdict], bold=True)
    reference_ms = click.style(_format_ms(reference.duration), bold=True)
    return (
        f"{current.title} {_VERDICT_PHRASES[verdict]} {reference.scenario} of "
        f"{format_version(reference.version)}: {current_ms} ms vs {reference_ms} ms"
    )


def format_report(ledger: Ledger, version_key: str) -> list[str]:
    """Build the report lines for every benchmark recorded at *version_key*."""
    lines: list[str] = []
    for title, scenarios in ledger.get(version_key, {}).items():
        lines.append("")
        lines.append(f"Benchmark: {click.style(title, bold=True)}, {format_version(version_key)}")
        lines.extend(format_scenarios(scenarios))

        current = fastest_scenario(scenarios)
        if current is None:
            continue
        reference = find_comparison_point(ledger, version_key, title)
        if reference is not None:
            lines.append("")
            lines.append(format_comparison(current, reference))
    return lines
