"""The version-indexed performance ledger.

Hierarchy::

    Ledger            version key -> BenchmarkResult
      BenchmarkResult benchmark title -> ScenarioResult
        ScenarioResult scenario title -> average duration (ms)

The ledger lives in one pretty-printed JSON file (``perf.list`` by
default) at the project root.  It is read once at the start of a run
and rewritten in full at the end; the entry for the run's version key
is replaced, never merged.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from perflist.collector import BenchmarkResult
from perflist.errors import LedgerCorruptError
from perflist.logging import get_logger

log = get_logger("ledger")

Ledger = dict[str, BenchmarkResult]


# ---------------------------------------------------------------------------
# Shape validation
# ---------------------------------------------------------------------------


def _is_duration(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _validate(data: Any, path: Path) -> Ledger:
    """Check that *data* has the ledger shape and return it."""
    if not isinstance(data, dict):
        raise LedgerCorruptError(
            f"Ledger {path} must contain a JSON object, got {type(data).__name__}"
        )
    for version, benchmarks in data.items():
        if not isinstance(benchmarks, dict):
            raise LedgerCorruptError(f"Ledger {path}: entry for v{version} is not an object")
        for title, scenarios in benchmarks.items():
            if not isinstance(scenarios, dict):
                raise LedgerCorruptError(
                    f"Ledger {path}: benchmark {title!r} of v{version} is not an object"
                )
            for scenario, duration in scenarios.items():
                if not _is_duration(duration):
                    raise LedgerCorruptError(
                        f"Ledger {path}: duration of {title!r}/{scenario!r} "
                        f"in v{version} is not a number"
                    )
    return data


# ---------------------------------------------------------------------------
# I/O
# ---------------------------------------------------------------------------


def load_ledger(path: Path) -> Ledger:
    """Load the ledger at *path*, or return an empty one if it does not exist.

    Raises:
        LedgerCorruptError: If the file exists but is not a well-formed
            ledger.
    """
    if not path.exists():
        log.debug("No ledger at %s; starting empty", path)
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise LedgerCorruptError(f"Ledger {path} is not valid JSON: {exc}") from exc

    ledger = _validate(data, path)
    log.debug("Loaded ledger %s with %d version(s)", path, len(ledger))
    return ledger


def persist_ledger(path: Path, ledger: Ledger) -> None:
    """Write the full ledger to *path*, replacing any existing file.

    The data goes to a temporary file in the same directory first and
    is moved into place with ``os.replace``.
    """
    content = json.dumps(ledger, indent=2) + "\n"
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
    log.info("Wrote %s", path)


def record_run(ledger: Ledger, version_key: str, results: BenchmarkResult) -> Ledger:
    """Return a copy of *ledger* with *version_key* set to *results*.

    Any earlier entry for the same key is replaced entirely.
    """
    updated = dict(ledger)
    if version_key in updated:
        log.info("Replacing earlier results for v%s", version_key)
    updated[version_key] = {title: dict(scenarios) for title, scenarios in results.items()}
    return updated
