"""perflist: a micro-benchmark runner with a version-indexed performance ledger."""

from __future__ import annotations

from perflist.collector import RunContext
from perflist.compare import Verdict, fastest_scenario, find_comparison_point
from perflist.ledger import load_ledger, persist_ledger, record_run

__version__ = "0.3.0"

__all__ = [
    "RunContext",
    "Verdict",
    "fastest_scenario",
    "find_comparison_point",
    "load_ledger",
    "persist_ledger",
    "record_run",
]
