"""Tests for perflist.runner: one complete benchmark run."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from perf_test_helpers import SORT_BENCHMARK, make_project, set_version

from perflist.config import PerfConfig
from perflist.errors import (
    ConfigurationError,
    LedgerCorruptError,
    ManifestError,
    VersionKeyError,
)
from perflist.ledger import load_ledger
from perflist.runner import run_benchmarks


def _clean(_path: Path) -> bool:
    return False


def _dirty(_path: Path) -> bool:
    return True


class TestRunBenchmarks(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self.tmpdir.name) / "proj"
        self.ledger_path = self.root / "perf.list"

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def test_two_versions(self) -> None:
        make_project(self.root, "1.0.0", benchmarks={"sort.perf.py": SORT_BENCHMARK})
        first = run_benchmarks(PerfConfig(), self.root, dirty_check=_clean)
        self.assertEqual(first.version_key, "1.0.0")
        self.assertEqual(set(first.results["Sort"]), {"bubble", "quick"})

        set_version(self.root, "1.0.1")
        second = run_benchmarks(PerfConfig(), self.root, dirty_check=_clean)
        ledger = load_ledger(self.ledger_path)
        self.assertEqual(sorted(ledger), ["1.0.0", "1.0.1"])
        self.assertEqual(ledger, second.ledger)
        self.assertEqual(second.ledger_path, self.ledger_path)

    def test_rerun_same_version_overwrites(self) -> None:
        make_project(
            self.root,
            "1.0.0",
            benchmarks={"a.perf.py": "benchmark('A', lambda: scenario('x', 1, lambda: None))\n"},
        )
        run_benchmarks(PerfConfig(), self.root, dirty_check=_clean)
        (self.root / "perf" / "a.perf.py").write_text(
            "benchmark('B', lambda: scenario('y', 1, lambda: None))\n"
        )
        run_benchmarks(PerfConfig(), self.root, dirty_check=_clean)
        ledger = load_ledger(self.ledger_path)
        self.assertEqual(list(ledger), ["1.0.0"])
        self.assertEqual(list(ledger["1.0.0"]), ["B"])

    def test_dirty_tree_marks_version(self) -> None:
        make_project(self.root, "2.0.0", benchmarks={"sort.perf.py": SORT_BENCHMARK})
        outcome = run_benchmarks(PerfConfig(), self.root, dirty_check=_dirty)
        self.assertEqual(outcome.version_key, "2.0.0*")
        self.assertIn("2.0.0*", load_ledger(self.ledger_path))

    def test_no_benchmarks_leaves_ledger_untouched(self) -> None:
        make_project(self.root, "1.0.0")
        self.ledger_path.write_text("not even json")
        outcome = run_benchmarks(PerfConfig(), self.root, dirty_check=_clean)
        self.assertFalse(outcome.found_benchmarks)
        self.assertEqual(self.ledger_path.read_text(), "not even json")

    def test_no_benchmarks_creates_no_ledger(self) -> None:
        make_project(self.root, "1.0.0", benchmarks={"README.txt": "nothing here"})
        run_benchmarks(PerfConfig(), self.root, dirty_check=_clean)
        self.assertFalse(self.ledger_path.exists())

    def test_failing_benchmark_leaves_ledger_untouched(self) -> None:
        make_project(
            self.root,
            "1.0.1",
            benchmarks={"bad.perf.py": "benchmark('Bad', lambda: scenario('x', 5))\n"},
        )
        previous = {"1.0.0": {"Bad": {"x": 1.0}}}
        self.ledger_path.write_text(json.dumps(previous))
        with self.assertRaises(ConfigurationError):
            run_benchmarks(PerfConfig(), self.root, dirty_check=_clean)
        self.assertEqual(load_ledger(self.ledger_path), previous)

    def test_corrupt_ledger_aborts_before_running(self) -> None:
        marker = self.root / "ran.txt"
        make_project(
            self.root,
            "1.0.0",
            benchmarks={"a.perf.py": f"open({str(marker)!r}, 'w').close()\n"},
        )
        self.ledger_path.write_text("{broken")
        with self.assertRaises(LedgerCorruptError):
            run_benchmarks(PerfConfig(), self.root, dirty_check=_clean)
        self.assertFalse(marker.exists())

    def test_missing_version(self) -> None:
        make_project(self.root, benchmarks={"sort.perf.py": SORT_BENCHMARK})
        (self.root / "pyproject.toml").write_text('[project]\nname = "demo"\n')
        with self.assertRaises(ManifestError):
            run_benchmarks(PerfConfig(), self.root, dirty_check=_clean)

    def test_prefixed_version_recorded(self) -> None:
        make_project(self.root, "v1.0.0", benchmarks={"sort.perf.py": SORT_BENCHMARK})
        outcome = run_benchmarks(PerfConfig(), self.root, dirty_check=_clean)
        self.assertEqual(outcome.version_key, "v1.0.0")
        self.assertIn("v1.0.0", load_ledger(self.ledger_path))

    def test_unorderable_version_leaves_ledger_untouched(self) -> None:
        marker = self.root / "ran.txt"
        make_project(
            self.root,
            "nightly",
            benchmarks={"a.perf.py": f"open({str(marker)!r}, 'w').close()\n"},
        )
        with self.assertRaises(VersionKeyError):
            run_benchmarks(PerfConfig(), self.root, dirty_check=_clean)
        self.assertFalse(marker.exists())
        self.assertFalse(self.ledger_path.exists())

    def test_custom_directory_and_ledger(self) -> None:
        make_project(
            self.root,
            "0.1.0",
            benchmarks={"s.perf.py": SORT_BENCHMARK},
            perf_dir="bench",
        )
        config = PerfConfig(perf_dir="bench", ledger_file="timings.list")
        run_benchmarks(config, self.root, dirty_check=_clean)
        self.assertIn("0.1.0", load_ledger(self.root / "timings.list"))
        self.assertFalse(self.ledger_path.exists())

    def test_results_from_several_files(self) -> None:
        make_project(
            self.root,
            "1.0.0",
            benchmarks={
                "a.perf.py": "benchmark('A', lambda: scenario('x', 1, lambda: None))\n",
                "nested/b.perf.py": "benchmark('B', lambda: scenario('y', 1, lambda: None))\n",
            },
        )
        outcome = run_benchmarks(PerfConfig(), self.root, dirty_check=_clean)
        self.assertEqual(list(outcome.results), ["A", "B"])
        self.assertEqual(len(outcome.files), 2)


if __name__ == "__main__":
    unittest.main()
