"""Tests for perflist.config: configuration loading and validation."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from perflist.config import (
    DEFAULT_COUNT,
    PerfConfig,
    build_config,
    load_config_file,
    validate_config,
)
from perflist.errors import ConfigError


class TestDefaults(unittest.TestCase):
    def test_defaults(self) -> None:
        config = PerfConfig()
        self.assertEqual(config.perf_dir, "perf")
        self.assertEqual(config.ledger_file, "perf.list")
        self.assertEqual(config.file_suffix, "perf.py")
        self.assertEqual(config.default_count, DEFAULT_COUNT)
        self.assertEqual(DEFAULT_COUNT, 1000)
        self.assertEqual(validate_config(config), [])


class TestLoadConfigFile(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = Path(self.tmpdir.name) / "perflist.yaml"

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def test_mapping(self) -> None:
        self.path.write_text("perf_dir: benchmarks\ndefault_count: 50\n")
        self.assertEqual(
            load_config_file(self.path),
            {"perf_dir": "benchmarks", "default_count": 50},
        )

    def test_empty_file(self) -> None:
        self.path.write_text("")
        self.assertEqual(load_config_file(self.path), {})

    def test_not_a_mapping(self) -> None:
        self.path.write_text("- perf\n- list\n")
        with self.assertRaises(ConfigError):
            load_config_file(self.path)

    def test_invalid_yaml(self) -> None:
        self.path.write_text("perf_dir: [unclosed\n")
        with self.assertRaises(ConfigError):
            load_config_file(self.path)

    def test_unknown_key(self) -> None:
        self.path.write_text("iterations: 5\n")
        with self.assertRaises(ConfigError) as cm:
            load_config_file(self.path)
        self.assertIn("iterations", str(cm.exception))

    def test_start_dir_is_unknown_key(self) -> None:
        self.path.write_text("start_dir: /tmp\n")
        with self.assertRaises(ConfigError):
            load_config_file(self.path)


class TestBuildConfig(unittest.TestCase):
    def test_cli_overrides_file(self) -> None:
        config = build_config(
            {"perf_dir": "from_file", "ledger_file": "file.list"},
            cli_overrides={"perf_dir": "from_cli", "ledger_file": None},
        )
        self.assertEqual(config.perf_dir, "from_cli")
        self.assertEqual(config.ledger_file, "file.list")

    def test_defaults_when_nothing_given(self) -> None:
        config = build_config()
        self.assertEqual(config.perf_dir, "perf")


class TestValidateConfig(unittest.TestCase):
    def _fields(self, config: PerfConfig) -> list[str]:
        return [e.field for e in validate_config(config)]

    def test_count_below_one(self) -> None:
        self.assertEqual(self._fields(PerfConfig(default_count=0)), ["default_count"])

    def test_count_not_integer(self) -> None:
        self.assertIn("default_count", self._fields(PerfConfig(default_count="10")))  # type: ignore[arg-type]
        self.assertIn("default_count", self._fields(PerfConfig(default_count=True)))

    def test_empty_ledger_name(self) -> None:
        self.assertIn("ledger_file", self._fields(PerfConfig(ledger_file=" ")))

    def test_ledger_name_with_path(self) -> None:
        self.assertIn("ledger_file", self._fields(PerfConfig(ledger_file="data/perf.list")))


if __name__ == "__main__":
    unittest.main()
