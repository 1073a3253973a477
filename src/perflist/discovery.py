"""Project root search and benchmark file discovery.

The project root is the nearest ancestor directory holding the project
manifest.  Benchmark files are found by a depth-first walk of the
benchmark directory and executed inside a :class:`RunContext`.
"""

from __future__ import annotations

import runpy
from collections.abc import Iterator
from pathlib import Path

from perflist.collector import RunContext
from perflist.errors import ProjectNotFoundError
from perflist.logging import get_logger

log = get_logger("discovery")


def find_project_root(start: Path, manifest_file: str = "pyproject.toml") -> Path:
    """Return the nearest directory at or above *start* containing *manifest_file*.

    Raises:
        ProjectNotFoundError: If no ancestor holds the manifest.
    """
    start = start.resolve()
    for directory in (start, *start.parents):
        if (directory / manifest_file).is_file():
            log.debug("Project root: %s", directory)
            return directory
    raise ProjectNotFoundError(
        f"Unable to locate project directory: no {manifest_file} in {start} or its parents"
    )


def is_benchmark_file(path: Path, suffix: str = "perf.py") -> bool:
    """True if the part of the file name after its first dot equals *suffix*.

    ``sort.perf.py`` matches the default suffix; ``sort_perf.py`` and
    ``perf.py`` do not.
    """
    _, dot, rest = path.name.partition(".")
    return bool(dot) and rest == suffix


def iter_benchmark_files(directory: Path, suffix: str = "perf.py") -> Iterator[Path]:
    """Yield benchmark files under *directory*, depth-first.

    Within each directory entries are taken in sorted name order; the
    directory's own files come before anything in its subdirectories.
    A missing *directory* yields nothing.
    """
    if not directory.is_dir():
        log.debug("Benchmark directory does not exist: %s", directory)
        return

    stack = [directory]
    while stack:
        current = stack.pop()
        entries = sorted(current.iterdir(), key=lambda p: p.name)
        subdirs: list[Path] = []
        for entry in entries:
            if entry.is_file():
                if is_benchmark_file(entry, suffix):
                    yield entry
            elif entry.is_dir():
                subdirs.append(entry)
        # Reversed so the first subdirectory is popped first.
        stack.extend(reversed(subdirs))


def load_benchmark_file(path: Path, context: RunContext) -> None:
    """Execute one benchmark file with *context* supplying its declaration API.

    Exceptions raised by the file propagate unchanged.
    """
    log.info("Running %s", path)
    runpy.run_path(
        str(path),
        init_globals=context.injected_globals(),
        run_name="__perflist__",
    )
