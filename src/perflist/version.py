"""Version keys: parsing, ordering and detection.

A version key is the project version, ``MAJOR.MINOR.PATCH``, with a
trailing ``*`` when the working tree had uncommitted changes at the
time of the run.  Keys order numerically; a dirty key sorts just
before the clean release of the same number, so ``1.2.3*`` < ``1.2.3``.
"""

from __future__ import annotations

import re
import subprocess
import tomllib
from dataclasses import dataclass
from functools import total_ordering
from pathlib import Path
from typing import Any

from perflist.errors import ManifestError, VersionKeyError
from perflist.logging import get_logger

log = get_logger("version")

DIRTY_MARKER = "*"

_LEADING_DIGITS = re.compile(r"\s*(\d+)")


# ---------------------------------------------------------------------------
# VersionKey
# ---------------------------------------------------------------------------


@total_ordering
@dataclass(frozen=True)
class VersionKey:
    """Parsed, orderable form of a version key string."""

    major: int
    minor: int
    patch: int
    dirty: bool = False

    @classmethod
    def parse(cls, text: str) -> VersionKey:
        """Parse a version key.

        Each of the first three dot-separated components contributes its
        leading digits; missing or digit-less minor/patch components count
        as 0, so ``1.2`` parses as ``1.2.0`` and ``1.2.3rc1`` as ``1.2.3``.
        A leading ``v`` or ``V`` is ignored.

        Raises:
            VersionKeyError: If the major component has no leading digits.
        """
        if not isinstance(text, str):
            raise VersionKeyError(f"Version key must be a string, got {type(text).__name__}")
        dirty = text.endswith(DIRTY_MARKER)
        core = text[: -len(DIRTY_MARKER)] if dirty else text
        if core[:1] in ("v", "V"):
            core = core[1:]
        parts = core.split(".")

        numbers: list[int] = []
        for part in parts[:3]:
            match = _LEADING_DIGITS.match(part)
            if match is None:
                if not numbers:
                    raise VersionKeyError(f"Invalid version key: {text!r}")
                numbers.append(0)
            else:
                numbers.append(int(match.group(1)))
        while len(numbers) < 3:
            numbers.append(0)

        return cls(numbers[0], numbers[1], numbers[2], dirty)

    @property
    def sort_key(self) -> tuple[int, int, int, int]:
        # Clean releases rank after their own dirty marker.
        return (self.major, self.minor, self.patch, 0 if self.dirty else 1)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, VersionKey):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __str__(self) -> str:
        marker = DIRTY_MARKER if self.dirty else ""
        return f"{self.major}.{self.minor}.{self.patch}{marker}"


def is_working_tree(version_key: str) -> bool:
    """True if *version_key* carries the dirty-working-tree marker."""
    return version_key.endswith(DIRTY_MARKER)


def current_version_key(project_version: str, working_tree_dirty: bool) -> str:
    """Return the ledger key for a run: the version, plus ``*`` if dirty."""
    return project_version + (DIRTY_MARKER if working_tree_dirty else "")


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------


def read_project_version(project_dir: Path, manifest_file: str = "pyproject.toml") -> str:
    """Read the declared version from the project manifest.

    Looks at ``[project].version`` first, then ``[tool.poetry].version``.

    Raises:
        ManifestError: If the manifest cannot be parsed or declares no
            version.
    """
    manifest = project_dir / manifest_file
    try:
        data: dict[str, Any] = tomllib.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ManifestError(f"Cannot read {manifest}: {exc}") from exc

    version = data.get("project", {}).get("version")
    if version is None:
        version = data.get("tool", {}).get("poetry", {}).get("version")
    if not isinstance(version, str) or not version.strip():
        raise ManifestError(f"No version declared in {manifest}")

    version = version.strip()
    log.debug("Project version from %s: %s", manifest, version)
    return version


def is_working_tree_dirty(project_dir: Path) -> bool:
    """True if tracked files in *project_dir* have uncommitted changes.

    A directory outside version control, a missing ``git`` binary, or a
    failing ``git`` call all count as clean.
    """
    try:
        proc = subprocess.run(
            ["git", "status", "--porcelain", "--untracked-files=no"],
            capture_output=True,
            text=True,
            cwd=str(project_dir),
            timeout=30,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as exc:
        log.debug("git status unavailable in %s: %s", project_dir, exc)
        return False

    if proc.returncode != 0:
        log.debug("Not a git work tree (%s): %s", project_dir, proc.stderr.strip()[:200])
        return False

    dirty = bool(proc.stdout.strip())
    if dirty:
        log.debug("Working tree has uncommitted changes")
    return dirty
