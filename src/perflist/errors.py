"""Exception types raised by perflist.

Every error derives from :class:`PerfListError` so the CLI can report
them uniformly.  Each also derives from the closest builtin exception,
so callers that already catch ``ValueError`` or ``FileNotFoundError``
keep working.
"""

from __future__ import annotations


class PerfListError(Exception):
    """Base class for all perflist errors."""


class ConfigurationError(PerfListError, ValueError):
    """A scenario was declared without a usable body or repetition count."""


class ConfigError(PerfListError, ValueError):
    """The perflist configuration file is malformed."""


class ProjectNotFoundError(PerfListError, FileNotFoundError):
    """No ancestor directory contains a project manifest."""


class ManifestError(PerfListError, ValueError):
    """The project manifest exists but declares no usable version."""


class LedgerCorruptError(PerfListError, ValueError):
    """The persisted ledger file exists but cannot be parsed."""


class VersionKeyError(PerfListError, ValueError):
    """A string cannot be interpreted as a version key."""
