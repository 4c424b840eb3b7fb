"""Errors that end a monobump run.

Commit-level problems (unparseable headers, unknown scopes) never raise;
they are skipped where they are found. Only repository-level failures are
modelled here.
"""

from __future__ import annotations


class MonobumpError(Exception):
    """Base class for errors reported to the user as a failed run."""


class InvalidBumpTypeError(MonobumpError, ValueError):
    """An override bump type outside major/minor/patch was supplied."""


class VersionError(MonobumpError):
    """A version string could not be parsed or incremented."""


class ManifestError(MonobumpError):
    """The root package.json is missing or unreadable."""


class ConfigError(MonobumpError):
    """The .monobump.toml file is malformed or has unknown settings."""


class GitError(MonobumpError):
    """A required git command failed (not a repository, no commits yet)."""
