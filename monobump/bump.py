"""Version bump decisions.

Reduces the commits attributed to each workspace to a single bump type,
then takes the most severe bump across the repository. The whole
repository is released under one version, so one changed workspace with
a breaking change makes the release a major one.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .errors import InvalidBumpTypeError
from .models import BumpType, ParsedCommit, Workspace


def parse_bump_type(value: str | BumpType) -> BumpType:
    """Validate a user supplied bump type.

    Examples:
        "minor" → BumpType.MINOR
        BumpType.MAJOR → BumpType.MAJOR

    Raises:
        InvalidBumpTypeError: If value is not major, minor or patch.
    """
    if isinstance(value, BumpType):
        return value
    by_name = {str(b): b for b in BumpType}
    if value not in by_name:
        valid = ", ".join(str(b) for b in sorted(BumpType, reverse=True))
        raise InvalidBumpTypeError(
            f"Invalid type provided: {value}. Valid types are: {valid}"
        )
    return by_name[value]


def determine_bump_type(commits: Iterable[ParsedCommit]) -> BumpType:
    """Decide the bump a list of commits calls for.

    - Any breaking commit → major
    - Otherwise any feature-like commit (feat, feature, improv) → minor
    - Otherwise (including no commits at all) → patch
    """
    commits = list(commits)
    if any(c.breaking for c in commits):
        return BumpType.MAJOR

    for commit in commits:
        if commit.type.bump is BumpType.MINOR:
            return BumpType.MINOR

    return BumpType.PATCH


def aggregate_bump_type(
    workspaces: Mapping[str, Workspace],
    override: str | BumpType | None = None,
) -> BumpType | None:
    """Decide the repository-wide bump.

    Args:
        workspaces: Workspaces after commit attribution.
        override: Bump type forced by the user. Used as-is once validated.

    Returns:
        The most severe bump among changed workspaces, the override if one
        was given, or None when nothing changed and a release should be
        skipped.

    Raises:
        InvalidBumpTypeError: If the override is not a valid bump type.
    """
    if override is not None:
        return parse_bump_type(override)

    decisions = [
        determine_bump_type(ws.commits) for ws in workspaces.values() if ws.changed
    ]
    if not decisions:
        return None
    return max(decisions)
