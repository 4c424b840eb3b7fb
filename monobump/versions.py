"""Version parsing and bumping utilities.

Handles conversion between version strings (package.json values and git
tags) and semver objects, and applies a bump while keeping a prerelease
channel such as "alpha" or "beta".
"""

from __future__ import annotations

import semver

from .errors import VersionError
from .models import BumpType


def parse_version(version_str: str) -> semver.Version:
    """Parse a version string or release tag into a semver.Version.

    A leading "v" (as in tags like "v1.2.3") is ignored, and incomplete
    versions are padded with zeros:
    - "v1.2.3" → 1.2.3
    - "1.2" → 1.2.0
    - "2.0.0-beta.1" → 2.0.0-beta.1

    Raises:
        VersionError: If the string is not a semantic version.
    """
    text = version_str.strip()
    if text[:1] in ("v", "V", "="):
        text = text[1:]
    try:
        return semver.Version.parse(text, optional_minor_and_patch=True)
    except (ValueError, TypeError) as exc:
        raise VersionError(f"Invalid version {version_str!r}: {exc}") from exc


def prerelease_identifier(version: semver.Version) -> str | None:
    """Return the channel name of a prerelease ("alpha" for 1.0.0-alpha.3)."""
    if not version.prerelease:
        return None
    return version.prerelease.split(".")[0]


def increment_version(current: semver.Version, bump: BumpType) -> str:
    """Apply a bump to a version and return the new version string.

    Prerelease versions stay on their channel: the release part is bumped
    and the first prerelease identifier is carried over without a counter.

    Examples:
        1.2.3 + minor → "1.3.0"
        1.0.0-alpha + minor → "1.1.0-alpha"
        2.2.2-alpha.4 + patch → "2.2.3-alpha"

    Raises:
        VersionError: If semver cannot produce the new version.
    """
    identifier = prerelease_identifier(current)
    try:
        bumped = getattr(current, f"bump_{bump}")()
        if identifier is not None:
            bumped = bumped.replace(prerelease=identifier)
    except (ValueError, TypeError) as exc:
        raise VersionError(f"Failed to bump {current} ({bump}): {exc}") from exc
    return str(bumped)
