"""package.json and package-lock.json rewriting.

Sets the release version on every workspace manifest and keeps
intra-repository dependency ranges pointing at that version. The original
indentation and trailing newline of each manifest are preserved so the
resulting diff only shows the version changes.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from pathlib import Path

from .models import VersionBump, Workspace
from .workspace import MANIFEST_NAME

LOCKFILE_NAME = "package-lock.json"
DEPENDENCY_FIELDS = ("dependencies", "devDependencies", "peerDependencies")
RANGE_PATTERN = re.compile(r"^(\^|~|>=|>|<=|<|=)?(.+)$")
INDENT_PATTERN = re.compile(r"^(\s+)")


def detect_formatting(content: str) -> tuple[str, bool]:
    """Detect the indentation and trailing newline of a JSON document.

    Returns:
        Tuple of (indent string, has trailing newline). Documents with no
        indented line default to a tab and a trailing newline.
    """
    has_trailing_newline = content.endswith("\n")
    for line in content.split("\n"):
        match = INDENT_PATTERN.match(line)
        if match and line.strip():
            return match.group(1), has_trailing_newline
    return "\t", True


def preserve_version_range(current_range: str, new_version: str) -> str:
    """Keep the range operator of a dependency while changing its version.

    Examples:
        ("^1.0.0", "2.1.0") → "^2.1.0"
        (">=1.0.0", "2.1.0") → ">=2.1.0"
        ("1.0.0", "2.1.0") → "2.1.0"
    """
    match = RANGE_PATTERN.match(current_range)
    if not match:
        return new_version
    return f"{match.group(1) or ''}{new_version}"


def _dump(data: object, indent: str, trailing_newline: bool) -> str:
    text = json.dumps(data, indent=indent, ensure_ascii=False)
    return f"{text}\n" if trailing_newline else text


def update_workspace_manifest(
    workspace: Workspace,
    new_version: str,
    workspaces: Mapping[str, Workspace],
) -> VersionBump | None:
    """Update a workspace's package.json with the new release version.

    Internal dependencies (other workspaces of the same repository) in
    dependencies, devDependencies and peerDependencies are moved to the new
    version, keeping their range operator. `file:` references are left
    alone.

    Returns:
        The recorded version change, or None if the manifest does not exist.
    """
    path = Path(workspace.path) / MANIFEST_NAME
    if not path.is_file():
        return None

    original = path.read_text(encoding="utf-8")
    indent, trailing_newline = detect_formatting(original)
    pkg = json.loads(original)
    old_version = pkg.get("version", workspace.version)
    pkg["version"] = new_version

    internal_names = {ws.name for ws in workspaces.values()}
    for field in DEPENDENCY_FIELDS:
        deps = pkg.get(field)
        if not isinstance(deps, dict):
            continue
        for dep_name, current_range in deps.items():
            if not isinstance(current_range, str) or current_range.startswith("file:"):
                continue
            if dep_name in internal_names:
                deps[dep_name] = preserve_version_range(current_range, new_version)

    path.write_text(_dump(pkg, indent, trailing_newline), encoding="utf-8")
    return VersionBump(old=old_version, new=new_version)


def update_package_lock(
    root: str | Path,
    new_version: str,
    workspaces: Mapping[str, Workspace],
) -> bool:
    """Update workspace versions recorded in package-lock.json.

    The root entry (empty path key) is skipped. The lockfile is only
    rewritten when at least one entry changed.

    Returns:
        True if the lockfile was rewritten.
    """
    path = Path(root) / LOCKFILE_NAME
    if not path.is_file():
        return False

    lockfile = json.loads(path.read_text(encoding="utf-8"))
    names = {ws.name for ws in workspaces.values()}
    updated = False

    for pkg_path, info in (lockfile.get("packages") or {}).items():
        if pkg_path == "" or not isinstance(info, dict):
            continue
        if info.get("name") in names and "version" in info:
            info["version"] = new_version
            updated = True

    if updated:
        path.write_text(_dump(lockfile, "  ", True), encoding="utf-8")
    return updated


def bump_versions(
    root: str | Path,
    workspaces: Mapping[str, Workspace],
    new_version: str,
) -> dict[str, VersionBump]:
    """Set every workspace (and the lockfile) to the new release version.

    Returns:
        Map of short name → VersionBump for each manifest rewritten.
    """
    bumped: dict[str, VersionBump] = {}
    for key, workspace in workspaces.items():
        change = update_workspace_manifest(workspace, new_version, workspaces)
        if change is not None:
            bumped[key] = change
    update_package_lock(root, new_version, workspaces)
    return bumped
