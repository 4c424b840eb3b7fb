"""Workspace discovery.

Reads the npm `workspaces` field from the root package.json and builds a
Workspace for every matching package directory. A repository without
workspaces is treated as a single package rooted at the repository root.
"""

from __future__ import annotations

import glob
import json
from pathlib import Path
from typing import Any

from .errors import ManifestError
from .models import Workspace

MANIFEST_NAME = "package.json"


def load_manifest(path: Path) -> dict[str, Any]:
    """Load and parse a package.json file.

    Raises:
        ManifestError: If the file is missing or is not valid JSON.
    """
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ManifestError(f"No {MANIFEST_NAME} found at {path}") from exc
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Invalid JSON in {path}: {exc}") from exc


def get_workspace_globs(manifest: dict[str, Any]) -> list[str]:
    """Extract workspace glob patterns from a root package.json.

    Supports both the array form (`"workspaces": ["packages/*"]`) and the
    object form (`"workspaces": {"packages": ["packages/*"]}`).
    """
    workspaces = manifest.get("workspaces") or []
    if isinstance(workspaces, dict):
        return list(workspaces.get("packages") or [])
    return list(workspaces)


def short_name(package_name: str) -> str:
    """Strip the npm scope from a package name ("@acme/core" → "core")."""
    return package_name.split("/")[-1]


def _workspace_from_manifest(
    manifest: dict[str, Any], path: Path, fallback_name: str
) -> Workspace:
    name = manifest.get("name") or fallback_name
    return Workspace(
        name=name,
        short_name=short_name(name),
        path=str(path),
        version=manifest.get("version") or "0.0.0",
        dependency_names=set(manifest.get("dependencies") or {}),
        is_private=bool(manifest.get("private", False)),
    )


def read_workspaces(root: str | Path) -> dict[str, Workspace]:
    """Scan the repository and discover all workspaces.

    Args:
        root: Repository root containing the root package.json.

    Returns:
        Map of short name → Workspace. For repositories without workspaces
        the map holds a single entry for the root package.

    Raises:
        ManifestError: If the root package.json is missing or invalid.
    """
    root = Path(root)
    root_manifest = load_manifest(root / MANIFEST_NAME)

    # Expand globs to find all package directories
    package_dirs: list[Path] = []
    for pattern in get_workspace_globs(root_manifest):
        for match in sorted(glob.glob(str(root / pattern))):
            p = Path(match)
            if (p / MANIFEST_NAME).is_file() and p not in package_dirs:
                package_dirs.append(p)

    workspaces: dict[str, Workspace] = {}
    for d in package_dirs:
        manifest = load_manifest(d / MANIFEST_NAME)
        workspace = _workspace_from_manifest(manifest, d, d.name)
        workspaces[workspace.short_name] = workspace

    if not workspaces:
        workspace = _workspace_from_manifest(root_manifest, root, "root")
        workspaces[workspace.short_name] = workspace

    return workspaces
