"""Commit to workspace attribution.

Decides which workspace(s) each commit belongs to:

1. Single-package repos: every valid commit belongs to the root package.
2. Scoped commits: `feat(core): ...` belongs to the workspace named `core`.
3. Dependency updates (`scope == "deps"`): fanned out to every public
   workspace that declares the bumped dependency. Grouped updates are
   resolved by looking at which package.json files the commit touched and
   whether their production `dependencies` block changed.

Rules 2 and 3 are evaluated independently, so a commit can reach a
workspace through both.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from pathlib import Path

from .commits import is_dependency_group_commit, parse_commit
from .models import RawCommit, Workspace
from .shell import debug
from .vcs import get_changed_files, get_file_diff

DEPS_SCOPE = "deps"
MANIFEST_NAME = "package.json"

# Top-level package.json keys that end a "dependencies" block in a diff
SECTION_BOUNDARY_KEYS = (
    "peerDependencies",
    "optionalDependencies",
    "scripts",
    "engines",
    "repository",
    "keywords",
    "author",
    "license",
    "bugs",
    "homepage",
    "main",
    "module",
    "types",
    "bin",
    "files",
    "workspaces",
    "private",
    "name",
    "version",
    "description",
)


def has_production_dependency_changes(diff: str) -> bool:
    """Check whether a package.json diff touches the `dependencies` block.

    This is a line scanner, not a JSON parser: a `"dependencies":` line
    opens the block and `"devDependencies":` or any other known top-level
    key closes it. Any added or removed line inside the block counts,
    except the block's own header line.

    Args:
        diff: Unified diff text of a single package.json.

    Returns:
        True if production dependencies were added, removed or changed.
    """
    in_dependencies = False

    for line in diff.split("\n"):
        if '"dependencies"' in line and ":" in line:
            in_dependencies = True
        elif '"devDependencies"' in line and ":" in line:
            in_dependencies = False
        elif any(f'"{key}"' in line for key in SECTION_BOUNDARY_KEYS):
            in_dependencies = False

        if in_dependencies and line.startswith(("+", "-")):
            if '"dependencies"' not in line:
                return True

    return False


def _relative_path(root_path: str, workspace_path: str) -> str:
    return Path(os.path.relpath(workspace_path, root_path)).as_posix()


def get_affected_workspaces_from_changed_files(
    changed_files: Iterable[str],
    workspaces: Mapping[str, Workspace],
    root_path: str,
    commit_hash: str,
) -> list[Workspace]:
    """Find the public workspaces whose production dependencies a commit changed.

    Only package.json files below a workspace directory are considered; the
    root manifest is ignored. Private workspaces are skipped before their
    diff is requested, since they would be discarded anyway.

    Args:
        changed_files: Repository-relative paths touched by the commit.
        workspaces: Map of short name → Workspace.
        root_path: Repository root.
        commit_hash: Commit to read file diffs from.

    Returns:
        Affected workspaces, each listed once, in changed-file order.
    """
    affected: list[Workspace] = []

    for file in changed_files:
        if not file.endswith(MANIFEST_NAME) or file == MANIFEST_NAME:
            continue

        for workspace in workspaces.values():
            prefix = _relative_path(root_path, workspace.path).rstrip("/") + "/"
            if not file.startswith(prefix):
                continue
            if workspace.is_private:
                break
            diff = get_file_diff(root_path, commit_hash, file)
            if has_production_dependency_changes(diff) and workspace not in affected:
                affected.append(workspace)
            break

    return affected


def is_single_package_repo(workspaces: Mapping[str, Workspace], root_path: str) -> bool:
    """True when the only workspace is the repository root itself."""
    if len(workspaces) != 1:
        return False
    (workspace,) = workspaces.values()
    return Path(workspace.path).resolve() == Path(root_path).resolve()


def attribute_commits(
    commits: Iterable[RawCommit],
    workspaces: Mapping[str, Workspace],
    root_path: str,
) -> tuple[dict[str, Workspace], bool]:
    """Parse raw commits and attribute them to the workspaces they affect.

    The given workspaces are not modified; a deep copy is annotated and
    returned. Commits that do not parse, or whose scope matches nothing,
    are skipped.

    Args:
        commits: Raw commits from git, newest first.
        workspaces: Map of short name → Workspace, as discovered.
        root_path: Repository root.

    Returns:
        Tuple of (annotated workspaces, whether any workspace changed).
    """
    result = {key: ws.model_copy(deep=True) for key, ws in workspaces.items()}
    changed = False

    single = is_single_package_repo(result, root_path)
    root_workspace = next(iter(result.values())) if single else None

    for raw in commits:
        parsed = parse_commit(
            raw.subject, raw.body, hash=raw.hash, require_scope=not single
        )
        if parsed is None:
            debug(f"Skipping commit {raw.hash or '<unknown>'}: {raw.subject!r}")
            continue

        if root_workspace is not None:
            if not parsed.scope:
                parsed = parsed.model_copy(update={"scope": root_workspace.short_name})
            root_workspace.record(parsed)
            changed = True
            continue

        target = result.get(parsed.scope)
        if target is not None:
            target.record(parsed)
            changed = True

        if parsed.scope != DEPS_SCOPE:
            if target is None:
                debug(f"No workspace for scope {parsed.scope!r}")
            continue

        if is_dependency_group_commit(parsed.subject, parsed.scope) and parsed.hash:
            changed_files = get_changed_files(root_path, parsed.hash)
            affected = get_affected_workspaces_from_changed_files(
                changed_files, result, root_path, parsed.hash
            )
            for workspace in affected:
                workspace.record(parsed.model_copy(deep=True))
                changed = True
                debug(f"{workspace.short_name}: grouped update {parsed.hash}")
        else:
            for workspace in result.values():
                if workspace.is_private:
                    continue
                if any(dep in parsed.subject for dep in workspace.dependency_names):
                    workspace.record(parsed.model_copy(deep=True))
                    changed = True
                    debug(f"{workspace.short_name}: {parsed.subject!r}")

    return result, changed
