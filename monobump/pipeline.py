"""Release pipeline: history → attribute → decide → changelog → bump.

This module orchestrates a monobump release:
1. Validate the requested bump type, if any
2. Read commits since the last release tag
3. Discover workspaces and attribute commits to them
4. Decide the repository-wide bump and compute the new version
5. Prepend release entries to the changelogs
6. Write the new version to every manifest and the lockfile

Every workspace is released under the same version. A dry run stops after
step 4, before any file is written.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .attribution import attribute_commits
from .bump import aggregate_bump_type, parse_bump_type
from .changelog import update_changelogs
from .config import Settings, load_settings
from .manifest import bump_versions
from .models import BumpType, Workspace
from .shell import debug, info, set_verbose, step
from .vcs import get_commits_since_tag, get_first_commit, get_last_tag
from .versions import increment_version, parse_version
from .workspace import MANIFEST_NAME, load_manifest, read_workspaces


def get_repository_base_url(manifest: Mapping[str, Any]) -> str:
    """Derive the web URL of the repository from package.json.

    Examples:
        "git+https://github.com/o/r.git" → "https://github.com/o/r"
        {"type": "git", "url": "https://github.com/o/r"} → "https://github.com/o/r"
    """
    repository = manifest.get("repository") or ""
    url = repository.get("url", "") if isinstance(repository, dict) else repository
    if url.startswith("git+"):
        url = url[len("git+") :]
    if url.endswith(".git"):
        url = url[: -len(".git")]
    return url


def build_version_link(
    base_url: str,
    new_tag: str,
    last_tag: str | None,
    first_commit: str | None,
) -> str:
    """Link to the changes in this release.

    Compares against the last tag, or the first commit for a first release,
    and falls back to the release page when neither is known.
    """
    if last_tag:
        return f"{base_url}/compare/{last_tag}...{new_tag}"
    if first_commit:
        return f"{base_url}/compare/{first_commit}...{new_tag}"
    return f"{base_url}/releases/tag/{new_tag}"


def current_version(
    root: Path, last_tag: str | None, tag_prefix: str = "v"
) -> str:
    """The version a release is computed from.

    The last release tag (without its prefix) wins; without tags, the root
    package.json version is used, falling back to 0.0.0.
    """
    if last_tag:
        if tag_prefix and last_tag.startswith(tag_prefix):
            return last_tag[len(tag_prefix) :]
        return last_tag
    version = load_manifest(root / MANIFEST_NAME).get("version") or "0.0.0"
    debug(f"Using {MANIFEST_NAME} version as baseline: {version}")
    return version


def report_workspaces(workspaces: Mapping[str, Workspace]) -> None:
    for key, ws in workspaces.items():
        flags = " (private)" if ws.is_private else ""
        status = f"{len(ws.commits)} commits" if ws.changed else "unchanged"
        info(f"{key} {ws.version}{flags}: {status}")


def run_release(
    root: str | Path,
    *,
    dry_run: bool = False,
    bump_type: str | BumpType | None = None,
    verbose: bool = False,
    settings: Settings | None = None,
) -> str | None:
    """Execute the full release pipeline.

    Args:
        root: Repository root.
        dry_run: Compute and report the new version without writing files.
        bump_type: Force major, minor or patch instead of deriving it from
                   commits. Also forces a release when nothing changed.
        verbose: Print debug details.
        settings: Settings to use instead of reading .monobump.toml.

    Returns:
        The new version, or None when there was nothing to release.

    Raises:
        InvalidBumpTypeError: If bump_type is not major, minor or patch.
            Raised before any git or file access.
        VersionError: If the current version cannot be parsed or bumped.
        ManifestError: If the root package.json is missing or invalid.
        GitError: If the commit history cannot be read.
    """
    set_verbose(verbose)
    override = parse_bump_type(bump_type) if bump_type is not None else None

    root = Path(root).resolve()
    settings = settings or load_settings(root)

    # Phase 1: History
    step("Reading commit history")
    last_tag = get_last_tag(str(root), f"{settings.tag_prefix}*")
    commits = get_commits_since_tag(str(root), last_tag)
    info(f"Last tag: {last_tag or '<none>'}")
    info(f"Found {len(commits)} commits")

    # Phase 2: Attribution
    step("Attributing commits to workspaces")
    workspaces = read_workspaces(root)
    workspaces, changed = attribute_commits(commits, workspaces, str(root))
    report_workspaces(workspaces)

    if not changed and override is None:
        info(
            "No changes detected in workspaces and no version bump type provided; "
            "skipping version bump"
        )
        return None

    # Phase 3: Version
    step("Deciding version")
    bump = aggregate_bump_type(workspaces, override)
    if override is not None:
        info(f"Version bump type provided: {bump}")
    else:
        info(f"Determined version bump type: {bump}")

    current = parse_version(current_version(root, last_tag, settings.tag_prefix))
    new_version = increment_version(current, bump)
    info(f"New version: {new_version}")

    if dry_run:
        info("Dry run enabled, no changes will be made")
        return new_version

    # Phase 4: Write
    step("Updating changelogs and manifests")
    root_manifest = load_manifest(root / MANIFEST_NAME)
    base_url = settings.repository_url or get_repository_base_url(root_manifest)
    first_commit = None if last_tag else get_first_commit(str(root))
    version_link = build_version_link(
        base_url, f"{settings.tag_prefix}{new_version}", last_tag, first_commit
    )

    update_changelogs(
        root,
        workspaces,
        new_version,
        version_link,
        base_url,
        filename=settings.changelog_file,
    )
    info("Updated changelogs")

    bumped = bump_versions(root, workspaces, new_version)
    for name, change in bumped.items():
        info(f"{name}: {change.old} → {change.new}")
    info(f"Bumped all package versions to {new_version}")

    return new_version
