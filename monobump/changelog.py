"""Changelog generation.

Renders the commits attributed to each workspace into Markdown sections
and prepends a new release entry to the root CHANGELOG.md and to each
workspace's own changelog.

The root changelog lists public workspaces only, with each line prefixed
by the workspace name. Workspace changelogs list their own commits,
private workspaces included.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import date
from pathlib import Path

from pydantic import BaseModel, Field

from .models import Workspace

DEFAULT_HEADER = "# Changelog\n\n"
HEADER_PATTERN = re.compile(r"# (change ?log) ?\n{1,2}", re.IGNORECASE)
ISSUE_PATTERN = re.compile(r"#(\d+)")
VERSION_BUMP_ONLY = "**Note:** Version bump only for this package\n\n"

SectionsByType = dict[str, list[str]]


class ChangelogSections(BaseModel):
    """Rendered changelog content for one release.

    Attributes:
        main_sections: Markdown for the root changelog.
        workspace_sections: Map of workspace short name → section heading
                            → changelog lines.
    """

    main_sections: str = ""
    workspace_sections: dict[str, SectionsByType] = Field(default_factory=dict)


def linkify_commit_references(
    subject: str, base_url: str, commit_hash: str | None = None
) -> str:
    """Turn `#123` into issue links and append a short commit link.

    Examples:
        ("fix #12", "https://github.com/o/r")
            → "fix [#12](https://github.com/o/r/issues/12)"
        ("add x", "https://github.com/o/r", "abcdef123456")
            → "add x ([abcdef1](https://github.com/o/r/commit/abcdef123456))"
    """
    if not base_url:
        return subject

    result = ISSUE_PATTERN.sub(
        lambda m: f"[#{m.group(1)}]({base_url}/issues/{m.group(1)})", subject
    )
    if commit_hash:
        result += f" ([{commit_hash[:7]}]({base_url}/commit/{commit_hash}))"
    return result


def render_sections(sections: SectionsByType) -> str:
    return "\n".join(
        f"### {heading}\n\n" + "\n".join(lines) + "\n"
        for heading, lines in sections.items()
    )


def generate_changelog_sections(
    workspaces: Mapping[str, Workspace], base_url: str
) -> ChangelogSections:
    """Group the commits of changed workspaces by changelog section."""
    main: SectionsByType = {}
    per_workspace: dict[str, SectionsByType] = {}

    for workspace in workspaces.values():
        if not workspace.changed:
            continue
        for commit in workspace.commits:
            heading = commit.type.section
            line = linkify_commit_references(commit.subject, base_url, commit.hash)

            if not workspace.is_private:
                main.setdefault(heading, []).append(
                    f"- **{workspace.short_name}** {line}"
                )

            sections = per_workspace.setdefault(workspace.short_name, {})
            sections.setdefault(heading, []).append(f"- {line}")

    return ChangelogSections(
        main_sections=render_sections(main), workspace_sections=per_workspace
    )


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8") if path.is_file() else ""


def parse_existing_changelog_header(changelog_path: Path) -> str:
    """Return the title block of an existing changelog, or the default one."""
    match = HEADER_PATTERN.search(_read(changelog_path))
    return match.group(0) if match else DEFAULT_HEADER


def generate_version_header(
    version: str, version_link: str, today: date | None = None
) -> str:
    """Render the heading of a release entry.

    Example:
        ("1.2.0", "https://x/compare/v1.1.0...v1.2.0")
            → "## [1.2.0](https://x/compare/v1.1.0...v1.2.0) (2024-05-01)\\n\\n"
    """
    day = (today or date.today()).isoformat()
    return f"## [{version}]({version_link}) ({day})\n\n"


def update_root_changelog(
    changelog_path: Path,
    version: str,
    version_link: str,
    sections: str,
    today: date | None = None,
) -> None:
    """Prepend a release entry to the root changelog, creating it if needed."""
    header = parse_existing_changelog_header(changelog_path)
    existing = _read(changelog_path).replace(header, "", 1)
    entry = generate_version_header(version, version_link, today)
    changelog_path.write_text(
        f"{header}{entry}{sections}\n\n{existing}", encoding="utf-8"
    )


def update_workspace_changelog(
    changelog_path: Path,
    version: str,
    version_link: str,
    sections: SectionsByType | None,
    today: date | None = None,
) -> bool:
    """Prepend a release entry to a workspace changelog.

    Workspaces without a changelog file are left alone. Workspaces with no
    commits in this release get a "version bump only" note.

    Returns:
        True if the changelog was updated.
    """
    if not changelog_path.is_file():
        return False

    header = parse_existing_changelog_header(changelog_path)
    existing = _read(changelog_path).replace(header, "", 1)
    entry = generate_version_header(version, version_link, today)
    changes = f"{render_sections(sections)}\n" if sections else VERSION_BUMP_ONLY
    changelog_path.write_text(f"{header}{entry}{changes}{existing}", encoding="utf-8")
    return True


def update_changelogs(
    root: str | Path,
    workspaces: Mapping[str, Workspace],
    version: str,
    version_link: str,
    base_url: str,
    filename: str = "CHANGELOG.md",
    today: date | None = None,
) -> None:
    """Write the release entry to the root and workspace changelogs."""
    sections = generate_changelog_sections(workspaces, base_url)
    root = Path(root)

    update_root_changelog(
        root / filename, version, version_link, sections.main_sections, today
    )

    for workspace in workspaces.values():
        ws_changelog = Path(workspace.path) / filename
        # Single-package repos share the root changelog
        if ws_changelog.resolve() == (root / filename).resolve():
            continue
        update_workspace_changelog(
            ws_changelog,
            version,
            version_link,
            sections.workspace_sections.get(workspace.short_name),
            today,
        )
