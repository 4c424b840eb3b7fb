"""Data models for monobump.

These Pydantic models represent the core data structures passed between
the stages of the release pipeline: raw commits from git, classified
commits, and the workspaces they are attributed to.
"""

from __future__ import annotations

from enum import Enum, IntEnum

from pydantic import BaseModel, Field


class CommitType(str, Enum):
    """Conventional commit types that take part in a release.

    Any other type makes a commit unclassifiable and it is dropped.
    """

    FEAT = "feat"
    FEATURE = "feature"
    IMPROV = "improv"
    FIX = "fix"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    PERF = "perf"
    TEST = "test"
    CHORE = "chore"
    CI = "ci"
    BUILD = "build"

    @property
    def bump(self) -> BumpType:
        """The bump this type asks for on its own (never major)."""
        return CHANGE_TYPE_BUMP[self]

    @property
    def section(self) -> str:
        """Changelog section heading the commit is listed under."""
        return CHANGE_TYPE_SECTION[self]


class BumpType(IntEnum):
    """Semantic version bump, ordered by severity so max() picks the winner."""

    PATCH = 1
    MINOR = 2
    MAJOR = 3

    def __str__(self) -> str:
        return self.name.lower()


CHANGE_TYPE_BUMP: dict[CommitType, BumpType] = {
    CommitType.FEAT: BumpType.MINOR,
    CommitType.FEATURE: BumpType.MINOR,
    CommitType.IMPROV: BumpType.MINOR,
    CommitType.FIX: BumpType.PATCH,
    CommitType.DOCS: BumpType.PATCH,
    CommitType.STYLE: BumpType.PATCH,
    CommitType.REFACTOR: BumpType.PATCH,
    CommitType.PERF: BumpType.PATCH,
    CommitType.TEST: BumpType.PATCH,
    CommitType.CHORE: BumpType.PATCH,
    CommitType.CI: BumpType.PATCH,
    CommitType.BUILD: BumpType.PATCH,
}

CHANGE_TYPE_SECTION: dict[CommitType, str] = {
    CommitType.FEAT: "Features",
    CommitType.FEATURE: "Features",
    CommitType.IMPROV: "Improvements",
    CommitType.FIX: "Bug Fixes",
    CommitType.DOCS: "Documentation",
    CommitType.STYLE: "Maintenance",
    CommitType.REFACTOR: "Improvements",
    CommitType.PERF: "Improvements",
    CommitType.TEST: "Tests",
    CommitType.CHORE: "Maintenance",
    CommitType.CI: "Continuous Integration",
    CommitType.BUILD: "Build System",
}


class RawCommit(BaseModel):
    """One commit as read from `git log`, before classification.

    Attributes:
        hash: Full commit SHA. May be missing for malformed log chunks.
        subject: First line of the commit message (the conventional header).
        body: Remaining lines of the message, stripped.
    """

    hash: str | None = None
    subject: str | None = None
    body: str = ""


class CommitNote(BaseModel):
    """A footer note such as `BREAKING CHANGE: <text>`."""

    title: str
    text: str


class ParsedCommit(BaseModel):
    """A commit that matched the conventional grammar and an allowed type.

    Attributes:
        subject: Text after `type(scope)!: `. May be empty.
        type: One of the allowed CommitType members.
        scope: Parenthesised scope, or "" when absent. In single-package
               repos an absent scope is replaced by the package short name.
        breaking: True only when the header carried the `!` marker.
        notes: Footer notes found in the body, in order of appearance.
        hash: Commit SHA, used for changelog links and diff lookups.
    """

    subject: str
    type: CommitType
    scope: str = ""
    breaking: bool = False
    notes: list[CommitNote] = Field(default_factory=list)
    hash: str | None = None


class Workspace(BaseModel):
    """A package in the repository, or the repository itself when it has one.

    Attributes:
        name: Full package name from package.json (e.g. "@acme/core").
        short_name: Name without the npm scope (e.g. "core"); used as the
                    commit scope and as the key in workspace mappings.
        path: Absolute path to the package directory.
        version: Current version string from package.json.
        changed: True once at least one commit is attributed.
        commits: Commits attributed to this workspace, in log order.
        dependency_names: Keys of the package's production `dependencies`.
        is_private: Mirrors `"private": true` in package.json.
    """

    name: str
    short_name: str
    path: str
    version: str = "0.0.0"
    changed: bool = False
    commits: list[ParsedCommit] = Field(default_factory=list)
    dependency_names: set[str] = Field(default_factory=set)
    is_private: bool = False

    def record(self, commit: ParsedCommit) -> None:
        """Attribute a commit, keeping `changed` in step with `commits`."""
        self.commits.append(commit)
        self.changed = True


class VersionBump(BaseModel):
    """Records a version change for a package manifest.

    Attributes:
        old: The version before bumping.
        new: The version after bumping.
    """

    old: str
    new: str
