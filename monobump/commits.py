"""Conventional commit parsing.

Implements the narrow grammar monobump understands:

    type[(scope)][!]: subject

    optional body
    BREAKING CHANGE: footer note

Only the `!` marker in the header makes a commit breaking. Footer notes are
collected and kept on the commit, but do not set the flag by themselves.
"""

from __future__ import annotations

import re

from .models import CommitNote, CommitType, ParsedCommit

HEADER_PATTERN = re.compile(r"^(\w*)(?:\(([^)]*)\))?(!)?: (.*)$")
NOTE_KEYWORDS = ("BREAKING CHANGE", "BREAKING CHANGES")
# Longest keyword first so "BREAKING CHANGES" is not read as "BREAKING CHANGE" + "S"
NOTE_PATTERN = re.compile(
    r"^[\s|*]*("
    + "|".join(re.escape(k) for k in sorted(NOTE_KEYWORDS, key=len, reverse=True))
    + r")[:\s]+(.*)$"
)
VERSION_BUMP_PATTERN = re.compile(r"^bump version( to .+)?$")
DEPENDENCY_GROUP_PATTERN = re.compile(r"bump the .+ group")

_ALLOWED_TYPES = frozenset(t.value for t in CommitType)


def is_allowed_type(value: str | None) -> bool:
    """Return True if `value` is one of the recognised commit types."""
    return value in _ALLOWED_TYPES


def is_version_bump_commit(commit_type: str, subject: str) -> bool:
    """Detect the release commits monobump itself produces.

    Examples:
        ("chore", "bump version to 1.2.0") → True
        ("chore", "  bump version  ") → True
        ("feat", "bump version") → False
        ("chore", "version bump") → False
    """
    return commit_type == "chore" and bool(VERSION_BUMP_PATTERN.match(subject.strip()))


def is_dependency_group_commit(subject: str, scope: str) -> bool:
    """Detect grouped dependency updates such as Dependabot group PRs.

    Example:
        ("bump the production group with 5 updates", "deps") → True
    """
    return scope == "deps" and bool(DEPENDENCY_GROUP_PATTERN.search(subject))


def parse_notes(body: str) -> list[CommitNote]:
    """Collect footer notes from a commit body.

    A line starting with a note keyword opens a note; following lines are
    appended to it until the next keyword line or the end of the body.
    """
    notes: list[CommitNote] = []
    title: str | None = None
    lines: list[str] = []

    for line in body.splitlines():
        match = NOTE_PATTERN.match(line)
        if match:
            if title is not None:
                notes.append(CommitNote(title=title, text="\n".join(lines).strip()))
            title = match.group(1)
            lines = [match.group(2)]
        elif title is not None:
            lines.append(line)

    if title is not None:
        notes.append(CommitNote(title=title, text="\n".join(lines).strip()))
    return notes


def parse_commit(
    header: str | None,
    body: str = "",
    *,
    hash: str | None = None,
    require_scope: bool = False,
) -> ParsedCommit | None:
    """Parse one commit message into a ParsedCommit.

    Args:
        header: The commit subject line.
        body: The rest of the commit message.
        hash: Commit SHA to carry along.
        require_scope: Reject commits without a scope. Multi-package
                       repositories route commits by scope, so they set this.

    Returns:
        The parsed commit, or None when the commit should be ignored: the
        header does not match the grammar, the type is missing or not
        allowed, a required scope is missing, or it is a version-bump
        commit.
    """
    if not header:
        return None

    match = HEADER_PATTERN.match(header)
    if not match:
        return None

    commit_type, scope, bang, subject = match.groups()
    scope = scope or ""

    if not commit_type or not is_allowed_type(commit_type):
        return None
    if require_scope and not scope:
        return None
    if is_version_bump_commit(commit_type, subject):
        return None

    return ParsedCommit(
        subject=subject,
        type=CommitType(commit_type),
        scope=scope,
        breaking=bang is not None,
        notes=parse_notes(body),
        hash=hash,
    )
