"""Git history queries.

Every query runs through `shell.git`. Lookups that may legitimately fail
(no tags yet, unknown commit) return an empty result instead of raising;
only the commit log itself is required to succeed, and its failure is
raised as GitError.
"""

from __future__ import annotations

import subprocess

from .errors import GitError
from .models import RawCommit
from .shell import git

COMMIT_END_MARKER = "==END=="
LOG_FORMAT = f"%H%n%s%n%b%n{COMMIT_END_MARKER}"


def get_last_tag(cwd: str, pattern: str | None = None) -> str | None:
    """Return the most recent tag reachable from HEAD, or None.

    Args:
        cwd: Repository root.
        pattern: Optional glob (e.g. "v*") passed to `git describe --match`.
    """
    args = ["describe", "--tags", "--abbrev=0"]
    if pattern:
        args.extend(["--match", pattern])
    return git(*args, cwd=cwd, check=False) or None


def get_first_commit(cwd: str) -> str | None:
    """Return the root commit hash, or None for an empty repository."""
    output = git("rev-list", "--max-parents=0", "HEAD", cwd=cwd, check=False)
    # Repositories with merged histories can have several roots
    return output.splitlines()[0] if output else None


def get_commits_since_tag(cwd: str, tag: str | None) -> list[RawCommit]:
    """Read commits from `tag..HEAD`, or the full history when tag is None.

    Each commit is emitted as hash, subject and body lines followed by an
    end marker, so bodies containing blank lines are kept intact.

    Raises:
        GitError: If git cannot read the history, e.g. before the first
                  commit.
    """
    args = ["log"]
    if tag:
        args.append(f"{tag}..HEAD")
    args.append(f"--pretty=format:{LOG_FORMAT}")
    try:
        output = git(*args, cwd=cwd)
    except subprocess.CalledProcessError as exc:
        detail = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
        raise GitError(f"Failed to read commit history: {detail}") from exc

    commits: list[RawCommit] = []
    for chunk in output.split(COMMIT_END_MARKER):
        chunk = chunk.strip("\n")
        if not chunk.strip():
            continue
        lines = chunk.split("\n")
        commits.append(
            RawCommit(
                hash=lines[0] or None,
                subject=lines[1] if len(lines) > 1 else None,
                body="\n".join(lines[2:]).strip(),
            )
        )
    return commits


def get_changed_files(cwd: str, commit_hash: str) -> list[str]:
    """List the repository-relative paths touched by a commit."""
    output = git(
        "show", "--name-only", "--pretty=format:", commit_hash, cwd=cwd, check=False
    )
    return [line for line in output.splitlines() if line.strip()]


def get_file_diff(cwd: str, commit_hash: str, file_path: str) -> str:
    """Return the unified diff a commit made to one file."""
    return git("show", commit_hash, "--", file_path, cwd=cwd, check=False)
