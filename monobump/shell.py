"""Shell and git utilities.

Provides simple wrappers around subprocess calls for running git commands,
plus the output helpers used by every stage of the release pipeline.
"""

from __future__ import annotations

import subprocess

_verbose = False


def git(*args: str, cwd: str | None = None, check: bool = True) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "log", "--oneline").
        cwd: Directory to run git in. Defaults to the current directory.
        check: If True (default), raise on non-zero exit. Set to False
               for commands that may legitimately fail (e.g., tag lookup).

    Returns:
        Stripped stdout from the git command.
    """
    result = subprocess.run(
        ["git", *args], capture_output=True, text=True, check=check, cwd=cwd
    )
    return result.stdout.strip()


def set_verbose(enabled: bool) -> None:
    """Turn debug output on or off for the rest of the process."""
    global _verbose
    _verbose = enabled


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate major phases of the release pipeline in terminal output.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def info(msg: str) -> None:
    print(f"  {msg}")


def debug(msg: str) -> None:
    """Print a detail line, only when verbose output is enabled."""
    if _verbose:
        print(f"  [debug] {msg}")
