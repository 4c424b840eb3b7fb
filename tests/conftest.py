"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from monobump.models import RawCommit, Workspace
from monobump.shell import set_verbose

ROOT = "/repo"


def make_workspace(
    short_name: str,
    *,
    root: str = ROOT,
    path: str | None = None,
    dependency_names: set[str] | None = None,
    is_private: bool = False,
    version: str = "1.0.0",
) -> Workspace:
    """Build a workspace under `<root>/packages/<short_name>`."""
    return Workspace(
        name=f"@acme/{short_name}",
        short_name=short_name,
        path=path or f"{root}/packages/{short_name}",
        version=version,
        dependency_names=dependency_names or set(),
        is_private=is_private,
    )


def raw(subject: str, body: str = "", hash: str | None = "abc1234567") -> RawCommit:
    return RawCommit(hash=hash, subject=subject, body=body)


@pytest.fixture(autouse=True)
def _quiet() -> None:
    """Reset verbose output between tests."""
    set_verbose(False)


@pytest.fixture
def workspaces() -> dict[str, Workspace]:
    """Three public workspaces and one private one."""
    return {
        "core": make_workspace("core", dependency_names={"lodash", "zod"}),
        "cli": make_workspace("cli", dependency_names={"commander", "lodash"}),
        "docs": make_workspace("docs", dependency_names={"lodash"}, is_private=True),
        "utils": make_workspace("utils"),
    }


@pytest.fixture
def write_json() -> Callable[[Path, dict], Path]:
    """Write a JSON document with tab indentation, like npm does."""

    def _write(path: Path, data: dict) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent="\t") + "\n")
        return path

    return _write


@pytest.fixture
def monorepo(tmp_path: Path, write_json: Callable[[Path, dict], Path]) -> Path:
    """A repository with two public workspaces and one private workspace."""
    write_json(
        tmp_path / "package.json",
        {
            "name": "acme",
            "version": "1.0.0",
            "private": True,
            "workspaces": ["packages/*"],
            "repository": {"type": "git", "url": "git+https://github.com/acme/acme.git"},
        },
    )
    write_json(
        tmp_path / "packages" / "core" / "package.json",
        {
            "name": "@acme/core",
            "version": "1.0.0",
            "dependencies": {"lodash": "^4.17.0"},
        },
    )
    write_json(
        tmp_path / "packages" / "cli" / "package.json",
        {
            "name": "@acme/cli",
            "version": "1.0.0",
            "dependencies": {"@acme/core": "^1.0.0", "commander": "^12.0.0"},
            "devDependencies": {"@acme/testing": "file:../testing"},
        },
    )
    write_json(
        tmp_path / "packages" / "testing" / "package.json",
        {"name": "@acme/testing", "version": "1.0.0", "private": True},
    )
    return tmp_path


@pytest.fixture
def single_package(tmp_path: Path, write_json: Callable[[Path, dict], Path]) -> Path:
    """A repository whose root package.json is the only package."""
    write_json(
        tmp_path / "package.json",
        {
            "name": "widget",
            "version": "2.2.2-alpha",
            "dependencies": {"semver": "^7.0.0"},
            "repository": "https://github.com/acme/widget",
        },
    )
    return tmp_path
