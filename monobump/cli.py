"""CLI entry point for monobump."""

from __future__ import annotations

from pathlib import Path

import click

from monobump.bump import parse_bump_type
from monobump.errors import InvalidBumpTypeError, MonobumpError
from monobump.pipeline import run_release


@click.command()
@click.version_option(package_name="monobump")
@click.option(
    "-d",
    "--dry-run",
    is_flag=True,
    help="Preview the new version without writing files.",
)
@click.option(
    "-t",
    "--type",
    "bump_type",
    metavar="[major|minor|patch]",
    default=None,
    help="Force a specific version bump type.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging.")
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Repository root.",
)
def cli(dry_run: bool, bump_type: str | None, verbose: bool, root: Path) -> None:
    """Generate changelogs and bump versions for npm workspaces and packages."""
    try:
        override = parse_bump_type(bump_type) if bump_type is not None else None
    except InvalidBumpTypeError as exc:
        raise click.BadParameter(str(exc), param_hint="'--type'") from exc

    if not (root / ".git").exists():
        raise click.ClickException("Not a git repository. Run from the repo root.")

    try:
        run_release(root, dry_run=dry_run, bump_type=override, verbose=verbose)
    except MonobumpError as exc:
        raise click.ClickException(str(exc)) from exc
