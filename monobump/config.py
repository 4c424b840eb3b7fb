"""Project settings.

Settings are read from an optional `.monobump.toml` at the repository
root. Every key is optional:

    tag_prefix = "v"
    changelog_file = "CHANGELOG.md"
    repository_url = "https://github.com/acme/widgets"
"""

from __future__ import annotations

from pathlib import Path

import tomlkit
from pydantic import BaseModel, ConfigDict, ValidationError
from tomlkit.exceptions import TOMLKitError

from .errors import ConfigError

CONFIG_FILENAME = ".monobump.toml"


class Settings(BaseModel):
    """Configurable options for a monobump run.

    Attributes:
        tag_prefix: Prefix of release tags; used to find the last release
                    and to build comparison links (e.g. "v" → "v1.2.0").
        changelog_file: Changelog filename at the root and in workspaces.
        repository_url: Base URL for links. Defaults to the `repository`
                        field of the root package.json.
    """

    model_config = ConfigDict(extra="forbid")

    tag_prefix: str = "v"
    changelog_file: str = "CHANGELOG.md"
    repository_url: str | None = None


def load_settings(root: str | Path) -> Settings:
    """Load settings from `<root>/.monobump.toml`, or defaults if it is absent.

    Raises:
        ConfigError: If the file is not valid TOML or has unknown or
                     mistyped keys.
    """
    path = Path(root) / CONFIG_FILENAME
    if not path.is_file():
        return Settings()

    try:
        doc = tomlkit.parse(path.read_text(encoding="utf-8"))
    except TOMLKitError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    try:
        return Settings.model_validate(doc.unwrap())
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings in {path}:\n{exc}") from exc
