"""Changelog generation and version bumping for npm workspaces."""
