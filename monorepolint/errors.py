"""Exception types raised by monorepolint.

Rule violations are not exceptions: rules report them on the context.
These cover the conditions that end a run before any package is checked.
"""

from __future__ import annotations

from pathlib import Path


class MonorepolintError(Exception):
    """Base class for fatal monorepolint errors."""


class WorkspaceNotFoundError(MonorepolintError):
    """No workspace root could be found above a directory."""

    def __init__(self, cwd: Path):
        super().__init__(f"Unable to find a workspace from {cwd}")
        self.cwd = cwd


class ConfigError(MonorepolintError):
    """Configuration is missing, malformed, or fails option validation."""
