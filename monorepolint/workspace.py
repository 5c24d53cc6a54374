"""Workspace root and package directory discovery."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .host import Host

logger = logging.getLogger(__name__)

PNPM_WORKSPACE_FILE = "pnpm-workspace.yaml"


def _workspace_patterns_from_package_json(package_json: Any) -> list[str] | None:
    if not isinstance(package_json, dict):
        return None
    workspaces = package_json.get("workspaces")
    if isinstance(workspaces, dict):
        workspaces = workspaces.get("packages")
    if isinstance(workspaces, list):
        return [str(w) for w in workspaces if isinstance(w, str)]
    return None


def _read_pnpm_patterns(text: str, path: Path) -> list[str]:
    """The `packages:` list of a pnpm-workspace.yaml."""
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Could not parse {path}: {exc}") from exc
    packages = data.get("packages") if isinstance(data, dict) else None
    if not isinstance(packages, list):
        return []
    return [str(p) for p in packages if isinstance(p, str)]


def get_workspace_patterns(host: Host, workspace_dir: Path) -> list[str] | None:
    """Workspace package globs declared at `workspace_dir`, or None if it is not a root."""
    package_json_path = workspace_dir / "package.json"
    if host.exists(package_json_path):
        patterns = _workspace_patterns_from_package_json(host.read_json(package_json_path))
        if patterns is not None:
            return patterns

    pnpm_path = workspace_dir / PNPM_WORKSPACE_FILE
    if host.exists(pnpm_path):
        return _read_pnpm_patterns(host.read_file(pnpm_path), pnpm_path)

    return None


def find_workspace_dir(host: Host, cwd: Path) -> Path | None:
    """Find the closest directory at or above `cwd` that declares workspaces."""
    cur = Path(cwd).resolve()
    for candidate in (cur, *cur.parents):
        if get_workspace_patterns(host, candidate) is not None:
            logger.debug("Workspace root found at %s", candidate)
            return candidate
    return None


def get_workspace_package_dirs(host: Host, workspace_dir: Path) -> list[Path]:
    """Absolute package directories of the workspace, sorted."""
    workspace_dir = Path(workspace_dir).resolve()
    patterns = get_workspace_patterns(host, workspace_dir) or []

    included: set[Path] = set()
    excluded: set[Path] = set()
    for pattern in patterns:
        negated = pattern.startswith("!")
        glob = pattern[1:] if negated else pattern
        glob = glob.rstrip("/")
        if not glob:
            continue
        for match in workspace_dir.glob(glob):
            if not match.is_dir() or "node_modules" in match.relative_to(workspace_dir).parts:
                continue
            if not host.exists(match / "package.json"):
                continue
            (excluded if negated else included).add(match.resolve())

    return sorted(included - excluded - {workspace_dir})
