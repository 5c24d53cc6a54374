from __future__ import annotations

from pathlib import Path

import pytest

from conftest import write, write_json
from monorepolint.errors import ConfigError
from monorepolint.host import SimpleHost
from monorepolint.workspace import find_workspace_dir, get_workspace_package_dirs


def test_find_workspace_dir_walks_up(workspace_path: Path) -> None:
    host = SimpleHost()

    assert find_workspace_dir(host, workspace_path) == workspace_path
    assert find_workspace_dir(host, workspace_path / "packages" / "pkg-x") == workspace_path


def test_find_workspace_dir_none(tmp_path: Path) -> None:
    write_json(tmp_path / "solo" / "package.json", {"name": "solo"})

    assert find_workspace_dir(SimpleHost(), tmp_path / "solo") is None


def test_package_dirs_sorted_and_absolute(workspace_path: Path) -> None:
    dirs = get_workspace_package_dirs(SimpleHost(), workspace_path)

    assert [d.name for d in dirs] == ["pkg-x", "pkg-y", "pkg-z"]
    assert all(d.is_absolute() for d in dirs)


def test_package_dirs_skip_dirs_without_manifest_and_node_modules(tmp_path: Path) -> None:
    root = tmp_path / "repo"
    write_json(root / "package.json", {"workspaces": {"packages": ["packages/*", "libs/**"]}})
    write_json(root / "packages" / "a" / "package.json", {"name": "a"})
    (root / "packages" / "empty").mkdir(parents=True)
    write_json(root / "libs" / "b" / "package.json", {"name": "b"})
    write_json(root / "libs" / "b" / "node_modules" / "dep" / "package.json", {"name": "dep"})

    dirs = get_workspace_package_dirs(SimpleHost(), root)

    assert [d.relative_to(root.resolve()).as_posix() for d in dirs] == ["libs/b", "packages/a"]


def test_negated_patterns_exclude(tmp_path: Path) -> None:
    root = tmp_path / "repo"
    write_json(root / "package.json", {"workspaces": ["packages/*", "!packages/legacy"]})
    write_json(root / "packages" / "a" / "package.json", {"name": "a"})
    write_json(root / "packages" / "legacy" / "package.json", {"name": "legacy"})

    dirs = get_workspace_package_dirs(SimpleHost(), root)

    assert [d.name for d in dirs] == ["a"]


def test_pnpm_workspace(tmp_path: Path) -> None:
    root = tmp_path / "repo"
    write_json(root / "package.json", {"name": "root", "private": True})
    write(
        root / "pnpm-workspace.yaml",
        """# workspace
packages:
  - 'apps/*'
  - "tools/cli"  # the cli
""",
    )
    write_json(root / "apps" / "web" / "package.json", {"name": "web"})
    write_json(root / "tools" / "cli" / "package.json", {"name": "cli"})

    host = SimpleHost()

    assert find_workspace_dir(host, root / "apps" / "web") == root.resolve()
    assert [d.name for d in get_workspace_package_dirs(host, root)] == ["web", "cli"]


def test_pnpm_workspace_flow_list(tmp_path: Path) -> None:
    root = tmp_path / "repo"
    write(root / "pnpm-workspace.yaml", 'packages: ["apps/*", "tools/cli"]\n')
    write_json(root / "apps" / "web" / "package.json", {"name": "web"})
    write_json(root / "tools" / "cli" / "package.json", {"name": "cli"})

    assert [d.name for d in get_workspace_package_dirs(SimpleHost(), root)] == ["web", "cli"]


def test_pnpm_workspace_invalid_yaml(tmp_path: Path) -> None:
    root = tmp_path / "repo"
    write(root / "pnpm-workspace.yaml", "packages: [apps/*\n")

    with pytest.raises(ConfigError, match="pnpm-workspace.yaml"):
        get_workspace_package_dirs(SimpleHost(), root)
