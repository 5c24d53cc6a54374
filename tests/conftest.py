"""Pytest configuration and fixtures."""

from __future__ import annotations

import asyncio
import io
import json
from pathlib import Path
from typing import Any, Mapping

import pytest
from pydantic import BaseModel
from rich.console import Console

from monorepolint.config import ResolvedRule
from monorepolint.rules.base import RuleType


def write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def write_json(path: Path, data: Any) -> None:
    write(path, json.dumps(data, indent=2) + "\n")


class RecordingOptions(BaseModel):
    fail_for: list[str] = []


class RecordingRule(RuleType):
    """Rule type that records every call and fails the packages it is told to."""

    type_id = "recording"
    description = "test rule"
    options_model = RecordingOptions

    def __init__(self, calls: list[tuple[str, str]]):
        super().__init__()
        self.calls = calls
        self.stats_printed = 0
        self._running = False

    async def check(self, context, options: RecordingOptions, extra: Mapping[str, Any]) -> None:
        assert not self._running, "checks overlapped"
        self._running = True
        self.calls.append((extra["id"], context.name))
        await asyncio.sleep(0)
        if context.name in options.fail_for:
            context.add_error(file=context.package_json_path, message=f"{extra['id']} failed")
        self._running = False

    def print_stats(self, console: Console | None = None) -> None:
        self.stats_printed += 1


class ExplodingRule(RuleType):
    type_id = "exploding"
    options_model = RecordingOptions

    async def check(self, context, options, extra) -> None:
        raise RuntimeError("broken rule")


@pytest.fixture
def workspace_path(tmp_path: Path) -> Path:
    """Workspace root with three packages: pkgX, pkgY, pkgZ."""
    root = tmp_path / "repo"
    write_json(root / "package.json", {"name": "root", "private": True, "workspaces": ["packages/*"]})
    write_json(root / "packages" / "pkg-x" / "package.json", {"name": "pkgX", "license": "MIT"})
    write_json(root / "packages" / "pkg-y" / "package.json", {"name": "pkgY", "license": "MIT"})
    write_json(root / "packages" / "pkg-z" / "package.json", {"name": "pkgZ", "license": "ISC"})
    return root.resolve()


@pytest.fixture
def calls() -> list[tuple[str, str]]:
    return []


@pytest.fixture
def recording_rule(calls: list[tuple[str, str]]) -> RecordingRule:
    return RecordingRule(calls)


@pytest.fixture
def quiet_console() -> Console:
    return Console(file=io.StringIO(), width=500)


def make_rule(rule_type: RuleType, rule_id: str, **kwargs: Any) -> ResolvedRule:
    kwargs.setdefault("name", rule_id)
    return ResolvedRule(id=rule_id, rule_type=rule_type, **kwargs)
