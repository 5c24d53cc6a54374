"""File system access for rules and workspace discovery.

Everything that touches the disk goes through a Host so tests can hand in
a fake and so parsed package.json files are shared between rules.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol


class Host(Protocol):
    def exists(self, path: Path) -> bool: ...

    def read_file(self, path: Path) -> str: ...

    def read_json(self, path: Path) -> Any: ...


class SimpleHost:
    """Host backed by the local file system.

    JSON documents are parsed once per path and cached for the lifetime of
    the host, which is one run.
    """

    def __init__(self) -> None:
        self._json_cache: dict[Path, Any] = {}

    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def read_file(self, path: Path) -> str:
        return Path(path).read_text(encoding="utf-8")

    def read_json(self, path: Path) -> Any:
        key = Path(path).resolve()
        if key not in self._json_cache:
            self._json_cache[key] = json.loads(self.read_file(key))
        return self._json_cache[key]
