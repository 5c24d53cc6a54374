"""Glob matching for package names."""

from __future__ import annotations

import time
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Iterable

from rich.console import Console
from rich.table import Table

from .stats import format_nanoseconds


@dataclass
class GlobStats:
    calls: int = 0
    cache_hits: int = 0
    match_time: int = 0  # nanoseconds


class GlobMatcher:
    """Memoizing matcher: a name is tested against a pattern list once."""

    def __init__(self) -> None:
        self._cache: dict[tuple[str, tuple[str, ...]], bool] = {}
        self.stats = GlobStats()

    def matches_any_glob(self, name: str, patterns: Iterable[str]) -> bool:
        key = (name, tuple(patterns))
        self.stats.calls += 1
        cached = self._cache.get(key)
        if cached is not None:
            self.stats.cache_hits += 1
            return cached

        start = time.perf_counter_ns()
        result = any(fnmatchcase(name, pattern) for pattern in key[1])
        self.stats.match_time += time.perf_counter_ns() - start

        self._cache[key] = result
        return result

    def reset(self) -> None:
        self._cache.clear()
        self.stats = GlobStats()

    def print_stats(self, console: Console | None = None) -> None:
        console = console or Console(stderr=True)
        table = Table(title="matches_any_glob() stats", show_header=False)
        table.add_column("stat", justify="left")
        table.add_column("value", justify="right")
        table.add_row("Calls", str(self.stats.calls))
        table.add_row("Cache hits", str(self.stats.cache_hits))
        table.add_row("Match time", format_nanoseconds(self.stats.match_time, 3))
        console.print(table)


_default_matcher = GlobMatcher()


def matches_any_glob(name: str, patterns: Iterable[str]) -> bool:
    """Return True if `name` matches at least one of `patterns`."""
    return _default_matcher.matches_any_glob(name, patterns)


def print_stats(console: Console | None = None) -> None:
    _default_matcher.print_stats(console)


def default_matcher() -> GlobMatcher:
    return _default_matcher
