"""Per-run cost accounting and the --stats tables."""

from __future__ import annotations

from dataclasses import dataclass, field

from rich.console import Console
from rich.table import Table


@dataclass
class RuleStats:
    """Cost of one rule name across a run. Times are in nanoseconds."""

    name: str
    total_time: int = 0
    executions: int = 0
    skipped: int = 0

    @property
    def time_per_run(self) -> int:
        return self.total_time // self.executions if self.executions else 0


@dataclass
class CheckStats:
    """Mutable counters owned by one check() run."""

    per_rule: dict[str, RuleStats] = field(default_factory=dict)
    includes_cost: int = 0
    excludes_cost: int = 0

    def for_rule(self, name: str) -> RuleStats:
        data = self.per_rule.get(name)
        if data is None:
            data = self.per_rule[name] = RuleStats(name=name)
        return data

    @property
    def total_executions(self) -> int:
        return sum(r.executions for r in self.per_rule.values())


_UNITS = (("s", 1_000_000_000), ("ms", 1_000_000), ("µs", 1_000))


def format_nanoseconds(ns: int, precision: int = 3) -> str:
    """Render a nanosecond duration in the largest unit that keeps it >= 1."""
    for suffix, size in _UNITS:
        if abs(ns) >= size:
            return f"{ns / size:.{precision}f}{suffix}"
    return f"{ns}ns"


def print_rule_costs(stats: CheckStats, console: Console) -> None:
    """Cost per rule, cheapest first, with totals in the footer."""
    if not stats.per_rule:
        return

    results = sorted(stats.per_rule.values(), key=lambda r: r.total_time)
    total_time = sum(r.total_time for r in results)
    total_runs = sum(r.executions for r in results)
    total_skipped = sum(r.skipped for r in results)
    avg_per_run = sum(r.time_per_run for r in results) // len(results)

    table = Table(title="Cost per rule type", show_header=True, show_footer=True)
    table.add_column("Duration", justify="right", footer=format_nanoseconds(total_time, 3))
    table.add_column("Rule", justify="left", footer="TOTAL")
    table.add_column("Runs", justify="right", footer=str(total_runs))
    table.add_column("Skipped", justify="right", footer=str(total_skipped))
    table.add_column("Dur/Run", justify="right", footer=format_nanoseconds(avg_per_run, 3))

    for result in results:
        table.add_row(
            format_nanoseconds(result.total_time, 3),
            result.name,
            str(result.executions),
            str(result.skipped),
            format_nanoseconds(result.time_per_run, 3),
        )
    console.print(table)


def print_glob_costs(stats: CheckStats, console: Console) -> None:
    table = Table(title="Total Includes/Excludes Glob Cost", show_header=False)
    table.add_column("stat", justify="left")
    table.add_column("cost", justify="right")
    table.add_row("include_packages cost:", format_nanoseconds(stats.includes_cost, 3))
    table.add_row("exclude_packages cost:", format_nanoseconds(stats.excludes_cost, 3))
    console.print(table)


def print_check_summary(
    console: Console,
    *,
    packages_checked: int,
    config_validation_time: int,
    total_time: int,
) -> None:
    table = Table(title="Random Stats for check()", show_header=False)
    table.add_column("stat", justify="left")
    table.add_column("value", justify="right")
    table.add_row("Packages Checked", str(packages_checked))
    table.add_row("Config Validation", format_nanoseconds(config_validation_time, 4))
    # Validating per package instead of once per run would have cost this much.
    table.add_row(
        "Old Config Validation",
        format_nanoseconds(config_validation_time * max(packages_checked - 1, 0), 4),
    )
    table.add_row("Total check() time", format_nanoseconds(total_time, 3))
    console.print(table)
