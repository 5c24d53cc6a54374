"""Rule execution engine.

Orchestrates one run: find the workspace, validate rule options once,
pick the scopes to check, and run every applicable rule against each scope.

Key invariants:
- Scopes are checked one at a time, and within a scope rules run one at a
  time in declared order, so rule output never interleaves
- A rule exception aborts the run; violations are reported on the context
- Stats are owned by the run, never by the module
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from rich.console import Console

from . import globs
from .config import ResolvedConfig, ResolvedRule
from .context import Context, WorkspaceContext
from .errors import WorkspaceNotFoundError
from .host import Host
from .rules.base import RuleType
from .stats import CheckStats, print_check_summary, print_glob_costs, print_rule_costs
from .workspace import find_workspace_dir

logger = logging.getLogger(__name__)


def should_skip_package(context: Context, rule: ResolvedRule, stats: CheckStats) -> bool:
    """Whether `rule` does not apply to `context`.

    Glob time is charged to `stats.excludes_cost` / `stats.includes_cost`.
    """
    # Cheapest check first: most rules never look at the root, no globbing needed.
    if not rule.include_workspace_root and context.is_workspace_root:
        return True

    stats.excludes_cost -= time.perf_counter_ns()
    exclude = rule.exclude_packages is not None and globs.matches_any_glob(context.name, rule.exclude_packages)
    stats.excludes_cost += time.perf_counter_ns()

    if exclude:
        return True

    stats.includes_cost -= time.perf_counter_ns()
    include = rule.include_packages is None or globs.matches_any_glob(context.name, rule.include_packages)
    stats.includes_cost += time.perf_counter_ns()

    return not include


async def check_package(context: Context, stats: CheckStats) -> None:
    """Run every rule against one scope, in order, then finish the scope."""
    if context.resolved_config.verbose:
        logger.info("Starting check against %s", context.name)

    for rule in context.resolved_config.rules:
        data = stats.for_rule(rule.name)
        data.executions += 1
        # Skip-decision time is charged to the rule too.
        data.total_time -= time.perf_counter_ns()

        if should_skip_package(context, rule, stats):
            data.total_time += time.perf_counter_ns()
            data.skipped += 1
            logger.debug("Skipping %s for %s", rule.id, context.name)
            continue

        await rule.check(context, rule.options, {"id": rule.id})
        data.total_time += time.perf_counter_ns()

    context.finish()


def _validate_config(resolved_config: ResolvedConfig) -> ResolvedConfig:
    return replace(resolved_config, rules=tuple(rule.validate_options() for rule in resolved_config.rules))


async def check(
    resolved_config: ResolvedConfig,
    host: Host,
    cwd: Path | None = None,
    paths: Sequence[Path | str] | None = None,
    report_stats: bool = False,
    console: Console | None = None,
) -> bool:
    """Check the workspace containing `cwd`.

    Args:
        resolved_config: Rules to run, in execution order
        host: File system access
        cwd: Directory the run starts from (defaults to the process cwd)
        paths: Files whose containing directories are the only scopes to check
        report_stats: Print cost tables after the run
        console: Where stats and rule output go (defaults to stderr)

    Returns:
        True if no scope failed

    Raises:
        WorkspaceNotFoundError: if no workspace root is found from `cwd`
        ConfigError: if any rule's options are invalid
    """
    check_start = time.perf_counter_ns()
    cwd = Path(cwd if cwd is not None else Path.cwd()).resolve()
    console = console or Console(stderr=True)

    workspace_dir = find_workspace_dir(host, cwd)
    if workspace_dir is None:
        raise WorkspaceNotFoundError(cwd)

    # Validate config once per run, not once per package.
    check_config_start = time.perf_counter_ns()
    validated_config = _validate_config(resolved_config)
    check_config_end = time.perf_counter_ns()

    # Diagnostic counters cover this run only.
    globs.default_matcher().reset()
    for rule_type in _distinct_rule_types(validated_config):
        rule_type.reset_stats()

    workspace_context = WorkspaceContext(workspace_dir, validated_config, host, console=console)

    stats = CheckStats()
    packages_checked = 0

    if paths is not None:
        # Several files can share a package; each scope is checked once.
        package_dirs = dict.fromkeys(Path(path).resolve().parent for path in paths)
        for package_dir in package_dirs:
            packages_checked += 1
            if package_dir == workspace_dir:
                await check_package(workspace_context, stats)
            else:
                await check_package(workspace_context.create_child_context(package_dir), stats)
    elif cwd == workspace_dir:
        packages_checked += 1
        await check_package(workspace_context, stats)

        for package_dir in workspace_context.get_workspace_package_dirs():
            packages_checked += 1
            await check_package(workspace_context.create_child_context(package_dir), stats)
    else:
        packages_checked += 1
        await check_package(workspace_context.create_child_context(cwd), stats)

    check_end = time.perf_counter_ns()

    if report_stats:
        print_rule_costs(stats, console)
        globs.print_stats(console)
        print_glob_costs(stats, console)
        print_check_summary(
            console,
            packages_checked=packages_checked,
            config_validation_time=check_config_end - check_config_start,
            total_time=check_end - check_start,
        )
        _print_rule_type_stats(validated_config, console)

    return not workspace_context.failed


def _distinct_rule_types(resolved_config: ResolvedConfig) -> list[RuleType]:
    # Resolved rules of one type share their stats; dedupe by type identity.
    seen: dict[int, RuleType] = {}
    for rule in resolved_config.rules:
        seen.setdefault(id(rule.rule_type), rule.rule_type)
    return list(seen.values())


def _print_rule_type_stats(resolved_config: ResolvedConfig, console: Console) -> None:
    for rule_type in _distinct_rule_types(resolved_config):
        if rule_type.print_stats is not None:
            rule_type.print_stats(console)
