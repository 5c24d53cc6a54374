"""Check command implementation."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..check import check
from ..config import find_config_file, load_config, resolve_config
from ..errors import ConfigError
from ..host import SimpleHost
from ..rules import registry


def run_check(
    cwd: Path,
    paths: list[Path] | None = None,
    config_path: Path | None = None,
    verbose: bool = False,
    silent: bool = False,
    report_stats: bool = False,
    console: Console | None = None,
) -> int:
    """Run all configured rules.

    Args:
        cwd: Directory to start from; the workspace root checks every package
        paths: Only check the packages containing these files
        config_path: Explicit config file (defaults to discovery from cwd)
        verbose: Log each scope as it is checked
        silent: Do not print individual errors
        report_stats: Print cost tables after the run
        console: Output console (defaults to stderr)

    Returns:
        Exit code (0 = every package passed, 1 = failures found)

    Raises:
        MonorepolintError: on a missing workspace or bad configuration
    """
    console = console or Console(stderr=True)

    if config_path is None:
        config_path = find_config_file(cwd)
        if config_path is None:
            raise ConfigError(f"No .monorepolint.toml or [tool.monorepolint] found from {cwd}")

    if verbose:
        console.print(f"Loading config from {config_path}...", style="dim")
    resolved_config = resolve_config(
        load_config(config_path),
        verbose=verbose or None,
        silent=silent or None,
    )
    if resolved_config.verbose:
        # `verbose = true` in the config file turns on per-scope logging too.
        logging.getLogger("monorepolint").setLevel(logging.DEBUG)

    passed = asyncio.run(
        check(
            resolved_config,
            SimpleHost(),
            cwd=cwd,
            paths=paths or None,
            report_stats=report_stats,
            console=console,
        )
    )

    if passed:
        console.print("✓ All packages passed", style="bold green")
        return 0
    console.print("✗ Some packages failed", style="bold red")
    return 1


def run_list_rules(console: Console | None = None) -> int:
    """Print the registered rule types."""
    console = console or Console()

    table = Table(title="Rule types")
    table.add_column("type", style="cyan", no_wrap=True)
    table.add_column("description")
    table.add_column("options", style="dim")

    for rule_type in sorted(registry.all(), key=lambda r: r.type_id):
        table.add_row(
            rule_type.type_id,
            rule_type.description,
            ", ".join(rule_type.options_model.model_fields),
        )

    console.print(table)
    return 0
