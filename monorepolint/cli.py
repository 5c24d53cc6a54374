"""CLI entrypoint for monorepolint."""

import logging
import os
import sys
from pathlib import Path

import click
from rich.logging import RichHandler

from . import __version__
from .errors import MonorepolintError


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False, rich_tracebacks=True)],
        force=True,
    )


@click.group()
@click.version_option(__version__, prog_name="monorepolint")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """monorepolint - Check monorepo packages against structural rules."""
    ctx.ensure_object(dict)


@cli.command()
@click.argument(
    "paths",
    nargs=-1,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Config file (defaults to .monorepolint.toml or [tool.monorepolint] found from cwd)",
)
@click.option("--verbose", is_flag=True, help="Log each package as it is checked")
@click.option("--silent", is_flag=True, help="Do not print individual errors")
@click.option("--stats", "report_stats", is_flag=True, help="Print timing statistics after the run")
def check(
    paths: tuple[Path, ...],
    config_path: Path | None,
    verbose: bool,
    silent: bool,
    report_stats: bool,
) -> None:
    """Check packages for rule violations.

    Run from the workspace root to check the root and every package, from a
    package directory to check only that package, or pass files (such as
    packages/foo/package.json) to check only the packages containing them.

    Examples:

        monorepolint check

        monorepolint check packages/foo/package.json --stats
    """
    from .commands.check_cmd import run_check

    verbose = verbose or os.environ.get("MONOREPOLINT_VERBOSE") == "1"
    _configure_logging(verbose)

    try:
        exit_code = run_check(
            Path.cwd(),
            paths=list(paths) or None,
            config_path=config_path,
            verbose=verbose,
            silent=silent,
            report_stats=report_stats,
        )
    except MonorepolintError as exc:
        raise click.ClickException(str(exc)) from exc
    sys.exit(exit_code)


@cli.command("list-rules")
def list_rules() -> None:
    """List available rule types."""
    from .commands.check_cmd import run_list_rules

    sys.exit(run_list_rules())


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
