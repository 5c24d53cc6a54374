"""Check scopes: the workspace root and its packages.

A Context is created once per checked scope per run. Rules report
violations on it; `finish()` seals the scope and escalates its failure
into the owning WorkspaceContext, whose `failed` flag is the run result.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape

from .config import ResolvedConfig
from .host import Host
from .workspace import get_workspace_package_dirs

logger = logging.getLogger(__name__)


class Context:
    """One checkable scope."""

    def __init__(
        self,
        package_dir: Path,
        resolved_config: ResolvedConfig,
        host: Host,
        workspace_context: "WorkspaceContext | None" = None,
        console: Console | None = None,
    ):
        self.package_dir = Path(package_dir).resolve()
        self.resolved_config = resolved_config
        self.host = host
        self.console = console or (workspace_context.console if workspace_context else Console(stderr=True))
        self.failed = False
        self._workspace_context = workspace_context
        self._finished = False
        self._name: str | None = None

    def get_workspace_context(self) -> "WorkspaceContext":
        if self._workspace_context is None:
            raise RuntimeError(f"Context for {self.package_dir} has no workspace context")
        return self._workspace_context

    @property
    def is_workspace_root(self) -> bool:
        return self.get_workspace_context() is self

    @property
    def package_json_path(self) -> Path:
        return self.package_dir / "package.json"

    def get_package_json(self) -> dict[str, Any]:
        """Parsed package.json of this scope, or {} when there is none."""
        if not self.host.exists(self.package_json_path):
            return {}
        data = self.host.read_json(self.package_json_path)
        return data if isinstance(data, dict) else {}

    @property
    def name(self) -> str:
        """package.json name, falling back to the path relative to the workspace."""
        if self._name is None:
            name = self.get_package_json().get("name")
            if isinstance(name, str) and name:
                self._name = name
            else:
                root = self.get_workspace_context().package_dir
                try:
                    self._name = self.package_dir.relative_to(root).as_posix()
                except ValueError:
                    self._name = self.package_dir.as_posix()
        return self._name

    def add_error(self, *, file: Path | str, message: str, long_message: str | None = None) -> None:
        """Record a rule violation: the scope fails and the error is printed."""
        self.failed = True
        self._report("[bold red]Error[/]", file, message, long_message)

    def add_warning(self, *, file: Path | str, message: str, long_message: str | None = None) -> None:
        """Report a finding that does not fail the scope."""
        self._report("[yellow]Warning[/]", file, message, long_message)

    def _report(self, label: str, file: Path | str, message: str, long_message: str | None) -> None:
        if self.resolved_config.silent:
            return
        self.console.print(f"{label} [dim]{escape(self.name)}[/] {escape(str(file))}: {escape(message)}", highlight=False)
        if long_message:
            self.console.print(long_message, style="dim", markup=False, highlight=False)

    def finish(self) -> None:
        """Seal this scope and escalate its failure to the workspace."""
        if self._finished:
            raise RuntimeError(f"Context for {self.name} finished twice")
        self._finished = True
        workspace = self.get_workspace_context()
        if self.failed and workspace is not self:
            workspace.failed = True
        logger.debug("Finished %s (%s)", self.name, "failed" if self.failed else "passed")


class WorkspaceContext(Context):
    """The workspace root scope; its `failed` flag aggregates the whole run."""

    def __init__(
        self,
        workspace_dir: Path,
        resolved_config: ResolvedConfig,
        host: Host,
        console: Console | None = None,
    ):
        super().__init__(workspace_dir, resolved_config, host, workspace_context=None, console=console)
        self._workspace_context = self

    def get_workspace_package_dirs(self) -> list[Path]:
        return get_workspace_package_dirs(self.host, self.package_dir)

    def create_child_context(self, package_dir: Path) -> Context:
        return Context(package_dir, self.resolved_config, self.host, workspace_context=self)
