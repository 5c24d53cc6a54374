from __future__ import annotations

import difflib
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, model_validator
from rich.console import Console
from rich.table import Table

from .base import RuleType
from .registry import register_rule_type


class FileContentsOptions(BaseModel):
    file: str
    template: str | None = None
    # Relative to the workspace root
    template_file: str | None = None

    @model_validator(mode="after")
    def _one_template(self) -> "FileContentsOptions":
        if (self.template is None) == (self.template_file is None):
            raise ValueError("exactly one of `template` or `template_file` is required")
        return self


@register_rule_type
class FileContents(RuleType):
    type_id = "file-contents"
    description = "A file in the package must match a template"
    options_model = FileContentsOptions

    def __init__(self):
        super().__init__()
        self.reset_stats()

    def reset_stats(self) -> None:
        self.files_read = 0
        self.templates_read = 0
        self._template_cache: dict[Path, str] = {}

    def _expected(self, context, options: FileContentsOptions) -> str:
        if options.template is not None:
            return options.template
        template_path = context.get_workspace_context().package_dir / options.template_file
        if template_path not in self._template_cache:
            self.templates_read += 1
            self._template_cache[template_path] = context.host.read_file(template_path)
        return self._template_cache[template_path]

    async def check(self, context, options: FileContentsOptions, extra: Mapping[str, Any]) -> None:
        target = context.package_dir / options.file
        expected = self._expected(context, options)

        if not context.host.exists(target):
            context.add_error(file=target, message="File is missing", long_message=f"Expected contents from rule {extra['id']}")
            return

        self.files_read += 1
        actual = context.host.read_file(target)
        if actual != expected:
            diff = "".join(
                difflib.unified_diff(
                    expected.splitlines(keepends=True),
                    actual.splitlines(keepends=True),
                    fromfile="expected",
                    tofile=options.file,
                )
            )
            context.add_error(file=target, message="File does not match template", long_message=diff)

    def print_stats(self, console: Console | None = None) -> None:
        console = console or Console(stderr=True)
        table = Table(title="file-contents stats", show_header=False)
        table.add_column("stat", justify="left")
        table.add_column("value", justify="right")
        table.add_row("Files read", str(self.files_read))
        table.add_row("Templates read", str(self.templates_read))
        console.print(table)
