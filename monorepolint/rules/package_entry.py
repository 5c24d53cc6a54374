from __future__ import annotations

import json
from typing import Any, Mapping

from pydantic import BaseModel, Field, model_validator

from .base import RuleType
from .registry import register_rule_type


class PackageEntryOptions(BaseModel):
    # package.json keys that must hold exactly these values
    entries: dict[str, Any] = Field(default_factory=dict)
    # package.json keys that must be present, with any value
    entries_exist: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _require_something(self) -> "PackageEntryOptions":
        if not self.entries and not self.entries_exist:
            raise ValueError("at least one of `entries` or `entries_exist` is required")
        return self


@register_rule_type
class PackageEntry(RuleType):
    type_id = "package-entry"
    description = "package.json must contain the given entries"
    options_model = PackageEntryOptions

    async def check(self, context, options: PackageEntryOptions, extra: Mapping[str, Any]) -> None:
        package_json = context.get_package_json()

        for key, expected in options.entries.items():
            if key not in package_json:
                context.add_error(
                    file=context.package_json_path,
                    message=f"Missing entry {key!r}",
                    long_message=f"Expected {key!r} to be {json.dumps(expected)}",
                )
            elif package_json[key] != expected:
                context.add_error(
                    file=context.package_json_path,
                    message=f"Expected standardized entry for {key!r}",
                    long_message=f"expected: {json.dumps(expected)}\nactual:   {json.dumps(package_json[key])}",
                )

        for key in options.entries_exist:
            if key not in package_json:
                context.add_error(
                    file=context.package_json_path,
                    message=f"Entry {key!r} must exist",
                )
