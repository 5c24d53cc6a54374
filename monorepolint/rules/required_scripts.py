from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, Field

from .base import RuleType
from .registry import register_rule_type


class RequiredScriptsOptions(BaseModel):
    scripts: dict[str, str] = Field(min_length=1)


@register_rule_type
class RequiredScripts(RuleType):
    type_id = "required-scripts"
    description = "package.json scripts must match the given commands"
    options_model = RequiredScriptsOptions

    async def check(self, context, options: RequiredScriptsOptions, extra: Mapping[str, Any]) -> None:
        scripts = context.get_package_json().get("scripts") or {}
        if not isinstance(scripts, dict):
            context.add_error(file=context.package_json_path, message="`scripts` must be an object")
            return

        for name, command in options.scripts.items():
            actual = scripts.get(name)
            if actual is None:
                context.add_error(
                    file=context.package_json_path,
                    message=f"Missing script {name!r}",
                    long_message=f"Expected: {command}",
                )
            elif actual != command:
                context.add_error(
                    file=context.package_json_path,
                    message=f"Script {name!r} does not match",
                    long_message=f"expected: {command}\nactual:   {actual}",
                )
