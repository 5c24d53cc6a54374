from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, Field

from .. import globs
from .base import RuleType
from .registry import register_rule_type

DEPENDENCY_SECTIONS = ("dependencies", "devDependencies", "peerDependencies")


class BannedDependenciesOptions(BaseModel):
    banned_dependencies: list[str] = Field(min_length=1)


@register_rule_type
class BannedDependencies(RuleType):
    type_id = "banned-dependencies"
    description = "Dependencies matching any banned glob are not allowed"
    options_model = BannedDependenciesOptions

    async def check(self, context, options: BannedDependenciesOptions, extra: Mapping[str, Any]) -> None:
        package_json = context.get_package_json()

        for section in DEPENDENCY_SECTIONS:
            deps = package_json.get(section) or {}
            if not isinstance(deps, dict):
                continue
            for dep in sorted(deps):
                if globs.matches_any_glob(dep, options.banned_dependencies):
                    context.add_error(
                        file=context.package_json_path,
                        message=f"Banned dependency {dep!r} found in {section}",
                    )
