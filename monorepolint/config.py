"""Configuration loading and rule resolution.

Config is TOML, either a `.monorepolint.toml` file or a
`[tool.monorepolint]` table in `pyproject.toml`. Loading is two steps:
`load_config` parses, `resolve_config` fills defaults and binds each rule
entry to its registered rule type. Options are validated later, once per
run, by `monorepolint.check.check`.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .rules.base import RuleType
from .rules.registry import RuleTypeRegistry, registry as default_registry

CONFIG_FILE_NAME = ".monorepolint.toml"
PYPROJECT_FILE_NAME = "pyproject.toml"
UNKNOWN_RULE_NAME = "unknown"


@dataclass(frozen=True)
class ResolvedRule:
    """One configured rule, ready to execute."""

    id: str
    rule_type: RuleType
    options: Any = None
    name: str = UNKNOWN_RULE_NAME
    # None means "no list": every package is included / none is excluded.
    include_packages: tuple[str, ...] | None = None
    exclude_packages: tuple[str, ...] | None = None
    include_workspace_root: bool = False

    def validate_options(self) -> "ResolvedRule":
        """Return a copy whose options are the validated options model."""
        return replace(self, options=self.rule_type.validate_options(self.options))

    async def check(self, context, options: Any, extra: dict[str, Any]) -> None:
        await self.rule_type.check(context, options, extra)


@dataclass(frozen=True)
class ResolvedConfig:
    rules: tuple[ResolvedRule, ...] = field(default_factory=tuple)
    verbose: bool = False
    silent: bool = False


def _coerce_globs(value: Any, *, key: str, rule_id: str) -> tuple[str, ...] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise ConfigError(f"Rule {rule_id!r}: {key} must be a list of glob strings")


def find_config_file(start: Path) -> Path | None:
    """Find `.monorepolint.toml` or a pyproject.toml with a monorepolint table."""
    cur = Path(start).resolve()
    for p in (cur, *cur.parents):
        candidate = p / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
        pyproject = p / PYPROJECT_FILE_NAME
        if pyproject.is_file():
            data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
            if "monorepolint" in data.get("tool", {}):
                return pyproject
    return None


def load_config(path: Path) -> dict[str, Any]:
    """Parse a config file into its raw table."""
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Could not parse {path}: {exc}") from exc

    if path.name == PYPROJECT_FILE_NAME:
        data = data.get("tool", {}).get("monorepolint")
        if not isinstance(data, dict):
            raise ConfigError(f"{path} has no [tool.monorepolint] table")
    return data


def resolve_config(
    raw: dict[str, Any],
    *,
    registry: RuleTypeRegistry | None = None,
    verbose: bool | None = None,
    silent: bool | None = None,
) -> ResolvedConfig:
    """Bind raw rule entries to rule types and fill defaults.

    Args:
        raw: Parsed config table
        registry: Rule type registry (defaults to the built-in one)
        verbose: Overrides the config's `verbose` when not None
        silent: Overrides the config's `silent` when not None

    Raises:
        ConfigError: on unknown rule types or malformed entries
    """
    registry = registry or default_registry

    raw_rules = raw.get("rules", [])
    if not isinstance(raw_rules, list):
        raise ConfigError("`rules` must be an array of tables")

    rules: list[ResolvedRule] = []
    seen_ids: set[str] = set()
    for index, entry in enumerate(raw_rules):
        if not isinstance(entry, dict):
            raise ConfigError(f"Rule #{index} must be a table")

        type_id = str(entry.get("type", "")).strip()
        if not type_id:
            raise ConfigError(f"Rule #{index} is missing `type`")
        rule_type = registry.get(type_id)
        if rule_type is None:
            available = ", ".join(sorted(registry.ids()))
            raise ConfigError(f"Unknown rule type {type_id!r} (available: {available})")

        rule_id = str(entry.get("id", "")).strip() or f"{type_id}:{index}"
        if rule_id in seen_ids:
            raise ConfigError(f"Duplicate rule id: {rule_id}")
        seen_ids.add(rule_id)

        name = entry.get("name", type_id)
        name = str(name).strip() if isinstance(name, str) else ""

        rules.append(
            ResolvedRule(
                id=rule_id,
                rule_type=rule_type,
                options=entry.get("options"),
                name=name or UNKNOWN_RULE_NAME,
                include_packages=_coerce_globs(entry.get("include_packages"), key="include_packages", rule_id=rule_id),
                exclude_packages=_coerce_globs(entry.get("exclude_packages"), key="exclude_packages", rule_id=rule_id),
                include_workspace_root=bool(entry.get("include_workspace_root", False)),
            )
        )

    return ResolvedConfig(
        rules=tuple(rules),
        verbose=bool(raw.get("verbose", False)) if verbose is None else verbose,
        silent=bool(raw.get("silent", False)) if silent is None else silent,
    )
