"""Built-in rule types. Importing this package registers them."""

from . import banned_dependencies, file_contents, package_entry, required_scripts
from .base import RuleType
from .registry import register_rule_type, registry

__all__ = [
    "RuleType",
    "banned_dependencies",
    "file_contents",
    "package_entry",
    "register_rule_type",
    "registry",
    "required_scripts",
]
