"""Base class for rule types.

A rule type owns the check logic, the pydantic model its options must
satisfy, and an optional stats hook. Configured instances of a rule type
are ResolvedRule objects; many of them can point at one rule type.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Mapping

from pydantic import BaseModel, ValidationError

from ..errors import ConfigError

if TYPE_CHECKING:
    from ..context import Context


class RuleType(ABC):
    type_id: ClassVar[str]
    description: ClassVar[str] = ""
    options_model: ClassVar[type[BaseModel]]

    # Diagnostic hook shared by every resolved rule of this type.
    print_stats: Callable[..., None] | None = None

    def __init__(self):
        if not getattr(self, "type_id", None):
            raise ValueError("Rule type must define type_id")

    def validate_options(self, options: Any) -> BaseModel:
        """Validate raw options against `options_model`.

        Raises:
            ConfigError: if the options do not satisfy the model
        """
        if isinstance(options, self.options_model):
            return options
        try:
            return self.options_model.model_validate(options if options is not None else {})
        except ValidationError as exc:
            raise ConfigError(f"Invalid options for rule type {self.type_id!r}:\n{exc}") from exc

    def reset_stats(self) -> None:
        """Clear per-run diagnostic state; called at the start of every run."""

    @abstractmethod
    async def check(self, context: "Context", options: Any, extra: Mapping[str, Any]) -> None:  # pragma: no cover
        """Check one scope, reporting violations with `context.add_error`."""
        raise NotImplementedError
