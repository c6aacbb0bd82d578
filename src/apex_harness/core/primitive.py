"""Base primitive class and specification types."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from ..models import PrimitiveResult


@dataclass
class InputSpec:
    """Specification for a primitive input."""
    type: str  # e.g., "string", "dict", "any"
    required: bool = True
    description: str = ""
    default: Any = None


@dataclass
class PrimitiveManifest:
    """Self-description of a primitive's interface."""
    type: str  # e.g., "screenshotEval"
    description: str
    inputs: dict[str, InputSpec] = field(default_factory=dict)
    evidence: dict[str, str] = field(default_factory=dict)  # extra result fields


class Primitive(ABC):
    """
    Base class for registered verifier primitives.

    A primitive is a black-box check with a uniform contract: it takes an
    ``inputs`` mapping and returns a PrimitiveResult. Failures are
    reported through the result; ``execute`` should only raise for
    programming errors, and the dispatcher converts those into failed
    results as well.
    """

    def __init__(self, config: dict[str, Any] | None = None, logger: logging.Logger | None = None):
        self.config = config or {}
        self.logger = logger or logging.getLogger(self.__class__.__module__)

    def get_config(self, key: str, default: Any = None) -> Any:
        """Get a configuration value, walking dotted sections."""
        value: Any = self.config
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def with_defaults(self, inputs: dict[str, Any]) -> dict[str, Any]:
        """Fill missing inputs from the manifest defaults."""
        resolved = dict(inputs)
        for name, spec in self.describe().inputs.items():
            if name not in resolved and spec.default is not None:
                resolved[name] = spec.default
        return resolved

    def missing_inputs(self, inputs: dict[str, Any]) -> list[str]:
        return [
            name for name, spec in self.describe().inputs.items()
            if spec.required and name not in inputs
        ]

    @classmethod
    @abstractmethod
    def describe(cls) -> PrimitiveManifest:
        """Return the primitive's manifest describing its interface."""
        pass

    @abstractmethod
    async def execute(self, inputs: dict[str, Any]) -> PrimitiveResult:
        """Run the check and return its result."""
        pass

    async def __call__(self, inputs: dict[str, Any]) -> PrimitiveResult:
        inputs = self.with_defaults(inputs)
        missing = self.missing_inputs(inputs)
        if missing:
            return PrimitiveResult.failure(f"Missing required input: {', '.join(missing)}")
        return await self.execute(inputs)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(type={self.describe().type!r})"
